"""Tests for rotation state persistence."""

import json

import pytest

from cleanbot.rotation import PersistenceError, RotationState, StateStore, User


def test_missing_record_bootstraps_and_saves_once(store, state_file, monkeypatch):
    saves = []
    original_save = store.save
    monkeypatch.setattr(store, "save", lambda state: (saves.append(state), original_save(state)))

    state = store.load()

    assert state.users == []
    assert state.current is None
    assert len(saves) == 1
    assert json.loads(state_file.read_text(encoding="utf-8")) == {"users": [], "current": None}


def test_empty_record_counts_as_bootstrap(store, state_file):
    state_file.parent.mkdir(parents=True)
    state_file.write_text("   \n", encoding="utf-8")

    state = store.load()

    assert state.users == []
    assert json.loads(state_file.read_text(encoding="utf-8"))["users"] == []


def test_round_trip_preserves_roster_and_current(store):
    users = [User("alice", "Alice", True), User("bob", "Bob", False)]
    state = RotationState(users=users, current=users[1])

    store.save(state)
    loaded = store.load()

    assert [(u.username, u.fullname, u.is_done) for u in loaded.users] == [
        ("alice", "Alice", True), ("bob", "Bob", False)]
    assert loaded.current.username == "bob"
    assert loaded.current is loaded.find("bob")


def test_record_uses_camel_case_done_flag(store, state_file):
    users = [User("alice", "Alice", True)]
    store.save(RotationState(users=users, current=users[0]))

    raw = json.loads(state_file.read_text(encoding="utf-8"))
    assert raw["users"] == [{"username": "alice", "fullname": "Alice", "isDone": True}]
    assert raw["current"]["username"] == "alice"


def test_missing_current_is_healed_and_saved(store, state_file, write_state):
    write_state([User("alice", "Alice"), User("bob", "Bob")])

    state = store.load()

    assert state.current.username in {"alice", "bob"}
    raw = json.loads(state_file.read_text(encoding="utf-8"))
    assert raw["current"]["username"] == state.current.username


def test_unknown_current_is_healed(store, write_state):
    write_state([User("alice", "Alice")], User("ghost", "Ghost"))

    state = store.load()

    assert state.current.username == "alice"


def test_corrupt_record_raises(store, state_file):
    state_file.parent.mkdir(parents=True)
    state_file.write_text("{not json", encoding="utf-8")

    with pytest.raises(PersistenceError):
        store.load()


def test_save_failure_is_wrapped(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")
    store = StateStore(str(blocker / "users.json"))

    with pytest.raises(PersistenceError, match="Could not save state"):
        store.save(RotationState())
