"""Tests for duty selection policies."""

import random

import pytest

from cleanbot.rotation.models import RotationState, User
from cleanbot.rotation.selector import match_name, select_next, shuffle_pick


def make_state(count, done=()):
    users = [User(f"user{i}", f"User {i}", f"user{i}" in done) for i in range(count)]
    return RotationState(users=users)


class TestShufflePick:
    @pytest.mark.parametrize("size", [1, 2, 5, 12])
    @pytest.mark.parametrize("seed", [0, 7, 99])
    def test_everyone_picked_once_before_anyone_twice(self, size, seed):
        """Each pick is completed before the next. Done flags are the only record
        of the epoch, so without a finish between picks the same member can repeat."""
        state = make_state(size)
        rng = random.Random(seed)
        picked = []
        for _ in range(size):
            selected = select_next(state, rng=rng)
            picked.append(selected.username)
            selected.is_done = True
        assert sorted(picked) == sorted(u.username for u in state.users)

    def test_never_picks_a_done_member(self):
        state = make_state(4, done={"user0", "user1", "user3"})
        for seed in range(20):
            assert shuffle_pick(state, random.Random(seed)).username == "user2"

    def test_epoch_resets_when_everyone_is_done(self):
        state = make_state(3, done={"user0", "user1", "user2"})
        selected = select_next(state, rng=random.Random(3))
        assert selected is not None
        assert all(not u.is_done for u in state.users)
        assert state.current is selected

    def test_empty_roster_yields_nothing(self):
        state = RotationState()
        assert select_next(state, rng=random.Random(1)) is None
        assert state.current is None

    def test_picks_are_spread_across_pending_members(self):
        state = make_state(3)
        rng = random.Random(42)
        seen = {shuffle_pick(state, rng).username for _ in range(200)}
        assert seen == {"user0", "user1", "user2"}


class TestExplicitPick:
    def test_matches_username_or_fullname(self):
        state = make_state(3)
        assert select_next(state, match_name("user1")).username == "user1"
        assert select_next(state, match_name("User 2")).username == "user2"

    def test_does_not_touch_done_flags(self):
        state = make_state(2, done={"user0", "user1"})
        select_next(state, match_name("user0"))
        assert all(u.is_done for u in state.users)

    def test_no_match_leaves_current(self):
        state = make_state(2)
        state.current = state.users[0]
        assert select_next(state, match_name("nobody")) is None
        assert state.current is state.users[0]
