"""
Pytest fixtures for cleaning rotation tests.

Provides a temporary state file, a mock notification port and seeded randomness.
"""

import json
import random
from unittest.mock import AsyncMock

import pytest

from cleanbot.rotation import Dispatcher, DutyController, StateStore, User

NOTIFY_CHANNEL_ID = 1000


@pytest.fixture
def rng():
    """Seeded random source for reproducible picks."""
    return random.Random(1234)


@pytest.fixture
def state_file(tmp_path):
    return tmp_path / "data" / "users.json"


@pytest.fixture
def store(state_file, rng):
    return StateStore(str(state_file), rng=rng)


@pytest.fixture
def notifier():
    """Notification port that records announcements."""
    port = AsyncMock()
    port.get_channel_id.return_value = NOTIFY_CHANNEL_ID
    return port


@pytest.fixture
def controller(store, notifier, rng):
    return DutyController(store, notifier, settle_delay=0, rng=rng)


@pytest.fixture
def dispatcher(controller, notifier):
    return Dispatcher(controller, notifier, notify_channel="general")


@pytest.fixture
def roster_payload():
    return [
        {"username": "alice", "fullname": "Alice"},
        {"username": "bob", "fullname": "Bob"},
        {"username": "carol", "fullname": "Carol Smith"},
    ]


@pytest.fixture
def write_state(state_file):
    """Write a raw persisted record to the state file."""
    def _write(users, current=None):
        state_file.parent.mkdir(parents=True, exist_ok=True)
        state_file.write_text(json.dumps({
            "users": [u.to_dict() for u in users],
            "current": current.to_dict() if current else None
        }), encoding="utf-8")
    return _write


@pytest.fixture
async def synced_controller(controller, write_state):
    """Controller loaded with alice/bob/carol, alice on duty."""
    users = [User("alice", "Alice"), User("bob", "Bob"), User("carol", "Carol Smith")]
    write_state(users, users[0])
    await controller.load()
    return controller


@pytest.fixture
def sent(notifier):
    """Texts passed to notifier.send, in order."""
    def _sent():
        return [c.args[1] for c in notifier.send.await_args_list]
    return _sent
