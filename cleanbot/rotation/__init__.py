"""
Cleaning rotation core
Roster model, duty selection, persistence and the duty lifecycle
"""

from .controller import DutyController
from .dispatcher import (
    ChatCommand,
    CommandKind,
    Dispatcher,
    ReminderTick,
    RotationTick,
    SyncUsers,
    parse_command,
)
from .errors import PersistenceError, RotationError
from .models import RotationState, User
from .store import StateStore

__all__ = [
    'ChatCommand',
    'CommandKind',
    'Dispatcher',
    'DutyController',
    'PersistenceError',
    'ReminderTick',
    'RotationError',
    'RotationState',
    'RotationTick',
    'StateStore',
    'SyncUsers',
    'User',
    'parse_command',
]
