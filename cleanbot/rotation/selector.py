"""
Duty selection policies
Picks the next duty holder from the roster without mutating persistence
"""

import random
from typing import Callable, Optional

from .models import RotationState, User
from ..utils.logging import get_logger

logger = get_logger(__name__)

PickPolicy = Callable[[RotationState], Optional[User]]


def shuffle_pick(state: RotationState, rng: Optional[random.Random] = None) -> Optional[User]:
    """
    Default policy: uniform random pick among pending members.
    
    When nobody is pending the epoch is over, so every done flag is reset and
    the whole roster becomes pending again. Returns None only for an empty roster.
    """
    if not state.users:
        return None

    rng = rng or random
    pending = state.pending()
    if not pending:
        state.reset_epoch()
        pending = list(state.users)
        logger.info("State has been re-set!")
    
    # random.shuffle is a Fisher-Yates shuffle
    rng.shuffle(pending)
    return pending[0]


def match_name(name: str) -> PickPolicy:
    """Explicit policy: the first member whose username or fullname equals name"""
    def pick(state: RotationState) -> Optional[User]:
        for user in state.users:
            if user.username == name or user.fullname == name:
                return user
        return None
    return pick


def select_next(state: RotationState, pick: Optional[PickPolicy] = None,
                rng: Optional[random.Random] = None) -> Optional[User]:
    """
    Replace the current selection using the given policy.
    
    Args:
        state: Rotation state to update in place
        pick: Explicit policy; the shuffle policy is used when omitted
        rng: Random source for the shuffle policy
        
    Returns:
        The new current user, or None when no candidate exists (current is left untouched)
    """
    if pick is None:
        selected = shuffle_pick(state, rng)
    else:
        selected = pick(state)
    
    if selected is None:
        logger.warning("Failed to select next user!")
        return None
    
    state.current = selected
    logger.info(f"Selected : {selected.username}")
    return selected
