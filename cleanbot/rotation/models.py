"""
Rotation data model
Roster members and the persisted (roster, current selection) aggregate
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class User:
    """A duty-eligible roster member"""
    username: str
    fullname: str
    is_done: bool = False
    
    @property
    def label(self) -> str:
        return f"{self.fullname} ({self.username})"
    
    def to_dict(self) -> Dict[str, Any]:
        return {"username": self.username, "fullname": self.fullname, "isDone": self.is_done}
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        username = str(data["username"])
        return cls(
            username=username,
            fullname=str(data.get("fullname") or username),
            is_done=bool(data.get("isDone", False))
        )


@dataclass
class RotationState:
    """
    The roster plus the current selection.
    
    ``current`` always aliases the roster entry with the same username, so
    flipping its done flag updates the roster too.
    """
    users: List[User] = field(default_factory=list)
    current: Optional[User] = None
    
    @property
    def is_synced(self) -> bool:
        """True once a roster exists and someone holds the duty"""
        return len(self.users) > 0 and self.current is not None
    
    def find(self, username: str) -> Optional[User]:
        for user in self.users:
            if user.username == username:
                return user
        return None
    
    def pending(self) -> List[User]:
        return [u for u in self.users if not u.is_done]
    
    def reset_epoch(self):
        for user in self.users:
            user.is_done = False
    
    def snapshot(self) -> Dict[str, Any]:
        """Capture a copy of the state for rollback"""
        return self.to_dict()
    
    def restore(self, snapshot: Dict[str, Any]):
        """Roll back to a previously captured snapshot"""
        restored = RotationState.from_dict(snapshot)
        self.users = restored.users
        self.current = restored.current
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "users": [u.to_dict() for u in self.users],
            "current": self.current.to_dict() if self.current else None
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RotationState":
        """Build a state from its persisted form, rebinding current to the roster entry"""
        users = [User.from_dict(entry) for entry in data.get("users") or []]
        state = cls(users=users)
        current = data.get("current")
        if current and current.get("username"):
            state.current = state.find(str(current["username"]))
        return state
