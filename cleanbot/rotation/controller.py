"""
Cleaning Duty Controller
Drives the duty lifecycle (finish, skip, change, zap) on top of the roster and selector
"""

import asyncio
import random
from typing import Any, List, Optional, Set

from . import messages
from .errors import PersistenceError, RotationError
from .models import RotationState, User
from .notifier import NotificationPort
from .selector import match_name, select_next
from .store import StateStore
from ..utils.logging import get_logger

logger = get_logger(__name__)


def merge_roster(existing: List[User], payload: Any) -> List[User]:
    """
    Build the new roster from a sync payload.
    
    Completion flags are carried over by username, so a sync never resets
    anyone's progress within the epoch. Entries without a username and
    repeated usernames are dropped.
    """
    if not isinstance(payload, list):
        return []
    
    previous = {u.username: u.is_done for u in existing}
    merged = []
    seen = set()
    for entry in payload:
        if not isinstance(entry, dict) or not entry.get("username"):
            logger.warning(f"Ignoring roster entry without username: {entry!r}")
            continue
        username = str(entry["username"])
        if username in seen:
            logger.warning(f"Ignoring duplicate roster entry: {username}")
            continue
        seen.add(username)
        merged.append(User(
            username=username,
            fullname=str(entry.get("fullname") or username),
            is_done=previous.get(username, False)
        ))
    return merged


class DutyController:
    """Owns the rotation state and serializes every transition on it"""
    
    def __init__(self, store: StateStore, notifier: NotificationPort,
                 settle_delay: float = 5.0, rng: Optional[random.Random] = None,
                 done_phrase: str = "掃除完了", keyword: str = "clean"):
        self.store = store
        self.notifier = notifier
        self.settle_delay = settle_delay
        self.rng = rng
        self.done_phrase = done_phrase
        self.keyword = keyword
        self.state = RotationState()
        self.lock = asyncio.Lock()
        self._pending_announcements: Set[asyncio.Task] = set()
    
    @property
    def is_synced(self) -> bool:
        return self.state.is_synced
    
    @property
    def current(self) -> Optional[User]:
        return self.state.current
    
    def log_stats(self):
        current = self.state.current.username if self.state.current else "(None)"
        logger.info(f"Users count : {len(self.state.users)}, current : {current}")
    
    # ── Lifecycle ──
    
    async def load(self) -> RotationState:
        """Load persisted state, healing a missing selection"""
        async with self.lock:
            self.state = self.store.load()
            self.log_stats()
            return self.state
    
    async def save(self):
        async with self.lock:
            self.store.save(self.state)
    
    async def drain(self):
        """Wait for delayed announcements that are still scheduled"""
        if self._pending_announcements:
            await asyncio.gather(*self._pending_announcements, return_exceptions=True)
    
    # ── Internal helpers ──
    
    def _commit(self, snapshot):
        """Persist the state, rolling the in-memory change back if the write fails"""
        try:
            self.store.save(self.state)
        except PersistenceError:
            self.state.restore(snapshot)
            raise
    
    def _require_current(self) -> User:
        if self.state.current is None:
            raise RotationError("No current duty holder")
        return self.state.current
    
    def _mark_done(self):
        self._require_current().is_done = True
    
    def _schedule_announcement(self, channel_id: Optional[int], username: str, text: str):
        task = asyncio.create_task(self._announce_later(channel_id, username, text))
        self._pending_announcements.add(task)
        task.add_done_callback(self._announcement_done)
    
    async def _announce_later(self, channel_id: Optional[int], username: str, text: str):
        await asyncio.sleep(self.settle_delay)
        async with self.lock:
            current = self.state.current
            if current is None or current.username != username:
                logger.info(f"Dropping stale announcement for {username}")
                return
            await self.notifier.send(channel_id, text)
    
    def _announcement_done(self, task: asyncio.Task):
        self._pending_announcements.discard(task)
        if not task.cancelled() and task.exception():
            logger.error(f"Delayed announcement failed: {task.exception()}")
    
    # ── Events ──
    
    async def sync_users(self, payload: Any, channel_id: Optional[int]) -> bool:
        """Replace the roster from a sync payload, selecting someone if nobody holds the duty"""
        async with self.lock:
            merged = merge_roster(self.state.users, payload)
            if not merged:
                logger.warning("Received empty users info!")
                return False
            
            logger.info("Sync-user has been succeeded.")
            logger.debug(f"New users: {[u.username for u in merged]}")
            
            snapshot = self.state.snapshot()
            previous = self.state.current
            self.state.users = merged
            self.state.current = self.state.find(previous.username) if previous else None
            if previous and self.state.current is None:
                logger.info(f"{previous.username} left the roster, reselecting")
            
            selected = None
            if self.state.current is None:
                selected = select_next(self.state, rng=self.rng)
            
            self._commit(snapshot)
            self.log_stats()
            
            if selected:
                await self.notifier.send(channel_id, messages.assigned(selected))
            return True
    
    async def remind(self, channel_id: Optional[int]) -> bool:
        """Nudge the duty holder; nothing changes"""
        async with self.lock:
            if not self.state.is_synced:
                return False
            await self.notifier.send(
                channel_id, messages.reminder(self.state.current, self.done_phrase, self.keyword))
            return True
    
    async def rotate(self, channel_id: Optional[int]) -> bool:
        """Scheduled rotation: hand the duty to a random pending member"""
        async with self.lock:
            if not self.state.is_synced:
                return False
            snapshot = self.state.snapshot()
            selected = select_next(self.state, rng=self.rng)
            if not selected:
                return False
            self._commit(snapshot)
            await self.notifier.send(channel_id, messages.assigned(selected))
            return True
    
    # ── Chat commands ──
    
    async def finish(self, channel_id: Optional[int]) -> bool:
        """Mark the current duty complete; a second call only acknowledges"""
        async with self.lock:
            current = self._require_current()
            if current.is_done:
                await self.notifier.send(channel_id, messages.ALREADY_DONE)
                return False
            
            snapshot = self.state.snapshot()
            self._mark_done()
            self._commit(snapshot)
            await self.notifier.send(channel_id, messages.finished(self.state.current))
            return True
    
    async def skip(self, channel_id: Optional[int], mark_done: bool = True) -> bool:
        """
        Move the duty to someone else.
        
        With mark_done the outgoing holder is exempted (counted as done);
        without it the duty is postponed and they stay pending. The new holder
        is announced after the settle delay, unless the duty has moved on by then.
        """
        async with self.lock:
            outgoing = self._require_current()
            notice = messages.skipped(outgoing, mark_done)
            
            snapshot = self.state.snapshot()
            if mark_done:
                self._mark_done()
            selected = select_next(self.state, rng=self.rng)
            self._commit(snapshot)
            await self.notifier.send(channel_id, notice)
            if not selected:
                return False
            username = selected.username
            announcement = messages.assigned(selected)
        
        # Sent only if the holder is unchanged when the delay ends
        self._schedule_announcement(channel_id, username, announcement)
        return True
    
    async def change(self, channel_id: Optional[int], name: str) -> bool:
        """Hand the duty to the member named by username or fullname"""
        async with self.lock:
            snapshot = self.state.snapshot()
            selected = select_next(self.state, match_name(name))
            if not selected:
                await self.notifier.send(channel_id, messages.INVALID_SELECTION)
                return False
            self._commit(snapshot)
            await self.notifier.send(channel_id, messages.changed(selected))
            return True
    
    async def zap(self, channel_id: Optional[int], name: str) -> bool:
        """Punitive reassignment: the outgoing holder is forced done and the named member takes over"""
        async with self.lock:
            self._require_current()
            pick = match_name(name)
            if pick(self.state) is None:
                await self.notifier.send(channel_id, messages.INVALID_SELECTION)
                return False
            
            snapshot = self.state.snapshot()
            self._mark_done()
            selected = select_next(self.state, pick)
            self._commit(snapshot)
            await self.notifier.send(channel_id, messages.zapped(selected))
            return True
    
    async def who(self, channel_id: Optional[int]):
        async with self.lock:
            await self.notifier.send(channel_id, messages.who(self._require_current()))
    
    async def send_list(self, channel_id: Optional[int]):
        async with self.lock:
            await self.notifier.send(
                channel_id, messages.roster_list(self._require_current(), self.state.users))
