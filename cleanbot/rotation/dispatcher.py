"""
Inbound event dispatch
Maps chat commands, roster syncs and scheduler ticks onto DutyController operations
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from . import messages
from .controller import DutyController
from ..utils.logging import get_logger

logger = get_logger(__name__)


class CommandKind(Enum):
    FINISH = "finish"
    FIN = "fin"
    WHO = "who"
    CHANGE = "change"
    ZAP = "zap"
    POSTPONE = "postpone"
    SKIP = "skip"
    LIST = "list"


SUBCOMMANDS = {
    "who": CommandKind.WHO,
    "change": CommandKind.CHANGE,
    "zap": CommandKind.ZAP,
    "postpone": CommandKind.POSTPONE,
    "skip": CommandKind.SKIP,
    "list": CommandKind.LIST,
    "fin": CommandKind.FIN,
}


@dataclass
class ChatCommand:
    kind: CommandKind
    channel_id: Optional[int] = None
    argument: str = ""


@dataclass
class SyncUsers:
    users: Any = field(default_factory=list)


@dataclass
class ReminderTick:
    pass


@dataclass
class RotationTick:
    pass


InboundEvent = Union[ChatCommand, SyncUsers, ReminderTick, RotationTick]


def parse_command(text: str, channel_id: Optional[int] = None,
                  done_phrase: str = "掃除完了", keyword: str = "clean") -> Optional[ChatCommand]:
    """
    Parse a chat message into a command.
    
    Returns None for anything that is not a rotation command. The name taken
    by change/zap is the rest of the line so fullnames with spaces match.
    """
    tokens = text.split()
    if not tokens:
        return None
    
    if tokens[0] == done_phrase:
        return ChatCommand(CommandKind.FINISH, channel_id)
    
    if tokens[0] != keyword or len(tokens) < 2:
        return None
    
    kind = SUBCOMMANDS.get(tokens[1])
    if kind is None:
        return None
    return ChatCommand(kind, channel_id, " ".join(tokens[2:]))


class Dispatcher:
    """Routes every inbound event to the controller"""
    
    def __init__(self, controller: DutyController, notifier, notify_channel: str = "general"):
        self.controller = controller
        self.notifier = notifier
        self.notify_channel = notify_channel
    
    async def _default_channel(self) -> Optional[int]:
        return await self.notifier.get_channel_id(self.notify_channel)
    
    async def dispatch(self, event: InboundEvent):
        if isinstance(event, ChatCommand):
            await self._handle_command(event)
        elif isinstance(event, SyncUsers):
            await self.controller.sync_users(event.users, await self._default_channel())
        elif isinstance(event, ReminderTick):
            if self.controller.is_synced:
                await self.controller.remind(await self._default_channel())
        elif isinstance(event, RotationTick):
            if self.controller.is_synced:
                await self.controller.rotate(await self._default_channel())
        else:
            raise TypeError(f"Unknown inbound event: {event!r}")
    
    async def _handle_command(self, command: ChatCommand):
        if not self.controller.is_synced:
            await self.notifier.send(command.channel_id, messages.NOT_SYNCED)
            return
        
        logger.debug(f"Handling command {command.kind.value} from channel {command.channel_id}")
        kind = command.kind
        if kind is CommandKind.FINISH:
            await self.controller.finish(command.channel_id)
        elif kind is CommandKind.WHO:
            await self.controller.who(command.channel_id)
        elif kind is CommandKind.LIST:
            await self.controller.send_list(command.channel_id)
        elif kind is CommandKind.CHANGE:
            await self.controller.change(await self._default_channel(), command.argument)
        elif kind is CommandKind.ZAP:
            await self.controller.zap(await self._default_channel(), command.argument)
        elif kind is CommandKind.POSTPONE:
            await self.controller.skip(await self._default_channel(), mark_done=False)
        elif kind is CommandKind.SKIP:
            await self.controller.skip(await self._default_channel(), mark_done=True)
        elif kind is CommandKind.FIN:
            await self.controller.finish(await self._default_channel())
        else:
            raise TypeError(f"Unhandled command kind: {kind!r}")
