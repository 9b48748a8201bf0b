"""
Cleaning Rotation Commands
Discord front end for the cleaning duty rotation
"""

import discord
from discord.ext import commands
from typing import Any, Optional

from .. import __version__
from ..config import get_config
from ..rotation import (
    Dispatcher,
    DutyController,
    ReminderTick,
    RotationTick,
    StateStore,
    SyncUsers,
    parse_command,
)
from ..rotation.dispatcher import InboundEvent
from ..rotation.notifier import DiscordNotifier
from ..utils.logging import get_logger

logger = get_logger(__name__)

SYNC_REQUEST_EVENT = "sync_request"


class RotationCog(commands.Cog):
    """Routes mentions, roster syncs and schedule ticks to the duty controller"""
    
    def __init__(self, bot: commands.Bot, cfg) -> None:
        self.bot = bot
        self.config = cfg
        self.notifier = DiscordNotifier(bot)
        self.controller = DutyController(
            StateStore(cfg.CLEAN_STATE_FILE),
            self.notifier,
            settle_delay=cfg.CLEAN_SETTLE_DELAY,
            done_phrase=cfg.CLEAN_DONE_PHRASE,
            keyword=cfg.CLEAN_COMMAND
        )
        self.dispatcher = Dispatcher(self.controller, self.notifier, cfg.CLEAN_NOTIFY_CHANNEL)
        self._sync_requested = False
    
    async def cog_load(self) -> None:
        """Load persisted state before any event is handled"""
        await self.controller.load()
        logger.info(f"cleanbot rotation v{__version__} has been initialized.")
    
    async def cog_unload(self) -> None:
        """Persist the final state"""
        logger.debug("onStop()")
        await self.controller.drain()
        await self.controller.save()
    
    async def _run(self, event: InboundEvent, reply_channel: Optional[discord.abc.Messageable] = None) -> None:
        try:
            await self.dispatcher.dispatch(event)
        except Exception as e:
            logger.error(f"Failed to handle {type(event).__name__}: {e}")
            if reply_channel is not None:
                await reply_channel.send("❌ An error occurred while updating the cleaning rotation.")
    
    @commands.Cog.listener()
    async def on_ready(self) -> None:
        """Ask the roster bridge for a fresh roster, once per process"""
        if self._sync_requested:
            return
        self._sync_requested = True
        logger.debug("onStart()")
        try:
            self.bot.dispatch(SYNC_REQUEST_EVENT)
        except Exception as e:
            logger.debug(f"Sync request was not delivered: {e}")
    
    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot or self.bot.user is None:
            return
        if self.bot.user not in message.mentions:
            return
        
        # Strip bot mentions from the command text
        text = message.content
        for mention in (f"<@{self.bot.user.id}>", f"<@!{self.bot.user.id}>"):
            text = text.replace(mention, " ")
        
        command = parse_command(
            text,
            channel_id=message.channel.id,
            done_phrase=self.config.CLEAN_DONE_PHRASE,
            keyword=self.config.CLEAN_COMMAND
        )
        if command is None:
            return
        
        logger.debug(f'[{message.channel}] {message.author}: {command.kind.value} {command.argument}')
        await self._run(command, message.channel)
    
    @commands.Cog.listener()
    async def on_sync_user(self, users: Any) -> None:
        await self._run(SyncUsers(users))
    
    @commands.Cog.listener()
    async def on_scheduled_notify(self) -> None:
        await self._run(ReminderTick())
    
    @commands.Cog.listener()
    async def on_scheduled_select(self) -> None:
        await self._run(RotationTick())


async def setup(bot: commands.Bot) -> None:
    cfg = getattr(bot, '_config', None) or get_config()
    await bot.add_cog(RotationCog(bot, cfg))
