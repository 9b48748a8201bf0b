"""
Outbound announcement port and its Discord implementation
"""

from typing import Optional, Protocol, runtime_checkable

import discord

from ..utils.logging import get_logger
from ..utils.message_utils import send_long_message

logger = get_logger(__name__)


@runtime_checkable
class NotificationPort(Protocol):
    """Where rotation announcements are delivered"""
    
    async def send(self, channel_id: Optional[int], text: str) -> None:
        """Post text to the channel"""
        ...
    
    async def get_channel_id(self, name: str) -> Optional[int]:
        """Resolve a channel name to its identifier"""
        ...


class DiscordNotifier:
    """Delivers announcements to Discord text channels"""
    
    def __init__(self, bot: discord.Client):
        self.bot = bot
    
    async def send(self, channel_id: Optional[int], text: str) -> None:
        if channel_id is None:
            logger.warning(f"No channel to deliver announcement: {text[:60]}")
            return
        
        channel = self.bot.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self.bot.fetch_channel(channel_id)
            except discord.DiscordException as e:
                logger.error(f"Could not fetch channel {channel_id}: {e}")
                return
        
        await send_long_message(channel, text)
    
    async def get_channel_id(self, name: str) -> Optional[int]:
        name = name.lstrip('#')
        for guild in self.bot.guilds:
            channel = discord.utils.get(guild.text_channels, name=name)
            if channel:
                return channel.id
        logger.warning(f"Channel #{name} not found in any guild")
        return None
