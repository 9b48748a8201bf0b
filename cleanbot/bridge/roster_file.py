"""
Roster file bridge
Answers sync requests by reading the roster from a JSON file
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from discord.ext import commands

from ..config import get_config
from ..utils.logging import get_logger

logger = get_logger(__name__)

SYNC_USER_EVENT = "sync_user"


def read_roster(path: Path) -> Optional[List[Dict[str, Any]]]:
    """Read a JSON list of {username, fullname} entries, or None if unusable"""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            entries = json.load(f)
    except FileNotFoundError:
        logger.warning(f"Roster file {path} does not exist")
        return None
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read roster file {path}: {e}")
        return None
    
    if not isinstance(entries, list):
        logger.error(f"Invalid roster file {path}, expected a list")
        return None
    return entries


class RosterFileBridge(commands.Cog):
    """Roster source backed by a local JSON file"""
    
    def __init__(self, bot: commands.Bot, roster_file: Optional[str]) -> None:
        self.bot = bot
        self.roster_file = Path(roster_file) if roster_file else None
    
    @commands.Cog.listener()
    async def on_sync_request(self) -> None:
        if self.roster_file is None:
            logger.debug("No roster file configured, ignoring sync request")
            return
        
        entries = read_roster(self.roster_file)
        if entries is None:
            return
        logger.info(f"Syncing {len(entries)} roster entries from {self.roster_file}")
        self.bot.dispatch(SYNC_USER_EVENT, entries)


async def setup(bot: commands.Bot) -> None:
    cfg = getattr(bot, '_config', None) or get_config()
    await bot.add_cog(RosterFileBridge(bot, cfg.CLEAN_ROSTER_FILE))
