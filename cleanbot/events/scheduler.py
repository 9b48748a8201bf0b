"""
Rotation schedule
Fires reminder and rotation ticks as bot events at the configured times
"""

from datetime import datetime

from discord.ext import commands, tasks

from ..config import get_config
from ..utils.logging import get_logger

logger = get_logger(__name__)

NOTIFY_EVENT = "scheduled_notify"
SELECT_EVENT = "scheduled_select"


class SchedulerCog(commands.Cog):
    """Daily reminders and a weekly rotation tick"""
    
    def __init__(self, bot: commands.Bot, cfg) -> None:
        self.bot = bot
        self.config = cfg
        self.notify_loop.change_interval(time=cfg.get_notify_times())
        self.select_loop.change_interval(time=cfg.get_select_time())
    
    async def cog_load(self) -> None:
        self.notify_loop.start()
        self.select_loop.start()
        logger.info(f"Scheduled reminders at {self.config.CLEAN_NOTIFY_TIMES}, "
                    f"rotation on weekday {self.config.CLEAN_SELECT_WEEKDAY} at {self.config.CLEAN_SELECT_TIME} "
                    f"({self.config.CLEAN_TIMEZONE})")
    
    async def cog_unload(self) -> None:
        self.notify_loop.cancel()
        self.select_loop.cancel()
    
    def is_select_day(self, now: datetime) -> bool:
        return now.weekday() == self.config.CLEAN_SELECT_WEEKDAY
    
    @tasks.loop(hours=24)
    async def notify_loop(self) -> None:
        logger.debug("Firing scheduled reminder")
        self.bot.dispatch(NOTIFY_EVENT)
    
    @tasks.loop(hours=24)
    async def select_loop(self) -> None:
        if not self.is_select_day(datetime.now(self.config.get_timezone())):
            return
        logger.info("Firing scheduled rotation")
        self.bot.dispatch(SELECT_EVENT)
    
    @notify_loop.before_loop
    async def _before_notify(self) -> None:
        await self.bot.wait_until_ready()
    
    @select_loop.before_loop
    async def _before_select(self) -> None:
        await self.bot.wait_until_ready()


async def setup(bot: commands.Bot) -> None:
    cfg = getattr(bot, '_config', None) or get_config()
    await bot.add_cog(SchedulerCog(bot, cfg))
