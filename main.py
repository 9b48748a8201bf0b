#!/usr/bin/env python3
"""
Cleaning Rotation Bot
Main entry point for the Discord cleaning duty rotation bot.

Features:
- Random no-repeat duty selection with automatic epoch reset
- Completion tracking, deferral, manual and punitive reassignment
- Scheduled reminders and weekly rotation
- Roster synchronization from a JSON roster file
"""

import asyncio
import discord
from discord.ext import commands
import fcntl
import os
import sys
from pathlib import Path
from cleanbot.utils.logging import setup_logger

# Set up logging
logger = setup_logger("cleanbot", level="INFO", log_file="logs/cleanbot.log")

COGS = [
    'cleanbot.commands.rotation',
    'cleanbot.events.scheduler',
    'cleanbot.bridge.roster_file',
]


def acquire_instance_lock():
    """Ensure only one bot instance writes the rotation state"""
    lock_file = Path("data/bot.lock")
    lock_file.parent.mkdir(parents=True, exist_ok=True)
    
    try:
        lock_fd = os.open(str(lock_file), os.O_CREAT | os.O_WRONLY | os.O_TRUNC)
        
        # Try to acquire exclusive lock (non-blocking)
        fcntl.flock(lock_fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        
        os.write(lock_fd, f"{os.getpid()}\n".encode())
        os.fsync(lock_fd)
        
        logger.info(f"✅ Acquired instance lock (PID: {os.getpid()})")
        return lock_fd
        
    except OSError as e:
        logger.critical("❌ ANOTHER BOT INSTANCE IS ALREADY RUNNING!")
        logger.critical(f"Lock file: {lock_file}")
        logger.critical(f"Error: {e}")
        sys.exit(1)


async def setup_bot():
    """Setup and configure the bot"""
    try:
        from cleanbot.config import config as imported_config, init_config
        
        if imported_config is None:
            logger.info("Attempting to reinitialize configuration...")
            config_instance = init_config()
        else:
            config_instance = imported_config
        
        logger.info("Configuration validated successfully")
        logger.info(f"Rotation state file: {config_instance.CLEAN_STATE_FILE}")
        logger.info(f"Announcements go to #{config_instance.CLEAN_NOTIFY_CHANNEL}")
        
        intents = discord.Intents.default()
        intents.message_content = True
        
        bot = commands.Bot(command_prefix='!', intents=intents, help_command=None)
        bot._config = config_instance
        
        for cog in COGS:
            await bot.load_extension(cog)
            logger.info(f"✅ Loaded cog: {cog}")
        
        return bot
        
    except ValueError as e:
        logger.error(f"Configuration Error: {e}")
        logger.error("Please check your environment variables and try again.")
        return None
    except Exception as e:
        logger.error(f"Setup Error: {e}")
        return None


async def main():
    """Main entry point"""
    logger.info("Starting cleaning rotation bot...")
    
    lock_fd = acquire_instance_lock()
    
    bot = await setup_bot()
    if not bot:
        logger.error("Bot setup failed. Exiting.")
        os.close(lock_fd)
        return
    
    try:
        logger.info("Starting bot...")
        await bot.start(bot._config.DISCORD_TOKEN)
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
    except Exception as e:
        logger.error(f"Bot error: {e}")
    finally:
        # Unloading the rotation cog persists the final state
        for cog in reversed(COGS):
            try:
                await bot.unload_extension(cog)
            except Exception as e:
                logger.error(f"Failed to unload {cog}: {e}")
        await bot.close()
        logger.info("Bot shutdown complete")
        
        os.close(lock_fd)
        logger.info("✅ Released instance lock")


def run():
    asyncio.run(main())


if __name__ == '__main__':
    run()
