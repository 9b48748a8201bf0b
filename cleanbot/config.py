import os
import re
from datetime import time
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from dotenv import load_dotenv

load_dotenv()

# Import logger after load_dotenv to ensure proper initialization
from .utils.logging import get_logger
logger = get_logger(__name__)

_TIME_PATTERN = re.compile(r'^(\d{1,2}):(\d{2})$')


def parse_clock(value: str) -> time:
    """Parse an HH:MM string into a time of day"""
    match = _TIME_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"'{value}' is not in HH:MM format")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"'{value}' is not a valid time of day")
    return time(hour=hour, minute=minute)


class Config:
    """Configuration management with environment validation"""
    
    # Discord Configuration
    DISCORD_TOKEN: str
    
    # Rotation
    CLEAN_NOTIFY_CHANNEL: str = 'general'
    CLEAN_STATE_FILE: str = 'data/users.json'
    CLEAN_SETTLE_DELAY: float = 5.0
    CLEAN_DONE_PHRASE: str = '掃除完了'
    CLEAN_COMMAND: str = 'clean'
    
    # Roster source (optional)
    CLEAN_ROSTER_FILE: Optional[str] = None
    
    # Schedule
    CLEAN_TIMEZONE: str = 'UTC'
    CLEAN_NOTIFY_TIMES: str = '10:00'
    CLEAN_SELECT_TIME: str = '09:00'
    CLEAN_SELECT_WEEKDAY: int = 0  # Monday
    
    def __init__(self):
        self._validate_and_load()
    
    def _validate_and_load(self):
        """Validate and load configuration from environment"""
        errors = []
        
        # Required configuration
        self.DISCORD_TOKEN = os.getenv('DISCORD_TOKEN')
        if not self.DISCORD_TOKEN:
            errors.append("DISCORD_TOKEN is required")
        
        # Blank values fall back to the defaults
        for key in ('CLEAN_NOTIFY_CHANNEL', 'CLEAN_STATE_FILE', 'CLEAN_DONE_PHRASE',
                    'CLEAN_COMMAND', 'CLEAN_TIMEZONE', 'CLEAN_NOTIFY_TIMES', 'CLEAN_SELECT_TIME'):
            value = (os.getenv(key) or '').strip()
            if value:
                setattr(self, key, value)
        
        self.CLEAN_ROSTER_FILE = (os.getenv('CLEAN_ROSTER_FILE') or '').strip() or None
        
        if os.getenv('CLEAN_SETTLE_DELAY'):
            try:
                self.CLEAN_SETTLE_DELAY = float(os.getenv('CLEAN_SETTLE_DELAY'))
                if self.CLEAN_SETTLE_DELAY < 0:
                    errors.append("CLEAN_SETTLE_DELAY must not be negative")
            except ValueError:
                errors.append("CLEAN_SETTLE_DELAY must be a valid float")
        
        if os.getenv('CLEAN_SELECT_WEEKDAY'):
            try:
                self.CLEAN_SELECT_WEEKDAY = int(os.getenv('CLEAN_SELECT_WEEKDAY'))
                if not 0 <= self.CLEAN_SELECT_WEEKDAY <= 6:
                    errors.append("CLEAN_SELECT_WEEKDAY must be between 0 (Monday) and 6 (Sunday)")
            except ValueError:
                errors.append("CLEAN_SELECT_WEEKDAY must be a valid integer")
        
        try:
            ZoneInfo(self.CLEAN_TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError):
            errors.append(f"CLEAN_TIMEZONE '{self.CLEAN_TIMEZONE}' is not a known time zone")
        else:
            try:
                self.get_notify_times()
                self.get_select_time()
            except ValueError as e:
                errors.append(f"Schedule time error: {e}")
        
        if errors:
            raise ValueError(f"Configuration errors: {'; '.join(errors)}")
    
    def is_valid(self) -> bool:
        """Check if the configuration is valid"""
        return bool(self.DISCORD_TOKEN)
    
    def get_timezone(self) -> ZoneInfo:
        return ZoneInfo(self.CLEAN_TIMEZONE)
    
    def get_notify_times(self) -> List[time]:
        """Reminder times of day, in the configured time zone"""
        tz = self.get_timezone()
        return [parse_clock(part).replace(tzinfo=tz)
                for part in self.CLEAN_NOTIFY_TIMES.split(',') if part.strip()]
    
    def get_select_time(self) -> time:
        """Weekly rotation time of day, in the configured time zone"""
        return parse_clock(self.CLEAN_SELECT_TIME).replace(tzinfo=self.get_timezone())


# Global configuration instance
_config_instance = None

def get_config() -> Config:
    """Get or create the global configuration instance"""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance

def init_config() -> Config:
    """Initialize configuration with error handling"""
    global _config_instance
    try:
        _config_instance = Config()
        return _config_instance
    except Exception as e:
        logger.error(f"Configuration Error: {e}")
        raise

# Create config instance on import, but handle errors gracefully
try:
    config = Config()
    _config_instance = config
    logger.info("Configuration loaded successfully")
    logger.info(f"Notify channel: #{config.CLEAN_NOTIFY_CHANNEL}, state file: {config.CLEAN_STATE_FILE}")
except Exception as e:
    logger.warning(f"Configuration error: {e}")
    logger.warning("Some features may not work without proper configuration")
    config = None
