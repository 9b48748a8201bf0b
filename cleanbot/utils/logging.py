"""
Centralized logging configuration for the cleaning rotation bot.
Handlers live on the top-level package logger; module loggers propagate to it.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_FILE = "logs/cleanbot.log"


def setup_logger(
    name: str = "cleanbot",
    level: str = "INFO",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Configure the handlers of a logger, replacing any it already has.
    
    Args:
        name: Logger name (default: "cleanbot")
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for file logging
        format_string: Optional custom format string
        
    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))
    
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger (typically for __name__).
    
    The logger itself gets no handlers. Its top-level package logger is
    configured with defaults the first time it is needed, so each record
    is written once.
    """
    base = logging.getLogger(name.split('.')[0])
    if not base.handlers:
        setup_logger(base.name, log_file=DEFAULT_LOG_FILE)
    return logging.getLogger(name)
