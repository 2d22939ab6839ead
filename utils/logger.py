import sys
from pathlib import Path
from typing import Optional

import loguru

DEFAULT_LOG_FILE = Path.home() / ".worklogs" / "worklog.log"

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logger(log_level: str = "INFO", log_file: Optional[str] = str(DEFAULT_LOG_FILE)):
    """
    Route worklog logs to stderr and, unless disabled, to a rotating file.

    Args:
        log_level: Minimum level shown on the console. The file always gets DEBUG.
        log_file: Log file path, or None for console only.
    """
    loguru.logger.remove()

    # stderr keeps stdout free for the status spinner and results
    loguru.logger.add(sys.stderr, level=log_level, format=CONSOLE_FORMAT, colorize=True)

    if log_file:
        loguru.logger.add(
            log_file,
            level="DEBUG",
            format=FILE_FORMAT,
            rotation="10 MB",
            retention="7 days",
            enqueue=True,
            backtrace=True,
            diagnose=True,
        )

    return loguru.logger

logger = setup_logger()
