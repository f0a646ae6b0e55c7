"""
Logging for the radar.

Core modules log through loguru; the API layer and the HTTP libraries under
the generator use stdlib logging, whose chatter is turned down here.
"""

import logging
import os
import sys
from pathlib import Path

from loguru import logger

from radar.config import settings

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

# Libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "anthropic")


def setup_logging(
    level: str | None = None,
    log_file: Path | None = None,
    rotation: str = "10 MB",
    retention: str = "1 week",
) -> None:
    """
    Configure the loguru sinks.

    Args:
        level: Log level, defaults to RADAR_LOG_LEVEL
        log_file: File sink path, defaults to RADAR_LOG_FILE (none when unset)
        rotation: When to rotate the file sink (e.g., "10 MB", "1 day")
        retention: How long rotated files are kept (e.g., "1 week")
    """
    level = (level or settings.radar.log_level).upper()
    log_file = log_file or settings.radar.log_file

    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=level,
            format=FILE_FORMAT,
            rotation=rotation,
            retention=retention,
            compression="gz",
            encoding="utf-8",
        )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.debug(f"Logging configured: level={level}, file={log_file or '-'}")


if os.environ.get("RADAR_DISABLE_LOGGING") != "1":
    setup_logging()
