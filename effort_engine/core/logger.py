"""Loguru sinks for the effort engine.

The engine only logs through ``from loguru import logger``; applications
embedding it call ``setup_logger`` once to choose sinks and level.
"""

import sys
from pathlib import Path

from loguru import logger

from effort_engine.core.settings import AnalyticsSettings, settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logger(
    level: str | None = None,
    log_file: str | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    serialize: bool = False,
    config: AnalyticsSettings | None = None,
) -> None:
    """Replace loguru sinks with a console sink and an optional file sink.

    Args:
        level: Logging level; defaults to ``log_level`` from settings
        log_file: Optional path to log file. If None, only console logging.
        rotation: Log rotation size (e.g., "10 MB", "1 day")
        retention: Log retention period (e.g., "7 days", "1 month")
        serialize: Write the file sink as JSON lines
        config: Settings override
    """
    level = (level or (config or settings).log_level).upper()

    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            serialize=serialize,
        )

    logger.info(f"Effort engine logging at {level}")
