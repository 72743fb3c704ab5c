"""Logger configuration for looptimer."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from looptimer.config.settings import Settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <magenta>{extra[app]}</magenta> | "
    "<level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {extra[app]} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logger(config: Settings, level: str | None = None) -> None:
    """Configure loguru sinks from the application settings.

    Every record carries the configured app name, so the API and the CLI can
    share one log file and still be told apart.

    Args:
        config: Settings supplying the app name, level, log file, rotation
            and retention
        level: Overrides ``config.log_level`` (the CLI's ``--debug``)
    """
    level = level or config.log_level

    logger.remove()
    logger.configure(extra={"app": config.app_name})

    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            rotation=config.log_rotation,
            retention=config.log_retention,
            compression="zip",
            backtrace=True,
            # Variable values in tracebacks can include request bodies
            diagnose=False,
        )

    logger.debug(f"Logger configured: app={config.app_name} level={level} file={config.log_file or '-'}")
