"""
Loguru sink configuration shared by the CLI and the API server.
"""
from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger


def configure_logging(settings, level: str | None = None, fmt: str | None = None) -> None:
    """
    Replace loguru's default sink with the configured ones.

    Args:
        settings: Application settings (log_level, log_file)
        level: Override for the stderr level
        fmt: Override for the stderr format
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=level or settings.log_level,
        format=fmt or "<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )

    if settings.log_file:
        Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            settings.log_file,
            level=settings.log_level,
            rotation="10 MB",
            retention=5,
            encoding="utf-8",
        )
