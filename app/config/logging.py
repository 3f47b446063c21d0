"""
Logging configuration.

Configures loguru sinks for workers and scripts.
Sets up log rotation and retention policies.
"""

import sys

from loguru import logger

from app.config.settings import settings


def setup_logging(log_file: str | None = "logs/scout_commissions.log") -> None:
    """Configure logger with stderr output and file rotation."""
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)

    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="30 days",
            level="INFO",
            encoding="utf-8",
        )

    logger.info(
        f"Scout commission engine logging configured | "
        f"Environment: {settings.environment} | Log level: {settings.log_level}"
    )
