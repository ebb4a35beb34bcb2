"""Logging setup"""

import logging

from .config import settings

DEAD_LETTER_LOGGER = "unishare.notifications.dead_letter"


def configure_logging() -> None:
    """Install the process-wide log format at the configured level."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="[%(levelname)s] %(name)s: %(message)s",
    )
    # Keep SQL echo out of application logs
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
