"""Centralized logging configuration for Xtrim."""

import logging
import sys
from typing import Optional

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = (
    "PIL",
    "numba",
    "librosa",
    "audioread",
    "aiofiles",
    "asyncio",
)


def configure_logging(
    level: Optional[str] = None,
    format: Optional[str] = None,
    suppress_external: bool = True
) -> None:
    """Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR), defaults to
            the configured ``log_level``
        format: Custom format string, or None for default
        suppress_external: If True, suppress noisy external library logs
    """
    if level is None:
        from ..config import settings
        level = "DEBUG" if settings.debug else settings.log_level

    # Default format: levelname | time | filename:lineno | message
    if format is None:
        format = "%(levelname)-5s | %(asctime)s | %(filename)s:%(lineno)d | %(message)s"

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=format,
        datefmt="%H:%M:%S",
        stream=sys.stdout,
        force=True  # Reconfigure if already configured
    )

    if suppress_external:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
