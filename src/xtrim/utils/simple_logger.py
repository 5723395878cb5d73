"""Progress-style log records for multi-step operations such as imports."""

import logging
import sys

from .logging_config import NOISY_LOGGERS


class ProgressFormatter(logging.Formatter):
    """Formatter that renders progress records as short status lines."""

    def format(self, record):
        module = record.name.split('.')[-1]
        progress_type = getattr(record, 'progress_type', None)

        if progress_type == 'start':
            return f"▶ {module}: {record.getMessage()}"
        if progress_type == 'update':
            return f"   · {record.getMessage()}"
        if progress_type == 'complete':
            return f"✓ {module}: {record.getMessage()}"
        return f"{record.levelname:5s} | {module}: {record.getMessage()}"


def setup_logging(level: int = logging.INFO) -> None:
    """Set up logging with progress formatting and quiet external libraries."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(ProgressFormatter())
    root_logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _log_progress(logger: logging.Logger, message: str, progress_type: str) -> None:
    if not logger.isEnabledFor(logging.INFO):
        return
    record = logger.makeRecord(
        logger.name, logging.INFO, "", 0, message, (), None
    )
    record.progress_type = progress_type
    logger.handle(record)


def log_start(logger: logging.Logger, message: str):
    """Log the start of a task."""
    _log_progress(logger, message, 'start')


def log_update(logger: logging.Logger, message: str):
    """Log a progress update."""
    _log_progress(logger, message, 'update')


def log_complete(logger: logging.Logger, message: str):
    """Log task completion."""
    _log_progress(logger, message, 'complete')
