"""
Logging utilities for sqlbackup.

Provides database-aware logging using Python's contextvars: while a mode
command works on a database, every log record carries that database name.
"""

import logging
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from typing import Optional

from .security import setup_secure_logging

# Database currently being processed by a mode command
_database_context: ContextVar[Optional[str]] = ContextVar('database_name', default=None)

LOG_FORMAT = '%(asctime)s - [%(database_name)s] - %(name)s - %(levelname)s - %(message)s'


class DatabaseContextFilter(logging.Filter):
    """
    Logging filter that adds the current database name to log records.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Add database_name to the log record."""
        database_name = _database_context.get()
        record.database_name = database_name if database_name else "-"
        return True


def set_database_context(database_name: str) -> None:
    """
    Set the database name used for all subsequent log messages.

    Args:
        database_name: Database being processed
    """
    _database_context.set(database_name)


def clear_database_context() -> None:
    """Clear the current database name from the logging context."""
    _database_context.set(None)


def get_database_context() -> Optional[str]:
    """Get the database name from the logging context, or None."""
    return _database_context.get()


def setup_logging(config) -> logging.Logger:
    """
    Setup application logging to the configured rotating log file.

    Console output is produced by the commands themselves, so the log goes
    to the file only. If the file cannot be opened, warnings and errors are
    sent to stderr instead.

    Args:
        config: Config instance

    Returns:
        The configured root logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.log_level, logging.INFO))

    # Remove any existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    fallback_reason = None
    try:
        log_file = config.log_file
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_file,
            maxBytes=int(config.get('logging.max_log_size_mb', 10)) * 1024 * 1024,
            backupCount=int(config.get('logging.backup_count', 3))
        )
    except OSError as e:
        fallback_reason = e
        handler = logging.StreamHandler()
        handler.setLevel(logging.WARNING)

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(DatabaseContextFilter())
    root_logger.addHandler(handler)

    # Reduce verbosity of the driver layer
    logging.getLogger('sqlalchemy').setLevel(logging.WARNING)

    setup_secure_logging()
    if fallback_reason is not None:
        logging.getLogger(__name__).warning(
            f"Could not open log file, logging to stderr: {fallback_reason}"
        )
    return root_logger
