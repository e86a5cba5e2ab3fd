"""Security utilities for sqlbackup.

This module provides:
- T-SQL identifier quoting for names that cannot be bound as parameters
- Log sanitization for connection string credentials
"""

import re
import logging
from typing import Optional


class QueryInjectionError(Exception):
    """Raised when a name cannot be used safely as a T-SQL identifier."""
    pass


# sysname is nvarchar(128)
MAX_IDENTIFIER_LENGTH = 128


def quote_identifier(name: str) -> str:
    """Quote a database name for interpolation into T-SQL.

    Args:
        name: Database name

    Returns:
        Bracket quoted identifier with ']' doubled

    Raises:
        QueryInjectionError: If the name is empty, too long or contains NUL
    """
    if not name or not name.strip():
        raise QueryInjectionError("Database name cannot be empty")
    if len(name) > MAX_IDENTIFIER_LENGTH:
        raise QueryInjectionError(
            f"Database name is longer than {MAX_IDENTIFIER_LENGTH} characters"
        )
    if '\x00' in name:
        raise QueryInjectionError("Database name contains a NUL character")
    return '[' + name.replace(']', ']]') + ']'


_SECRET_PATTERN = re.compile(
    r'\b(password|pwd|api_key|token|secret)\s*=\s*(\{(?:[^}]|\}\})*\}|[^;\s]+)',
    flags=re.IGNORECASE
)
_URL_PASSWORD_PATTERN = re.compile(r'(://[^:/@\s]+:)[^@\s]+@')


def sanitize_log_message(message: str) -> str:
    """Remove credentials from log messages.

    Args:
        message: Log message to sanitize

    Returns:
        Sanitized message
    """
    message = _SECRET_PATTERN.sub(r'\1=***REDACTED***', message)
    message = _URL_PASSWORD_PATTERN.sub(r'\1***@', message)
    return message


class SensitiveDataFilter(logging.Filter):
    """Logging filter that removes credentials."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter log record to remove sensitive data.

        Args:
            record: Log record to filter

        Returns:
            True (always allow record through after sanitization)
        """
        if record.args:
            record.msg = record.getMessage()
            record.args = None
        record.msg = sanitize_log_message(str(record.msg))
        return True


def setup_secure_logging(logger_name: Optional[str] = None) -> logging.Logger:
    """Set up logger with security filters.

    Args:
        logger_name: Name of logger (None for root logger)

    Returns:
        Configured logger
    """
    logger = logging.getLogger(logger_name)
    sensitive_filter = SensitiveDataFilter()

    for handler in logger.handlers:
        handler.addFilter(sensitive_filter)

    logger.addFilter(sensitive_filter)
    return logger
