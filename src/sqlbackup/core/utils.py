"""
Shared formatting and naming helpers
"""

import ntpath
import posixpath
from datetime import datetime
from typing import Union

# Characters Windows does not allow in file names; control characters are added below
INVALID_FILENAME_CHARS = '<>:"/\\|?*'


def format_duration(seconds: float) -> str:
    """Format an elapsed time as h:mm:ss.fff.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string
    """
    if seconds < 0:
        return "N/A"

    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(int(minutes), 60)
    return f"{hours}:{minutes:02d}:{secs:06.3f}"


def format_datetime(dt: Union[datetime, str, None], format: str = 'short') -> str:
    """Format datetime in various formats.

    Args:
        dt: Datetime object or ISO string
        format: 'short', 'long', 'iso'

    Returns:
        Formatted datetime string
    """
    if dt is None:
        return "N/A"

    if isinstance(dt, str):
        dt = datetime.fromisoformat(dt.replace('Z', '+00:00'))

    if format == 'short':
        return dt.strftime('%Y-%m-%d %H:%M')
    elif format == 'long':
        return dt.strftime('%Y-%m-%d %H:%M:%S')
    elif format == 'iso':
        return dt.isoformat()
    else:
        return str(dt)


def format_size(size: float, precision: int = 2) -> str:
    """Format a byte count with decimal (1000 based) units.

    Args:
        size: Number of bytes
        precision: Decimal precision

    Returns:
        Formatted string (e.g., "1.50 GB")
    """
    units = ['B', 'KB', 'MB', 'GB', 'TB', 'PB']
    index = 0
    while size >= 1000 and index < len(units) - 1:
        size /= 1000
        index += 1

    return f"{size:.{precision}f} {units[index]}"


def sanitize_filename(filename: str, replacement: str = "_") -> str:
    """Replace characters that are invalid in Windows file names.

    Args:
        filename: Original filename
        replacement: Character to replace invalid chars with

    Returns:
        Sanitized filename, trimmed of surrounding whitespace
    """
    cleaned = ''.join(
        replacement if char in INVALID_FILENAME_CHARS or ord(char) < 32 else char
        for char in filename
    )
    return cleaned.strip()


def join_server_path(directory: str, filename: str) -> str:
    """Join a directory and file name using the directory's own separator style.

    Backup paths are resolved by the database server, which is usually a
    Windows host, not by the machine running this tool.
    """
    if '\\' in directory and '/' not in directory:
        return ntpath.join(directory, filename)
    return posixpath.join(directory, filename)


def backup_file_name(database: str, directory: str, suffix: str = '.db.bak') -> str:
    """Build the per-database backup file used when a directory is given."""
    return join_server_path(directory, sanitize_filename(database) + suffix)
