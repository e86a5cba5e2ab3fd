"""
Core components: configuration, database connection, output helpers
"""

from .config import Config
from .database import DatabaseConnection, build_connection_url
from .command_base import BaseCommand
from .utils import backup_file_name, format_datetime, format_duration, format_size, sanitize_filename

__all__ = [
    'Config',
    'DatabaseConnection',
    'BaseCommand',
    'backup_file_name',
    'build_connection_url',
    'format_datetime',
    'format_duration',
    'format_size',
    'sanitize_filename'
]
