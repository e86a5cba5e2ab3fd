"""
sqlbackup - SQL Server backup, restore and maintenance from the command line

The package is organised in layers:
- arguments: mode-driven command line grammar, parsing and validation
- services: backend interface, database selection, backup id resolution
- commands: one command class per mode plus the dispatcher
- core: configuration, database connection, console output helpers
"""

__version__ = "1.0.0"

from .arguments import ParsedArguments, parse_arguments
from .core.config import Config

__all__ = ['ParsedArguments', 'parse_arguments', 'Config', '__version__']
