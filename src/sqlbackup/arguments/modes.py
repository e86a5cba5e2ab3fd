"""
Operation modes and the token lookup tables of the command line grammar.

All tables are keyed by upper-cased token text; classification is a plain
dictionary lookup.
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional

from ..models import RecoveryModel


class OperationMode(Enum):
    """Top level operation selected by the first command line token."""
    NONE = 'none'
    HELP = 'help'
    INVALID = 'invalid'
    LIST = 'list'
    BACKUP = 'backup'
    RESTORE = 'restore'
    CHANGE_RECOVERY_MODE = 'change-recovery-mode'
    BACKUP_INFO = 'backup-info'
    DB_INFO = 'db-info'
    PURGE_BACKUP_HISTORY = 'purge-backup-history'
    TAKE_OFFLINE = 'take-offline'
    TAKE_ONLINE = 'take-online'


class ArgumentField(Enum):
    """Fields of the parsed command that can be set from the command line."""
    DATABASES = 'databases'
    CONNECTION_STRING = 'connection_string'
    BACKUP_LOCATION = 'backup_location'
    FILE_INDEX = 'file_index'
    VERIFY = 'verify'
    LOG_BACKUP = 'do_log_backup'
    DISMOUNT = 'dismount'
    RECOVERY_MODEL = 'recovery_model'


class Flag(Enum):
    """Canonical flag operations after classification."""
    DB = '/DB'
    ALL = '/ALL'
    LOG = '/LOG'
    VERIFY = '/VERIFY'
    DISMOUNT = '/DISMOUNT'
    RECOVERY_MODEL = 'recovery-model'
    CONNECTION = '/C'
    DIRECTORY = '/DIR'
    FILE = '/FILE'
    BACKUP_ID = '/ID'


FLAG_MARKER = '/'

MODE_TOKENS: Dict[str, OperationMode] = {
    '/?': OperationMode.HELP,
    '/HELP': OperationMode.HELP,
    '/LIST': OperationMode.LIST,
    '/BACKUP': OperationMode.BACKUP,
    '/RESTORE': OperationMode.RESTORE,
    '/MODE': OperationMode.CHANGE_RECOVERY_MODE,
    '/INFO': OperationMode.BACKUP_INFO,
    '/DBINFO': OperationMode.DB_INFO,
    '/PURGE': OperationMode.PURGE_BACKUP_HISTORY,
    '/OFFLINE': OperationMode.TAKE_OFFLINE,
    '/ONLINE': OperationMode.TAKE_ONLINE,
}

FLAG_TOKENS: Dict[str, Flag] = {
    '/DB': Flag.DB,
    '/ALL': Flag.ALL,
    '/LOG': Flag.LOG,
    '/VERIFY': Flag.VERIFY,
    '/DISMOUNT': Flag.DISMOUNT,
    '/FULL': Flag.RECOVERY_MODEL,
    '/BULK': Flag.RECOVERY_MODEL,
    '/SIMPLE': Flag.RECOVERY_MODEL,
    '/C': Flag.CONNECTION,
    '/DIR': Flag.DIRECTORY,
    '/FILE': Flag.FILE,
    '/ID': Flag.BACKUP_ID,
}

# Flags that consume the following token as their value
VALUE_FLAGS: FrozenSet[Flag] = frozenset({
    Flag.CONNECTION, Flag.DIRECTORY, Flag.FILE, Flag.BACKUP_ID
})

# Flags that open a list of database names
DATABASE_LIST_FLAGS: FrozenSet[Flag] = frozenset({Flag.DB, Flag.ALL})

RECOVERY_MODEL_TOKENS: Dict[str, RecoveryModel] = {
    '/FULL': RecoveryModel.FULL,
    '/BULK': RecoveryModel.BULK_LOGGED,
    '/SIMPLE': RecoveryModel.SIMPLE,
}

# Windows authentication, TLS encryption disabled
CONNECTION_ALIASES: Dict[str, str] = {
    'LOCAL': (
        'Driver={ODBC Driver 18 for SQL Server};'
        'Server=(localdb)\\MSSQLLocalDB;'
        'Trusted_Connection=yes;Encrypt=no'
    ),
    'EXPRESS': (
        'Driver={ODBC Driver 18 for SQL Server};'
        'Server=.\\SQLEXPRESS;'
        'Trusted_Connection=yes;Encrypt=no'
    ),
}


def classify_mode(token: str) -> Optional[OperationMode]:
    """Return the mode designated by a token, or None."""
    return MODE_TOKENS.get(token.strip().upper())


def classify_flag(token: str) -> Optional[Flag]:
    """Return the canonical flag for a token, or None if it is not a known flag."""
    return FLAG_TOKENS.get(token.strip().upper())


def resolve_connection_alias(value: str) -> str:
    """Map LOCAL/EXPRESS (any case) to their connection strings.

    Any other value is returned unchanged.
    """
    return CONNECTION_ALIASES.get(value.strip().upper(), value)
