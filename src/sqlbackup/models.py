"""
Domain records shared between the command line, the services and the backend.

The integer values of the enums follow the codes stored by SQL Server in
master.sys.databases so rows can be converted without lookup tables.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum


class RecoveryModel(IntEnum):
    """Database recovery model (sys.databases.recovery_model)."""
    FULL = 1
    BULK_LOGGED = 2
    SIMPLE = 3

    @property
    def keyword(self) -> str:
        """T-SQL keyword used by ALTER DATABASE ... SET RECOVERY."""
        return self.name

    @classmethod
    def from_history(cls, value: str) -> 'RecoveryModel':
        """Convert the textual model stored in backup history and headers."""
        return cls[value.strip().upper().replace('-', '_')]


class DbState(IntEnum):
    """Database state (sys.databases.state)."""
    ONLINE = 0
    RESTORING = 1
    RECOVERING = 2
    RECOVERY_PENDING = 3
    SUSPECT = 4
    EMERGENCY = 5
    OFFLINE = 6
    COPYING = 7
    OFFLINE_SECONDARY = 10


class AccessType(IntEnum):
    """User access mode (sys.databases.user_access)."""
    MULTI_USER = 0
    SINGLE_USER = 1
    RESTRICTED_USER = 2


class BackupKind(Enum):
    """Kind of backup set. Differential backups are reported as full."""
    FULL = 'full'
    LOG = 'log'


@dataclass(frozen=True)
class DatabaseInfo:
    """Basic database information."""
    database_name: str
    created_at: datetime
    access_type: AccessType
    state: DbState
    recovery_model: RecoveryModel
    is_readonly: bool


@dataclass(frozen=True)
class BackupRecord:
    """Metadata of one backup set stored in a file or in the msdb history."""
    database_name: str
    backup_start: datetime
    backup_end: datetime
    size: int
    file_name: str
    kind: BackupKind
    recovery_model: RecoveryModel
    position: int
