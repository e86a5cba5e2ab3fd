"""
Backend interface consumed by the mode commands.

The commands only talk to the database server through this interface, which
keeps them testable against an in-memory implementation.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import BackupKind, BackupRecord, DatabaseInfo, RecoveryModel


class BackendError(Exception):
    """Base exception for backend failures detected before reaching the server."""
    pass


class DatabaseNotFoundError(BackendError):
    """Raised when a database does not exist on the server."""
    pass


class DatabaseStateError(BackendError):
    """Raised when a database is not in a state that allows the operation."""
    pass


class BackupBackend(ABC):
    """Interface that every database backend must implement."""

    @abstractmethod
    def list_databases(self) -> List[str]:
        """Return the names of all user databases, including offline ones."""

    @abstractmethod
    def get_database_info(self, name: str) -> Optional[DatabaseInfo]:
        """Return basic information about a database, or None if it does not exist."""

    @abstractmethod
    def backup(self, name: str, destination: str, kind: BackupKind, verify: bool) -> None:
        """Back up a database (or its transaction log) into a file.

        Raises:
            DatabaseNotFoundError: If the database does not exist
            DatabaseStateError: If the database is not online
            ValueError: For an invalid backup kind
        """

    @abstractmethod
    def restore(self, name: str, source: str, kind: BackupKind, backup_id: int) -> None:
        """Restore a database from a backup file.

        Args:
            backup_id: 0 or -1 for the latest backup, below -1 to count back
                from the latest, above 0 for an absolute backup position

        Raises:
            BackupResolutionError: If no backup in the file matches
        """

    @abstractmethod
    def set_recovery_mode(self, name: str, model: RecoveryModel) -> None:
        """Change the recovery model of a database."""

    @abstractmethod
    def take_offline(self, name: str) -> None:
        """Take a database offline."""

    @abstractmethod
    def take_online(self, name: str) -> None:
        """Bring a database online."""

    @abstractmethod
    def delete_backup_history(self, name: str) -> None:
        """Delete the backup history the server keeps for a database."""

    @abstractmethod
    def list_backup_records_from_catalog(self, name: str) -> List[BackupRecord]:
        """Return the server's backup history of a database, most recent first."""

    @abstractmethod
    def list_backup_records_from_file(self, path: str,
                                      name_filter: Optional[str] = None) -> List[BackupRecord]:
        """Return the backup sets stored in a file, optionally for one database only."""

    def close(self) -> None:
        """Release the server connection."""

    def __enter__(self) -> 'BackupBackend':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
