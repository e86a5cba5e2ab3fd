"""
Services: backend interface, SQL Server backend, database selection and
backup id resolution
"""

from .backend import BackendError, BackupBackend, DatabaseNotFoundError, DatabaseStateError
from .backup_reference import BackupResolutionError, filter_backup_candidates, resolve_backup_id
from .db_service import DbService
from .selection import select_databases

__all__ = [
    'BackendError',
    'BackupBackend',
    'BackupResolutionError',
    'DatabaseNotFoundError',
    'DatabaseStateError',
    'DbService',
    'filter_backup_candidates',
    'resolve_backup_id',
    'select_databases',
]
