"""
SQL Server backend built on the server's native BACKUP and RESTORE statements.

Backup files are read and written by the server process, so every path
handed to this service must be valid on the database server.
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.config import Config
from ..core.database import DatabaseConnection
from ..models import (
    AccessType,
    BackupKind,
    BackupRecord,
    DatabaseInfo,
    DbState,
    RecoveryModel,
)
from ..security import quote_identifier
from .backend import BackupBackend, DatabaseNotFoundError, DatabaseStateError
from .backup_reference import BackupResolutionError, filter_backup_candidates, resolve_backup_id

class SqlStatements:
    """T-SQL statements. {db} is replaced by a bracket quoted identifier."""

    LIST_DATABASES = """
        SELECT [name]
        FROM master.sys.databases
        WHERE [name] NOT IN ('master', 'tempdb', 'model', 'msdb')
        ORDER BY [database_id]
    """

    DATABASE_INFO = """
        SELECT [name], create_date, user_access, [state], recovery_model, is_read_only
        FROM master.sys.databases
        WHERE [name] = :name
    """

    BACKUP = """
        BACKUP {keyword} {db}
        TO DISK = ?
        WITH DESCRIPTION = ?, NAME = ?, CHECKSUM, SKIP
    """

    # Verifies the newest backup set the server recorded for the database
    VERIFY = """
        DECLARE @name sysname = ?, @filename nvarchar(4000) = ?, @error nvarchar(2048) = ?;
        DECLARE @position int;
        SELECT @position = position
        FROM msdb.dbo.backupset
        WHERE database_name = @name
            AND backup_set_id = (SELECT MAX(backup_set_id) FROM msdb.dbo.backupset WHERE database_name = @name);
        IF @position IS NULL
            THROW 50000, @error, 1;
        RESTORE VERIFYONLY FROM DISK = @filename WITH FILE = @position, CHECKSUM;
    """

    DISCONNECT_OTHERS = "USE [master]; ALTER DATABASE {db} SET SINGLE_USER WITH ROLLBACK IMMEDIATE"

    RECONNECT_OTHERS = "USE [master]; ALTER DATABASE {db} SET MULTI_USER"

    RESTORE = """
        USE [master];
        RESTORE {keyword} {db}
        FROM DISK = ?
        WITH FILE = ?{options}
    """

    TAKE_OFFLINE = "USE [master]; ALTER DATABASE {db} SET OFFLINE"

    TAKE_ONLINE = "USE [master]; ALTER DATABASE {db} SET ONLINE"

    SET_RECOVERY_MODEL = "USE [master]; ALTER DATABASE {db} SET RECOVERY {model}"

    DELETE_BACKUP_HISTORY = "EXEC msdb.dbo.sp_delete_database_backuphistory @database_name = :name"

    # device_type 2 is a disk file
    BACKUP_HISTORY = """
        SELECT
            bus.database_name, bus.backup_start_date, bus.backup_finish_date,
            bus.backup_size, bmf.physical_device_name, bus.type,
            bus.recovery_model, bus.position
        FROM msdb.dbo.backupset AS bus
        JOIN msdb.dbo.backupmediafamily AS bmf ON bus.media_set_id = bmf.media_set_id
        WHERE bus.database_name = :name AND bmf.device_type = 2
        ORDER BY bus.backup_start_date DESC, bus.position DESC
    """

    BACKUP_FILE_HEADER = "RESTORE HEADERONLY FROM DISK = :filename"


# msdb.dbo.backupset.type; I is a differential database backup
HISTORY_BACKUP_KINDS: Dict[str, BackupKind] = {
    'D': BackupKind.FULL,
    'I': BackupKind.FULL,
    'L': BackupKind.LOG,
}

# RESTORE HEADERONLY BackupType; 5 is a differential database backup
HEADER_BACKUP_KINDS: Dict[int, BackupKind] = {
    1: BackupKind.FULL,
    2: BackupKind.LOG,
    5: BackupKind.FULL,
}

BACKUP_KEYWORDS: Dict[BackupKind, str] = {
    BackupKind.FULL: 'DATABASE',
    BackupKind.LOG: 'LOG',
}


class DbService(BackupBackend):
    """Backend talking to one SQL Server instance over a single connection."""

    def __init__(self, connection: DatabaseConnection, config: Optional[Config] = None):
        """Initialize service with an (unopened) database connection.

        Args:
            connection: Database connection used for every statement
            config: Configuration instance
        """
        self.db = connection
        self.config = config or Config()
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_connection_string(cls, connection_string: str, config: Config) -> 'DbService':
        """Create a service and open its connection."""
        connection = DatabaseConnection(connection_string, {
            'odbc_driver': config.odbc_driver,
            'connect_timeout': config.connect_timeout,
            'echo': config.get('database.echo', False),
        })
        connection.connect()
        return cls(connection, config)

    def close(self) -> None:
        self.db.close()

    # Databases

    def list_databases(self) -> List[str]:
        rows = self.db.fetch_all(SqlStatements.LIST_DATABASES)
        return [row['name'] for row in rows]

    def get_database_info(self, name: str) -> Optional[DatabaseInfo]:
        row = self.db.fetch_one(SqlStatements.DATABASE_INFO, {'name': name})
        if row is None:
            return None
        return DatabaseInfo(
            database_name=row['name'],
            created_at=row['create_date'],
            access_type=AccessType(row['user_access']),
            state=DbState(row['state']),
            recovery_model=RecoveryModel(row['recovery_model']),
            is_readonly=bool(row['is_read_only'])
        )

    def set_recovery_mode(self, name: str, model: RecoveryModel) -> None:
        model = RecoveryModel(model)
        info = self.get_database_info(name)
        if info is None:
            raise DatabaseNotFoundError(f"Database '{name}' does not exist")
        if info.recovery_model == model:
            self.logger.info(f"{name} is already in {model.keyword} recovery")
            return

        self.db.execute_to_completion(SqlStatements.SET_RECOVERY_MODEL.format(
            db=quote_identifier(name), model=model.keyword
        ))
        self.logger.info(f"Changed recovery model of {name} to {model.keyword}")

    def take_offline(self, name: str) -> None:
        self.db.execute_to_completion(SqlStatements.TAKE_OFFLINE.format(db=quote_identifier(name)))
        self.logger.info(f"Took {name} offline")

    def take_online(self, name: str) -> None:
        self.db.execute_to_completion(SqlStatements.TAKE_ONLINE.format(db=quote_identifier(name)))
        self.logger.info(f"Took {name} online")

    # Backup and restore

    def backup(self, name: str, destination: str, kind: BackupKind, verify: bool) -> None:
        info = self.get_database_info(name)
        if info is None:
            raise DatabaseNotFoundError(f"Database '{name}' cannot be found")
        if info.state != DbState.ONLINE:
            raise DatabaseStateError(
                f"Database is not online. Current state is '{info.state.name}'"
            )

        if kind == BackupKind.FULL:
            backup_name = f"{name}-Full Database Backup"
            description = "Full backup of the entire database"
        elif kind == BackupKind.LOG:
            backup_name = f"{name}-Transaction Log Backup"
            description = "Transaction log backup"
        else:
            raise ValueError(f"Invalid backup type: {kind}")

        statement = SqlStatements.BACKUP.format(
            keyword=BACKUP_KEYWORDS[kind], db=quote_identifier(name)
        )
        self.logger.info(f"Backing up {name} ({kind.value}) to {destination}")
        self.db.execute_to_completion(statement, (destination, description, backup_name))

        if verify:
            self.verify(name, destination)

    def verify(self, name: str, file_name: str) -> None:
        """Verify the newest backup set of a database without restoring it."""
        self.logger.info(f"Verifying latest backup of {name} in {file_name}")
        self.db.execute_to_completion(
            SqlStatements.VERIFY,
            (name, file_name, f"Backup verification of {name} failed: no backup history found")
        )

    def restore(self, name: str, source: str, kind: BackupKind, backup_id: int) -> None:
        if kind not in BACKUP_KEYWORDS:
            raise ValueError(f"Invalid backup type: {kind}")

        candidates = filter_backup_candidates(
            self.list_backup_records_from_file(source, name), name, kind
        )
        if not candidates:
            raise BackupResolutionError(
                f"Backup file '{source}' does not contain a backup that matches "
                f"database '{name}' and backup type '{kind.value}'"
            )
        position = resolve_backup_id(candidates, backup_id)

        info = self.get_database_info(name)
        # A database missing from the server may still have files on disk
        options = ', REPLACE' if info is None else ''
        disconnect = info is not None and info.state == DbState.ONLINE
        db = quote_identifier(name)
        statement = SqlStatements.RESTORE.format(
            keyword=BACKUP_KEYWORDS[kind], db=db, options=options
        )

        self.logger.info(f"Restoring {name} from {source}, backup position {position}")
        if disconnect:
            self.db.execute_to_completion(SqlStatements.DISCONNECT_OTHERS.format(db=db))
        try:
            self.db.execute_to_completion(statement, (source, position))
        except Exception:
            if disconnect:
                self._reconnect_after_failure(name)
            raise
        if disconnect:
            self.db.execute_to_completion(SqlStatements.RECONNECT_OTHERS.format(db=db))

    def _reconnect_after_failure(self, name: str) -> None:
        """Return a database to multi user mode after a failed restore.

        The restore error is the one reported, so a failure here is only logged.
        """
        try:
            self.db.execute_to_completion(
                SqlStatements.RECONNECT_OTHERS.format(db=quote_identifier(name))
            )
        except Exception as e:
            self.logger.warning(f"Could not set {name} back to MULTI_USER: {e}")

    # Backup history

    def delete_backup_history(self, name: str) -> None:
        self.db.execute(SqlStatements.DELETE_BACKUP_HISTORY, {'name': name})
        self.logger.info(f"Deleted backup history of {name}")

    def list_backup_records_from_catalog(self, name: str) -> List[BackupRecord]:
        records = []
        for row in self.db.fetch_all(SqlStatements.BACKUP_HISTORY, {'name': name}):
            kind = HISTORY_BACKUP_KINDS.get(str(row['type']).strip().upper())
            if kind is None:
                self.logger.warning(f"Skipping unsupported backup type '{row['type']}' of {name}")
                continue
            records.append(BackupRecord(
                database_name=row['database_name'],
                backup_start=row['backup_start_date'],
                backup_end=row['backup_finish_date'],
                size=int(row['backup_size'] or 0),
                file_name=row['physical_device_name'],
                kind=kind,
                recovery_model=RecoveryModel.from_history(row['recovery_model']),
                position=int(row['position'])
            ))
        return records

    def list_backup_records_from_file(self, path: str,
                                      name_filter: Optional[str] = None) -> List[BackupRecord]:
        records = []
        for row in self.db.fetch_all(SqlStatements.BACKUP_FILE_HEADER, {'filename': path}):
            record = self._record_from_header(row, path)
            if record is not None:
                records.append(record)

        if name_filter is not None:
            key = name_filter.casefold()
            records = [r for r in records if r.database_name.casefold() == key]
        return records

    def _record_from_header(self, row: Dict[str, Any], path: str) -> Optional[BackupRecord]:
        kind = HEADER_BACKUP_KINDS.get(int(row['BackupType']))
        if kind is None:
            self.logger.warning(
                f"Skipping unsupported backup type {row['BackupType']} at position "
                f"{row['Position']} of {path}"
            )
            return None
        return BackupRecord(
            database_name=row['DatabaseName'],
            backup_start=row['BackupStartDate'],
            backup_end=row['BackupFinishDate'],
            size=int(row['BackupSize'] or 0),
            file_name=path,
            kind=kind,
            recovery_model=RecoveryModel.from_history(row['RecoveryModel']),
            position=int(row['Position'])
        )
