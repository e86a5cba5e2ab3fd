"""Shared fixtures: an in-memory backend and captured consoles."""

import io
from datetime import datetime
from typing import Dict, List, Optional

import pytest
from rich.console import Console

from src.sqlbackup.models import (
    AccessType,
    BackupKind,
    BackupRecord,
    DatabaseInfo,
    DbState,
    RecoveryModel,
)
from src.sqlbackup.services.backend import BackupBackend, DatabaseNotFoundError


def make_record(database: str, position: int, kind: BackupKind = BackupKind.FULL,
                file_name: str = 'backup.bak', size: int = 2_500_000) -> BackupRecord:
    """Build a backup record; later positions get later timestamps."""
    return BackupRecord(
        database_name=database,
        backup_start=datetime(2024, 5, 1, 10, position),
        backup_end=datetime(2024, 5, 1, 10, position, 30),
        size=size,
        file_name=file_name,
        kind=kind,
        recovery_model=RecoveryModel.FULL,
        position=position
    )


def make_info(database: str, state: DbState = DbState.ONLINE,
              model: RecoveryModel = RecoveryModel.SIMPLE) -> DatabaseInfo:
    return DatabaseInfo(
        database_name=database,
        created_at=datetime(2023, 1, 15, 8, 0, 0),
        access_type=AccessType.MULTI_USER,
        state=state,
        recovery_model=model,
        is_readonly=False
    )


class FakeBackend(BackupBackend):
    """Backend keeping databases and backup sets in memory.

    Every call is recorded in `calls` as (operation, database, ...). Calls
    for a database listed in `failing` raise RuntimeError.
    """

    def __init__(self, databases: Optional[List[str]] = None,
                 failing: Optional[List[str]] = None,
                 files: Optional[Dict[str, List[BackupRecord]]] = None,
                 history: Optional[Dict[str, List[BackupRecord]]] = None):
        self.databases = list(databases or [])
        self.failing = {name.casefold() for name in failing or []}
        self.files = files or {}
        self.history = history or {}
        self.infos = {name.casefold(): make_info(name) for name in self.databases}
        self.calls = []
        self.closed = False

    def _call(self, operation: str, name: Optional[str], *extra) -> None:
        self.calls.append((operation, name) + extra)
        if name is not None and name.casefold() in self.failing:
            raise RuntimeError(f"{operation} of {name} failed")

    def calls_for(self, operation: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == operation]

    def list_databases(self) -> List[str]:
        self.calls.append(('list', None))
        return list(self.databases)

    def get_database_info(self, name: str) -> Optional[DatabaseInfo]:
        self._call('info', name)
        return self.infos.get(name.casefold())

    def backup(self, name, destination, kind, verify) -> None:
        self._call('backup', name, destination, kind, verify)

    def restore(self, name, source, kind, backup_id) -> None:
        self._call('restore', name, source, kind, backup_id)

    def set_recovery_mode(self, name, model) -> None:
        self._call('recovery', name, model)
        if name.casefold() not in self.infos:
            raise DatabaseNotFoundError(f"Database '{name}' does not exist")

    def take_offline(self, name) -> None:
        self._call('offline', name)

    def take_online(self, name) -> None:
        self._call('online', name)

    def delete_backup_history(self, name) -> None:
        self._call('purge', name)

    def list_backup_records_from_catalog(self, name) -> List[BackupRecord]:
        self._call('history', name)
        return list(self.history.get(name, []))

    def list_backup_records_from_file(self, path, name_filter=None) -> List[BackupRecord]:
        self._call('read_file', name_filter, path)
        if path not in self.files:
            raise FileNotFoundError(f"Cannot open backup device '{path}'")
        records = self.files[path]
        if name_filter is not None:
            records = [r for r in records if r.database_name.casefold() == name_filter.casefold()]
        return list(records)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_backend():
    """Backend with three online databases."""
    return FakeBackend(databases=['Alpha', 'Beta', 'Gamma'])


@pytest.fixture
def consoles():
    """Wide consoles writing into buffers: (stdout, stderr)."""
    out = Console(file=io.StringIO(), width=200, highlight=False)
    err = Console(file=io.StringIO(), width=200, highlight=False)
    return out, err


@pytest.fixture
def backend_factory():
    """Build a FakeBackend with custom databases, failures and backup sets."""
    return FakeBackend


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def info_factory():
    return make_info
