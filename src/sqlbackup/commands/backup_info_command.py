"""
Backup Info Command - Show backup sets from backup files or server history.

Where the records come from depends on the arguments:
- location and databases: the backup file of each database, only its sets
- location only: every set stored in the file
- databases only: the backup history recorded on the server
"""

from typing import List

from ..core import colors
from ..core.utils import format_datetime, format_size
from ..models import BackupRecord
from .base import BaseModeCommand


class BackupInfoCommand(BaseModeCommand):
    """Handle /INFO mode."""

    progress_label = "Reading backups of"
    failure_label = "read backups of"

    def execute(self, args) -> int:
        records: List[BackupRecord] = []
        targets = self.get_targets(args)

        if args.backup_location is not None:
            if targets:
                def read_file(database: str) -> None:
                    path = self.get_backup_file(args, database)
                    records.extend(self.backend.list_backup_records_from_file(path, database))

                failures = self.process_each(targets, read_file)
            else:
                failures = self._read_location(args.backup_location, records)
        else:
            if not targets:
                self.print_error(
                    "No databases specified or found on the server",
                    detail="If the databases were deleted, use /FILE to read a backup file instead"
                )
                return 1

            def read_history(database: str) -> None:
                records.extend(self.backend.list_backup_records_from_catalog(database))

            failures = self.process_each(targets, read_history)
            if not records and not failures:
                self.print_info("No backup history is available on the server")

        self._show_records(records)
        return failures

    def _read_location(self, path: str, records: List[BackupRecord]) -> int:
        """Read every backup set of a file; returns the number of failures (0 or 1)."""
        try:
            records.extend(self.backend.list_backup_records_from_file(path))
        except Exception as e:
            self.logger.debug("Reading backup file failed", exc_info=True)
            self.logger.error(f"Failed to read backup file {path}: {e}")
            self.print_error(f"Failed to read backup file {path}", detail=str(e))
            return 1
        return 0

    def _show_records(self, records: List[BackupRecord]) -> None:
        rows = []
        for record in records:
            rows.append([
                colors.format_primary(record.database_name),
                f"[{colors.DATES}]{format_datetime(record.backup_end, 'long')}[/]",
                record.kind.value,
                colors.format_number(format_size(record.size)),
                str(record.position),
                f"[{colors.SECONDARY}]{record.recovery_model.keyword}[/]",
            ])

        self.print_table(
            "Backups",
            ['DB', 'Date', 'Type', 'Size', 'Id', 'Model'],
            rows
        )
