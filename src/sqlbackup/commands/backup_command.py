"""
Backup Command - Back up databases or their transaction logs.

Provides:
- Full database backups, or log backups with /LOG
- Optional verification of the written backup set (/VERIFY)
- Per-database and total elapsed time
"""

from ..models import BackupKind
from .base import BaseModeCommand


class BackupCommand(BaseModeCommand):
    """Handle /BACKUP mode."""

    progress_label = "Backing up"
    failure_label = "back up"

    def execute(self, args) -> int:
        """Back up every selected database into its backup file."""
        kind = BackupKind.LOG if args.do_log_backup else BackupKind.FULL
        targets = self.get_targets(args)

        def backup(database: str) -> None:
            destination = self.get_backup_file(args, database)
            self.backend.backup(database, destination, kind, args.verify)
            self.print_success(f"Backed up '{database}' to {destination}")

        return self.run_batch(targets, backup, timed=True)
