"""
Restore Command - Restore databases from backup files.

The backup set is chosen with /ID:
- omitted, 0 or -1: the most recent full backup of the database in the file
- -N: the N-th most recent one
- N > 0: the backup set at position N of the file

With /DISMOUNT the database is taken offline once it has been restored.
"""

from ..models import BackupKind
from .base import BaseModeCommand


class RestoreCommand(BaseModeCommand):
    """Handle /RESTORE mode."""

    progress_label = "Restoring"
    failure_label = "restore"

    def execute(self, args) -> int:
        """Restore every selected database from its backup file."""
        targets = self.get_targets(args)

        def restore(database: str) -> None:
            source = self.get_backup_file(args, database)
            self.backend.restore(database, source, BackupKind.FULL, args.file_index)
            self.print_success(f"Restored '{database}' from {source}")
            if args.dismount:
                self.backend.take_offline(database)
                self.print_success(f"Took '{database}' offline")

        return self.run_batch(targets, restore, timed=True)
