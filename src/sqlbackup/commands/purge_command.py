"""
Purge Command - Delete the backup history the server keeps for databases.

Only the msdb history rows are removed; backup files stay on disk.
"""

from .base import BaseModeCommand


class PurgeCommand(BaseModeCommand):
    """Handle /PURGE mode."""

    progress_label = "Purging backup history of"
    failure_label = "purge backup history of"

    def execute(self, args) -> int:
        def purge(database: str) -> None:
            self.backend.delete_backup_history(database)
            self.print_success(f"Purged backup history of '{database}'")

        return self.run_batch(self.get_targets(args), purge)
