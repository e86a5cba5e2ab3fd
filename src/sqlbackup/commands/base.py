"""
Base Mode Command - Common functionality for commands that work on databases.

Provides shared utilities including:
- Target selection (/ALL with exclusions or an explicit /DB list)
- Backup file resolution for /DIR and /FILE locations
- The per-database failure boundary and the batch summary
"""

import time
from typing import Callable, Iterable, List

from ..arguments import ParsedArguments
from ..core.command_base import BaseCommand
from ..core.utils import backup_file_name, format_duration
from ..logging_utils import clear_database_context, set_database_context
from ..services.selection import select_databases


class BaseModeCommand(BaseCommand):
    """Base class for the mode commands that operate on selected databases."""

    # "Backing up", "Restoring", ... shown before each database
    progress_label = "Processing"
    # "back up", "restore", ... shown when a database fails
    failure_label = "process"

    def get_targets(self, args: ParsedArguments) -> List[str]:
        """Resolve the databases to operate on.

        The server catalog is only read when /ALL was given.
        """
        catalog = self.backend.list_databases() if args.use_all_databases else []
        return select_databases(args, catalog)

    def get_backup_file(self, args: ParsedArguments, database: str) -> str:
        """Get the backup file of a database: /FILE verbatim, or a file inside /DIR."""
        if args.is_directory:
            suffix = self.config.backup_file_suffix if self.config else '.db.bak'
            return backup_file_name(database, args.backup_location, suffix)
        return args.backup_location

    def process_each(self, targets: Iterable[str], action: Callable[[str], None],
                     timed: bool = False) -> int:
        """Run an action for every database, isolating failures.

        Args:
            targets: Database names in processing order
            action: Callable receiving the database name
            timed: Print the elapsed time of each database

        Returns:
            Number of databases whose action raised
        """
        failures = 0
        for database in targets:
            set_database_context(database)
            start_time = time.time()
            self.print_info(f"{self.progress_label} '{database}'...")
            try:
                action(database)
            except Exception as e:
                failures += 1
                self.logger.debug(f"{self.failure_label} failed", exc_info=True)
                self.logger.error(f"Failed to {self.failure_label} '{database}': {e}")
                self.print_error(f"Failed to {self.failure_label} '{database}'", detail=str(e))
            finally:
                clear_database_context()

            if timed:
                self.print_line(
                    f"Completed '{database}' after {format_duration(time.time() - start_time)}"
                )
        return failures

    def print_summary(self, failures: int) -> None:
        """Print the closing line of a batch."""
        message = f"Completed with {failures} errors"
        if failures:
            self.print_warning(message)
        else:
            self.print_success(message)

    def run_batch(self, targets: Iterable[str], action: Callable[[str], None],
                  timed: bool = False) -> int:
        """Process every database and print the summary."""
        start_time = time.time()
        failures = self.process_each(targets, action, timed)
        self.print_summary(failures)
        if timed:
            self.print_line(f"Total time {format_duration(time.time() - start_time)}")
        return failures
