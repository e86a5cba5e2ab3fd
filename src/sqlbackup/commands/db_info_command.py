"""
Database Info Command - Show state, access and recovery model of databases.
"""

from typing import List

from ..core import colors
from ..core.utils import format_datetime
from ..models import DatabaseInfo
from ..services.backend import DatabaseNotFoundError
from .base import BaseModeCommand


class DbInfoCommand(BaseModeCommand):
    """Handle /DBINFO mode."""

    progress_label = "Reading information of"
    failure_label = "get database information for"

    def execute(self, args) -> int:
        found: List[DatabaseInfo] = []

        def read_info(database: str) -> None:
            info = self.backend.get_database_info(database)
            if info is None:
                raise DatabaseNotFoundError(f"Database '{database}' cannot be found on the server")
            found.append(info)

        failures = self.process_each(self.get_targets(args), read_info)
        self._show_info(found)
        self.print_summary(failures)
        return failures

    def _show_info(self, infos: List[DatabaseInfo]) -> None:
        rows = []
        for info in infos:
            rows.append([
                colors.format_primary(info.database_name),
                colors.format_status(info.state.name),
                colors.format_status(info.access_type.name),
                'Y' if info.is_readonly else 'N',
                f"[{colors.DATES}]{format_datetime(info.created_at, 'long')}[/]",
                f"[{colors.SECONDARY}]{info.recovery_model.keyword}[/]",
            ])

        self.print_table(
            "Databases",
            ['Name', 'State', 'Access', 'Readonly', 'Created', 'Recovery'],
            rows
        )
