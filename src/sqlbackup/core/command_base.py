"""
Base Command - Common functionality for all mode commands.

Provides shared utilities including:
- Service injection (config, backend)
- Status and error messaging on stdout/stderr
- Table printing through rich
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import logging

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import colors


class BaseCommand(ABC):
    """Base class for all mode commands."""

    def __init__(self, console: Optional[Console] = None, error_console: Optional[Console] = None):
        self.config = None
        self.backend = None
        self.console = console or Console(highlight=False)
        self.error_console = error_console or Console(stderr=True, highlight=False)
        self.logger = logging.getLogger(self.__class__.__module__)

    def inject_services(self, services: Dict[str, Any]) -> None:
        """Inject required services (config, backend)."""
        self.config = services.get('config')
        self.backend = services.get('backend')
        if self.backend is None:
            raise ValueError("A database backend is required for mode commands")

    @abstractmethod
    def execute(self, args) -> int:
        """Execute the command and return the number of failed items."""
        pass

    # Output formatting utilities
    def print_line(self, message: str = "") -> None:
        """Print plain text without markup processing."""
        self.console.print(message, markup=False)

    def print_success(self, message: str) -> None:
        """Print success message with green checkmark."""
        self.console.print(f"[{colors.STATUS_SUCCESS}]✅[/] {escape(message)}")

    def print_info(self, message: str) -> None:
        """Print info message with blue info icon."""
        self.console.print(f"[{colors.STATUS_INFO}]ℹ️ [/] {escape(message)}")

    def print_warning(self, message: str) -> None:
        """Print warning message with yellow triangle."""
        self.error_console.print(f"[{colors.STATUS_WARNING}]⚠️ [/] {escape(message)}")

    def print_error(self, message: str, detail: Optional[str] = None) -> None:
        """Print error message with red X, and an indented detail line."""
        self.error_console.print(f"[{colors.STATUS_ERROR}]❌[/] {escape(message)}")
        if detail:
            self.error_console.print(f"   {detail}", style=colors.MUTED, markup=False)

    def print_table(self, title: Optional[str], headers: List[str], rows: List[List[str]]) -> None:
        """Print rows in a rich table. Cells may contain rich markup."""
        if not headers or not rows:
            return

        table = Table(
            title=f"[{colors.TABLE_TITLE}]{title}[/]" if title else None,
            show_header=True,
            header_style=colors.HEADERS
        )
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*[str(cell) for cell in row])

        self.console.print(table)
