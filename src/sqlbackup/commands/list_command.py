"""
List Command - Print the user databases of the server.
"""

from .base import BaseModeCommand


class ListCommand(BaseModeCommand):
    """Handle /LIST mode."""

    def execute(self, args) -> int:
        """Print one database name per line, in server order."""
        databases = self.backend.list_databases()
        for name in databases:
            self.print_line(name)
        self.logger.info(f"Listed {len(databases)} databases")
        return 0
