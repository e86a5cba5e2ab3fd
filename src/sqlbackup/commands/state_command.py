"""
State Commands - Take databases offline or bring them back online.
"""

from .base import BaseModeCommand


class TakeOfflineCommand(BaseModeCommand):
    """Handle /OFFLINE mode."""

    progress_label = "Taking offline"
    failure_label = "take offline"

    def execute(self, args) -> int:
        def take_offline(database: str) -> None:
            self.backend.take_offline(database)
            self.print_success(f"'{database}' is offline")

        return self.run_batch(self.get_targets(args), take_offline)


class TakeOnlineCommand(BaseModeCommand):
    """Handle /ONLINE mode."""

    progress_label = "Taking online"
    failure_label = "take online"

    def execute(self, args) -> int:
        def take_online(database: str) -> None:
            self.backend.take_online(database)
            self.print_success(f"'{database}' is online")

        return self.run_batch(self.get_targets(args), take_online)
