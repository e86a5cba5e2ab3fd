"""
Recovery Mode Command - Change the recovery model of databases.
"""

from .base import BaseModeCommand


class RecoveryModeCommand(BaseModeCommand):
    """Handle /MODE with /FULL, /BULK or /SIMPLE."""

    progress_label = "Changing recovery model of"
    failure_label = "change recovery model of"

    def execute(self, args) -> int:
        model = args.recovery_model

        def change(database: str) -> None:
            self.backend.set_recovery_mode(database, model)
            self.print_success(f"'{database}' uses {model.keyword} recovery")

        return self.run_batch(self.get_targets(args), change)
