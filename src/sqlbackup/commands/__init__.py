"""
Mode commands and the dispatcher that routes a validated invocation to them.

Architecture:
- Each mode is implemented as a separate command class
- BaseModeCommand provides target selection and the per-database failure boundary
- Commands talk to the server only through the BackupBackend interface
"""

from typing import Dict, Optional, Type

from ..arguments import OperationMode, ParsedArguments
from ..core.command_base import BaseCommand
from ..core.config import Config
from ..services.backend import BackupBackend
from .backup_command import BackupCommand
from .backup_info_command import BackupInfoCommand
from .db_info_command import DbInfoCommand
from .list_command import ListCommand
from .mode_command import RecoveryModeCommand
from .purge_command import PurgeCommand
from .restore_command import RestoreCommand
from .state_command import TakeOfflineCommand, TakeOnlineCommand

COMMANDS: Dict[OperationMode, Type[BaseCommand]] = {
    OperationMode.LIST: ListCommand,
    OperationMode.BACKUP: BackupCommand,
    OperationMode.RESTORE: RestoreCommand,
    OperationMode.CHANGE_RECOVERY_MODE: RecoveryModeCommand,
    OperationMode.BACKUP_INFO: BackupInfoCommand,
    OperationMode.DB_INFO: DbInfoCommand,
    OperationMode.PURGE_BACKUP_HISTORY: PurgeCommand,
    OperationMode.TAKE_OFFLINE: TakeOfflineCommand,
    OperationMode.TAKE_ONLINE: TakeOnlineCommand,
}


def create_command(mode: OperationMode, **kwargs) -> BaseCommand:
    """Instantiate the command handling a mode.

    Raises:
        NotImplementedError: If no command handles the mode
    """
    command_class = COMMANDS.get(mode)
    if command_class is None:
        raise NotImplementedError(f"Mode '{mode.value}' is not implemented")
    return command_class(**kwargs)


def dispatch(args: ParsedArguments, backend: BackupBackend,
             config: Optional[Config] = None, **kwargs) -> int:
    """Run the command of a validated invocation.

    Args:
        args: Validated arguments
        backend: Backend connected to the target server
        config: Configuration instance
        **kwargs: Passed to the command constructor (console, error_console)

    Returns:
        Number of failed items
    """
    command = create_command(args.mode, **kwargs)
    command.inject_services({'config': config, 'backend': backend})
    return command.execute(args)


__all__ = [
    'COMMANDS',
    'BackupCommand',
    'BackupInfoCommand',
    'DbInfoCommand',
    'ListCommand',
    'PurgeCommand',
    'RecoveryModeCommand',
    'RestoreCommand',
    'TakeOfflineCommand',
    'TakeOnlineCommand',
    'create_command',
    'dispatch',
]
