"""
Parsed Arguments - State accumulated while reading the command line.

Provides the parsed command model including:
- Write-once mode and scalar options
- Mutually exclusive /ALL and /DB selection with a case-insensitive name list
- A single declarative table of which fields each mode may set
- Mode specific validation once all tokens have been consumed
"""

import functools
import re
from typing import Callable, Dict, FrozenSet, Optional, Tuple

from ..models import RecoveryModel
from .errors import ArgumentParserError, ArgumentValidationError
from .modes import (
    ArgumentField,
    OperationMode,
    RECOVERY_MODEL_TOKENS,
    classify_mode,
    resolve_connection_alias,
)

_DB = ArgumentField.DATABASES
_CONN = ArgumentField.CONNECTION_STRING
_LOCATION = ArgumentField.BACKUP_LOCATION

# Which fields may be set from the command line in each mode
LEGAL_FIELDS: Dict[OperationMode, FrozenSet[ArgumentField]] = {
    OperationMode.NONE: frozenset(),
    OperationMode.INVALID: frozenset(),
    OperationMode.HELP: frozenset({_CONN}),
    OperationMode.LIST: frozenset({_CONN}),
    OperationMode.BACKUP: frozenset({
        _DB, _CONN, _LOCATION, ArgumentField.VERIFY, ArgumentField.LOG_BACKUP
    }),
    OperationMode.RESTORE: frozenset({
        _DB, _CONN, _LOCATION, ArgumentField.FILE_INDEX, ArgumentField.DISMOUNT
    }),
    OperationMode.CHANGE_RECOVERY_MODE: frozenset({
        _DB, _CONN, ArgumentField.RECOVERY_MODEL
    }),
    OperationMode.BACKUP_INFO: frozenset({_DB, _CONN, _LOCATION}),
    OperationMode.DB_INFO: frozenset({_DB, _CONN}),
    OperationMode.PURGE_BACKUP_HISTORY: frozenset({_DB, _CONN}),
    OperationMode.TAKE_OFFLINE: frozenset({_DB, _CONN}),
    OperationMode.TAKE_ONLINE: frozenset({_DB, _CONN}),
}

FIELD_LABELS: Dict[ArgumentField, str] = {
    ArgumentField.DATABASES: '/ALL, /DB and database names',
    ArgumentField.CONNECTION_STRING: '/C',
    ArgumentField.BACKUP_LOCATION: '/DIR and /FILE',
    ArgumentField.FILE_INDEX: '/ID',
    ArgumentField.VERIFY: '/VERIFY',
    ArgumentField.LOG_BACKUP: '/LOG',
    ArgumentField.DISMOUNT: '/DISMOUNT',
    ArgumentField.RECOVERY_MODEL: '/FULL, /BULK and /SIMPLE',
}

_INTEGER = re.compile(r'^[+-]?\d+$')


def mutator(field: ArgumentField) -> Callable:
    """Guard a setter with the legal field table before it touches any state."""
    def decorator(method: Callable) -> Callable:
        @functools.wraps(method)
        def wrapper(self: 'ParsedArguments', *args, **kwargs):
            self._ensure_legal(field)
            return method(self, *args, **kwargs)
        return wrapper
    return decorator


class ParsedArguments:
    """Accumulated invocation state. Read-only once validated."""

    def __init__(self):
        self._mode = OperationMode.NONE
        self._recovery_model: Optional[RecoveryModel] = None
        self._use_all_databases: Optional[bool] = None
        self._databases = []
        self._database_keys = set()
        self._connection_string: Optional[str] = None
        self._backup_location: Optional[str] = None
        self._is_directory = False
        self._file_index = 0
        self._verify = False
        self._do_log_backup = False
        self._dismount = False
        self._validated = False

    # Read access

    @property
    def mode(self) -> OperationMode:
        return self._mode

    @property
    def recovery_model(self) -> Optional[RecoveryModel]:
        return self._recovery_model

    @property
    def use_all_databases(self) -> Optional[bool]:
        """None when unset, True for "all except listed", False for "only listed"."""
        return self._use_all_databases

    @property
    def databases(self) -> Tuple[str, ...]:
        return tuple(self._databases)

    @property
    def connection_string(self) -> Optional[str]:
        return self._connection_string

    @property
    def backup_location(self) -> Optional[str]:
        return self._backup_location

    @property
    def is_directory(self) -> bool:
        return self._is_directory

    @property
    def file_index(self) -> int:
        """Requested backup id; 0 when not specified."""
        return self._file_index

    @property
    def verify(self) -> bool:
        return self._verify

    @property
    def do_log_backup(self) -> bool:
        return self._do_log_backup

    @property
    def dismount(self) -> bool:
        return self._dismount

    @property
    def is_validated(self) -> bool:
        return self._validated

    @property
    def has_database_selection(self) -> bool:
        """True when /ALL was given, or /DB with at least one name."""
        return self._missing_databases() is None

    # Mutators

    def set_mode(self, token: str) -> None:
        """Set the operation mode from the first command line token."""
        if self._validated:
            raise ArgumentParserError("Arguments cannot be changed after validation")
        if self._mode != OperationMode.NONE:
            raise ArgumentParserError(f"Mode already set when processing '{token}'")
        mode = classify_mode(token)
        if mode is None:
            raise ArgumentParserError(f"'{token}' is not a valid mode. Use /? to get help")
        self._mode = mode

    @mutator(ArgumentField.DATABASES)
    def select_all_databases(self) -> None:
        """Handle /ALL: operate on every database except the listed ones."""
        if self._use_all_databases is None:
            self._use_all_databases = True
        elif self._use_all_databases:
            raise ArgumentParserError("Duplicate /ALL")
        else:
            raise ArgumentParserError("Cannot specify /ALL when /DB has already been specified")

    @mutator(ArgumentField.DATABASES)
    def select_listed_databases(self) -> None:
        """Handle /DB: operate on the listed databases only."""
        if self._use_all_databases is None:
            self._use_all_databases = False
        elif not self._use_all_databases:
            raise ArgumentParserError("Duplicate /DB")
        else:
            raise ArgumentParserError("Cannot specify /DB when /ALL has already been specified")

    @mutator(ArgumentField.DATABASES)
    def add_database(self, name: str) -> None:
        """Append a database name. Names are unique regardless of case."""
        if self._use_all_databases is None:
            raise ArgumentParserError(f"Database '{name}' must follow /ALL or /DB")
        key = name.casefold()
        if key in self._database_keys:
            raise ArgumentParserError(f"Database '{name}' is already in the list")
        self._database_keys.add(key)
        self._databases.append(name)

    @mutator(ArgumentField.CONNECTION_STRING)
    def set_connection_string(self, value: str) -> None:
        """Set the connection string, resolving the LOCAL and EXPRESS aliases."""
        if self._connection_string is not None:
            raise ArgumentParserError("Duplicate /C: the connection string has already been set")
        self._connection_string = resolve_connection_alias(value)

    @mutator(ArgumentField.BACKUP_LOCATION)
    def set_location(self, location: str, is_directory: bool) -> None:
        """Set the backup directory (/DIR) or file (/FILE)."""
        flag = '/DIR' if is_directory else '/FILE'
        if not location or not location.strip():
            raise ArgumentParserError(f"{flag} requires a non-empty path")
        if self._backup_location is not None:
            raise ArgumentParserError(
                f"Backup location has already been set when processing '{location}'"
            )
        self._backup_location = location
        self._is_directory = is_directory

    @mutator(ArgumentField.FILE_INDEX)
    def set_file_index(self, value: str) -> None:
        """Set the backup id from /ID. Negative values count back from the latest."""
        if not _INTEGER.match(value.strip()):
            raise ArgumentParserError(f"Cannot process '{value}' as integer")
        parsed = int(value.strip())
        if self._file_index != 0:
            raise ArgumentParserError(f"Backup id has already been set when parsing '{value}'")
        if parsed == 0:
            raise ArgumentParserError("Backup id cannot be zero")
        self._file_index = parsed

    @mutator(ArgumentField.VERIFY)
    def set_verify(self) -> None:
        if self._verify:
            raise ArgumentParserError("Duplicate /VERIFY encountered")
        self._verify = True

    @mutator(ArgumentField.LOG_BACKUP)
    def set_log_backup(self) -> None:
        if self._do_log_backup:
            raise ArgumentParserError("Duplicate /LOG encountered")
        self._do_log_backup = True

    @mutator(ArgumentField.DISMOUNT)
    def set_dismount(self) -> None:
        if self._dismount:
            raise ArgumentParserError("Duplicate /DISMOUNT encountered")
        self._dismount = True

    @mutator(ArgumentField.RECOVERY_MODEL)
    def set_recovery_model(self, token: str) -> None:
        """Set the recovery model from /FULL, /BULK or /SIMPLE."""
        if self._recovery_model is not None:
            raise ArgumentParserError(
                f"Recovery model already set to '{self._recovery_model.keyword}' "
                f"when parsing '{token}'"
            )
        model = RECOVERY_MODEL_TOKENS.get(token.strip().upper())
        if model is None:
            raise ArgumentParserError(f"'{token}' is not a valid recovery model argument")
        self._recovery_model = model

    # Validation

    def validate(self) -> 'ParsedArguments':
        """Check that the selected mode has everything it needs.

        The first failing requirement is reported. On success the arguments
        become read-only.

        Returns:
            self, for chaining

        Raises:
            ArgumentValidationError: If a required argument is missing
        """
        mode = self._mode
        if mode in (OperationMode.NONE, OperationMode.INVALID):
            raise ArgumentValidationError("No mode specified. Use /? to get help")

        if mode in (OperationMode.BACKUP, OperationMode.RESTORE):
            self._require(self._missing_location())
            self._require(self._missing_databases())
        elif mode == OperationMode.CHANGE_RECOVERY_MODE:
            self._require(self._missing_databases())
            if self._recovery_model is None:
                raise ArgumentValidationError(
                    "/MODE requires a recovery model to be specified (/FULL, /BULK or /SIMPLE)"
                )
        elif mode == OperationMode.BACKUP_INFO:
            self._require_databases_or_location()
        elif mode in (OperationMode.DB_INFO, OperationMode.PURGE_BACKUP_HISTORY,
                      OperationMode.TAKE_OFFLINE, OperationMode.TAKE_ONLINE):
            self._require(self._missing_databases())

        if mode != OperationMode.HELP and self._connection_string is None:
            raise ArgumentValidationError("/C is required")

        self._validated = True
        return self

    def _require(self, problem: Optional[str]) -> None:
        if problem is not None:
            raise ArgumentValidationError(problem)

    def _require_databases_or_location(self) -> None:
        missing_db = self._missing_databases()
        missing_location = self._missing_location()
        if missing_db is not None and missing_location is not None:
            raise ArgumentValidationError(
                f"A database or a backup file is required: {missing_db}; {missing_location}"
            )

    def _missing_location(self) -> Optional[str]:
        if not self._backup_location or not self._backup_location.strip():
            return "/DIR or /FILE is required"
        return None

    def _missing_databases(self) -> Optional[str]:
        if self._use_all_databases is None:
            return "/ALL or /DB is required"
        if self._use_all_databases is False and not self._databases:
            return "/DB requires at least one database. Did you mean to use /ALL instead?"
        return None

    def _ensure_legal(self, field: ArgumentField) -> None:
        if self._validated:
            raise ArgumentParserError("Arguments cannot be changed after validation")
        if self._mode == OperationMode.NONE:
            raise ArgumentParserError(
                "Mode has not been specified when first mode specific argument was encountered"
            )
        if field not in LEGAL_FIELDS[self._mode]:
            raise ArgumentParserError(
                f"{FIELD_LABELS[field]} cannot be used in '{self._mode.value}' mode. Use /? for help"
            )

    def __repr__(self) -> str:
        connection = 'set' if self._connection_string is not None else None
        return (
            f"ParsedArguments(mode={self._mode.value}, use_all_databases={self._use_all_databases}, "
            f"databases={self._databases}, connection_string={connection}, "
            f"backup_location={self._backup_location!r}, is_directory={self._is_directory}, "
            f"file_index={self._file_index}, verify={self._verify}, "
            f"do_log_backup={self._do_log_backup}, dismount={self._dismount}, "
            f"recovery_model={self._recovery_model})"
        )
