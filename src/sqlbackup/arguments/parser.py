"""
Argument Parser - Single pass scanner over the command line tokens.

The first token selects the mode. Every following token is either a flag
(starts with '/') or a bare word. Bare words are database names while a
/DB or /ALL list is open; any flag closes the list.
"""

import logging
from typing import Optional, Sequence

from .errors import ArgumentParserError
from .modes import (
    DATABASE_LIST_FLAGS,
    FLAG_MARKER,
    VALUE_FLAGS,
    Flag,
    classify_flag,
)
from .parsed_arguments import ParsedArguments

logger = logging.getLogger(__name__)


def parse_arguments(argv: Optional[Sequence[str]], validate: bool = True) -> ParsedArguments:
    """Parse command line tokens into a ParsedArguments instance.

    Args:
        argv: Tokens without the program name. None or empty selects help.
        validate: Run the mode specific validation after scanning

    Returns:
        Parsed (and by default validated) arguments

    Raises:
        ArgumentParserError: For malformed, unknown or misplaced tokens
        ArgumentValidationError: If the mode is missing a required argument
    """
    parsed = ParsedArguments()
    if not argv:
        parsed.set_mode('/?')
        return parsed.validate() if validate else parsed

    tokens = list(argv)
    parsed.set_mode(tokens[0].strip())

    reading_databases = False
    index = 1
    while index < len(tokens):
        token = tokens[index].strip()
        if token.startswith(FLAG_MARKER):
            reading_databases = False

        flag = classify_flag(token)
        if flag is None:
            if not reading_databases:
                raise ArgumentParserError(f"Unknown argument: '{token}'")
            parsed.add_database(token)
            index += 1
            continue

        value = None
        if flag in VALUE_FLAGS:
            if index + 1 >= len(tokens):
                raise ArgumentParserError(f"'{token}' requires a value")
            index += 1
            value = tokens[index]

        _apply_flag(parsed, flag, token, value)
        if flag in DATABASE_LIST_FLAGS:
            reading_databases = True
        index += 1

    logger.debug(f"Parsed arguments: {parsed!r}")
    return parsed.validate() if validate else parsed


def _apply_flag(parsed: ParsedArguments, flag: Flag, token: str, value: Optional[str]) -> None:
    """Forward a classified flag to the matching mutator."""
    if flag == Flag.DB:
        parsed.select_listed_databases()
    elif flag == Flag.ALL:
        parsed.select_all_databases()
    elif flag == Flag.LOG:
        parsed.set_log_backup()
    elif flag == Flag.VERIFY:
        parsed.set_verify()
    elif flag == Flag.DISMOUNT:
        parsed.set_dismount()
    elif flag == Flag.RECOVERY_MODEL:
        parsed.set_recovery_model(token)
    elif flag == Flag.CONNECTION:
        parsed.set_connection_string(value)
    elif flag == Flag.DIRECTORY:
        parsed.set_location(value, True)
    elif flag == Flag.FILE:
        parsed.set_location(value, False)
    elif flag == Flag.BACKUP_ID:
        parsed.set_file_index(value)
