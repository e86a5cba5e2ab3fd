"""
Command line grammar: modes, parsed arguments, scanner and errors
"""

from .errors import ArgumentError, ArgumentParserError, ArgumentValidationError
from .modes import OperationMode, resolve_connection_alias
from .parsed_arguments import ParsedArguments
from .parser import parse_arguments

__all__ = [
    'ArgumentError',
    'ArgumentParserError',
    'ArgumentValidationError',
    'OperationMode',
    'ParsedArguments',
    'parse_arguments',
    'resolve_connection_alias',
]
