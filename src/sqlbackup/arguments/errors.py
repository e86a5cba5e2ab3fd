"""Exceptions raised while reading the command line."""


class ArgumentError(Exception):
    """Base exception for invalid command lines. Nothing has been executed yet."""
    pass


class ArgumentParserError(ArgumentError):
    """Raised for malformed, unknown, duplicate or misplaced arguments."""
    pass


class ArgumentValidationError(ArgumentError):
    """Raised when a mode is missing a required argument after parsing."""
    pass
