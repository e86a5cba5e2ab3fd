"""
Command line entry point for sqlbackup.

Flow of one invocation:
- load configuration and set up logging
- parse and validate the arguments (nothing touches the server on failure)
- print help, or open one server connection and dispatch the mode command
- exit with the number of failed databases
"""

import logging
import sys
from typing import Optional, Sequence

from rich.console import Console

from .arguments import ArgumentError, OperationMode, parse_arguments
from .commands import dispatch
from .core.config import Config
from .help_text import print_help
from .logging_utils import setup_logging
from .services.db_service import DbService

logger = logging.getLogger(__name__)

# Largest exit status that survives on every platform
MAX_EXIT_CODE = 255


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one invocation and return its exit code."""
    if argv is None:
        argv = sys.argv[1:]

    config = Config()
    setup_logging(config)
    console = Console(highlight=False)
    error_console = Console(stderr=True, highlight=False)

    try:
        args = parse_arguments(argv)
    except ArgumentError as e:
        logger.error(f"Invalid arguments: {e}")
        error_console.print("Failed to parse command line arguments", markup=False)
        error_console.print(f"  {e}", markup=False)
        return 1

    if args.mode == OperationMode.HELP:
        print_help(console)
        return 0

    logger.info(f"Running {args.mode.value} mode")
    try:
        with DbService.from_connection_string(args.connection_string, config) as backend:
            failures = dispatch(args, backend, config, console=console, error_console=error_console)
    except KeyboardInterrupt:
        error_console.print("\nInterrupted by user", markup=False)
        return 130
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        error_console.print(f"Operation failed: {e}", markup=False)
        return 1

    logger.info(f"{args.mode.value} mode finished with {failures} failures")
    return min(failures, MAX_EXIT_CODE)


if __name__ == "__main__":
    sys.exit(main())
