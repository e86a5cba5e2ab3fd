"""
Color scheme constants for Rich terminal output.

Keeps the palette consistent across the mode commands.
"""

from rich.markup import escape

# Tables
HEADERS = "bold magenta"           # Column headers
TABLE_TITLE = "bold blue"          # Table titles

# Primary Information Hierarchy
PRIMARY = "bold yellow"            # Database names, backup ids
SECONDARY = "cyan"                 # Access modes, recovery models

# Data Types
NUMBERS = "green"                  # Counts, sizes
DATES = "blue"                     # Timestamps, durations

# Database states and outcomes
STATUS_SUCCESS = "bold green"
STATUS_WARNING = "bold yellow"
STATUS_ERROR = "bold red"
STATUS_INFO = "cyan"
STATUS_INACTIVE = "dim"

MUTED = "dim white"                # Helper text, error details


def status_color(status: str) -> str:
    """Get appropriate color for a database state or outcome."""
    status_lower = status.lower()

    if status_lower in ['online', 'success', 'multi_user', 'completed']:
        return STATUS_SUCCESS
    elif status_lower in ['restoring', 'recovering', 'recovery_pending', 'copying',
                          'single_user', 'restricted_user']:
        return STATUS_WARNING
    elif status_lower in ['offline', 'offline_secondary', 'suspect', 'emergency', 'failed']:
        return STATUS_ERROR
    else:
        return STATUS_INACTIVE


def format_status(status: str) -> str:
    """Format status with appropriate color markup."""
    color = status_color(status)
    return f"[{color}]{status}[/{color}]"


def format_number(value, suffix: str = "") -> str:
    """Format number with consistent styling."""
    return f"[{NUMBERS}]{value}{suffix}[/{NUMBERS}]"


def format_primary(text: str) -> str:
    """Format primary identifier with consistent styling."""
    return f"[{PRIMARY}]{escape(text)}[/{PRIMARY}]"

