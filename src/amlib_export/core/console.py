"""Centralized Rich Console management.

Two singletons: stdout carries exported data only, stderr carries status
lines, errors and the progress spinner so that output can be piped.
"""

from rich.console import Console

_console: Console | None = None
_error_console: Console | None = None


def get_console() -> Console:
    """Get or create the stdout Rich Console instance.

    Returns:
        Console: The global stdout Console
    """
    global _console
    if _console is None:
        _console = Console(highlight=False)
    return _console


def get_error_console() -> Console:
    """Get or create the stderr Rich Console instance.

    Returns:
        Console: The global stderr Console
    """
    global _error_console
    if _error_console is None:
        _error_console = Console(stderr=True, highlight=False)
    return _error_console


def safe_print(message: str, style: str | None = None) -> None:
    """Print a status message on stderr with optional styling.

    Args:
        message: The message to print
        style: Optional Rich style string (e.g., "bold red", "green")
    """
    console = get_error_console()
    if style:
        console.print(message, style=style, markup=False)
    else:
        console.print(message, markup=False)
