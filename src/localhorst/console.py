"""Console utilities for localhorst CLI."""

import os
from typing import Any

from rich.console import Console

# Shared console instances. Highlighting is off so ports and pids keep the
# colours we give them.
console = Console(highlight=False)
error_console = Console(stderr=True, highlight=False)

# Debug mode - enabled by LOCALHORST_DEBUG environment variable
DEBUG = os.getenv("LOCALHORST_DEBUG", "").lower() in ("1", "true", "yes")


def mark_success(text: str) -> str:
    """Prefix markup text with a green check mark."""
    return f"[green]✓[/green] {text}"


def mark_warning(text: str) -> str:
    """Prefix markup text with a yellow warning sign."""
    return f"[yellow]⚠[/yellow] {text}"


def mark_failure(text: str) -> str:
    """Prefix markup text with a red cross."""
    return f"[red]✗[/red] {text}"


def debug(message: str, **kwargs: Any) -> None:
    """Print debug message to stderr if LOCALHORST_DEBUG is set.

    Args:
        message: Message to print
        **kwargs: Additional arguments for console.print
    """
    if DEBUG:
        error_console.print(f"[dim][DEBUG][/dim] {message}", **kwargs)


def info(message: str, **kwargs: Any) -> None:
    console.print(message, **kwargs)


def success(message: str, **kwargs: Any) -> None:
    """Print a success line, e.g. after a process was signalled."""
    console.print(mark_success(message), **kwargs)


def warning(message: str, **kwargs: Any) -> None:
    """Print a warning line for benign problems (nothing found, already exited)."""
    console.print(mark_warning(message), **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print error message in red to stderr.

    Args:
        message: Message to print
        **kwargs: Additional arguments for console.print
    """
    error_console.print(f"[red]Error:[/red] {message}", **kwargs)
