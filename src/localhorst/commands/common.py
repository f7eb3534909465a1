"""Common utilities for CLI commands."""

import typer
from rich.markup import escape

from ..config import Settings
from ..console import console, debug, error, error_console, info, success, warning
from ..models import ProcessInfo
from ..ports import DiscoveryError
from ..process_info import load_processes

# Re-export console utilities
__all__ = [
    "console",
    "error_console",
    "debug",
    "info",
    "success",
    "warning",
    "error",
    "get_settings",
    "fetch_processes",
]


def get_settings(ctx: typer.Context) -> Settings:
    """Get the settings resolved by the main callback."""
    return ctx.obj if isinstance(ctx.obj, Settings) else Settings()


def fetch_processes(settings: Settings) -> list[ProcessInfo]:
    """Discover and enrich dev servers, exiting with status 1 on failure."""
    try:
        processes = load_processes(settings.min_port, settings.max_port)
    except DiscoveryError as e:
        if e.permission_denied:
            error("Permission denied. Try running with sudo.")
        else:
            error(f"Failed to list processes: {escape(str(e))}")
        raise typer.Exit(1)
    debug(f"Found {len(processes)} dev servers")
    return processes
