"""List command - show dev servers in the scan range."""

import typer

from ..config import Settings
from ..output import build_table
from .common import console, fetch_processes, get_settings


def show_processes(settings: Settings) -> None:
    """Print the table of dev servers for the configured range."""
    processes = fetch_processes(settings)
    console.print()
    console.print(build_table(processes, settings.min_port, settings.max_port))
    console.print()


def list_cmd(ctx: typer.Context) -> None:
    """List dev servers listening on the scanned ports.

    Examples:
        localhorst
        localhorst list
        localhorst --min-port 8000 list
    """
    show_processes(get_settings(ctx))
