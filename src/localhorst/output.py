"""Static table output for localhorst."""

import os

from rich import box
from rich.console import RenderableType
from rich.table import Table
from rich.text import Text

from .models import ProcessInfo

PORT_MIN_WIDTH = 4
PID_MIN_WIDTH = 3
PROCESS_MIN_WIDTH = 7
DIRECTORY_MIN_WIDTH = 9
DIRECTORY_MAX_WIDTH = 40


def shorten_path(path: str) -> str:
    """Replace the home directory prefix with ~."""
    home = os.environ.get("HOME")
    if home and (path == home or path.startswith(home + os.sep)):
        return "~" + path[len(home) :]
    return path


def no_servers_message(min_port: int, max_port: int) -> str:
    """Text shown when nothing is listening in the scanned range."""
    return f"No dev servers found on ports {min_port}-{max_port}."


def build_table(processes: list[ProcessInfo], min_port: int, max_port: int) -> RenderableType:
    """Build the table of discovered dev servers.

    Args:
        processes: Enriched processes to show
        min_port: Start of the scanned range, used in the empty message
        max_port: End of the scanned range, used in the empty message

    Returns:
        A rich Table, or a single dim line when there is nothing to show
    """
    if not processes:
        return Text(no_servers_message(min_port, max_port), style="dim")

    table = Table(box=box.SIMPLE_HEAD, show_edge=False, header_style="bold")
    table.add_column("PORT", style="cyan", min_width=PORT_MIN_WIDTH, no_wrap=True)
    table.add_column("PID", style="dim", min_width=PID_MIN_WIDTH, no_wrap=True)
    table.add_column("PROCESS", style="green", min_width=PROCESS_MIN_WIDTH, no_wrap=True)
    table.add_column(
        "DIRECTORY",
        style="bright_black",
        min_width=DIRECTORY_MIN_WIDTH,
        max_width=DIRECTORY_MAX_WIDTH,
        overflow="ellipsis",
        no_wrap=True,
    )

    for proc in processes:
        table.add_row(
            str(proc.port),
            str(proc.pid),
            proc.framework,
            shorten_path(proc.cwd) or "-",
        )

    return table
