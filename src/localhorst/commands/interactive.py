"""Interactive command - keyboard-driven dev server browser."""

import typer

from ..interactive import Session
from ..terminal import stdin_is_tty
from .common import console, error, get_settings


def interactive(ctx: typer.Context) -> None:
    """Browse, open and kill dev servers with the keyboard.

    Keys:
        Up/Down   move the selection
        Enter     actions for the selected server (open, code, kill)
        K         kill all listed servers
        r         refresh
        q         quit
    """
    if not stdin_is_tty():
        error("Interactive mode requires a TTY. Use `localhorst list` for non-interactive output.")
        raise typer.Exit(1)

    Session(get_settings(ctx), console=console).run()
