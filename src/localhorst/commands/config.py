"""Config command - show effective configuration."""

from dataclasses import fields

import typer
from rich.table import Table

from ..config import get_config_path
from .common import console, get_settings


def config(
    ctx: typer.Context,
    path: bool = typer.Option(False, "--path", help="Print only the config file path"),
) -> None:
    """Show the effective localhorst configuration.

    Settings are read from config.yaml in the user config directory
    (override with LOCALHORST_CONFIG). --min-port/--max-port take precedence.

    Examples:
        localhorst config
        localhorst config --path
    """
    config_path = get_config_path()
    if path:
        print(config_path)
        return

    settings = get_settings(ctx)
    table = Table(title="localhorst Configuration")
    table.add_column("Setting", style="green")
    table.add_column("Value", style="yellow")

    for f in fields(settings):
        table.add_row(f.name, str(getattr(settings, f.name)))

    console.print(table)
    source = str(config_path) if config_path.exists() else "defaults (no config file)"
    console.print(f"[dim]Source: {source}[/dim]")
