"""Typer CLI for localhorst - Main entry point."""

from typing import Any

import click
import typer
from typer.core import TyperGroup

from . import __version__
from .commands import config, interactive, kill, list_cmd, show_processes
from .config import ConfigError, load_settings
from .console import error


class CommandGroup(TyperGroup):
    """Command group that reports unknown commands with exit status 1."""

    def resolve_command(self, ctx: click.Context, args: list[str]) -> Any:
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            error(f"{e.format_message()} Run 'localhorst --help' for usage.")
            raise typer.Exit(1) from e


app = typer.Typer(
    name="localhorst",
    help="List and kill local dev servers.",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"localhorst version {__version__}")
        raise typer.Exit()


@app.callback(
    cls=CommandGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    min_port: int | None = typer.Option(None, "--min-port", help="Lowest port to scan"),
    max_port: int | None = typer.Option(None, "--max-port", help="Highest port to scan"),
) -> None:
    """List and kill local dev servers running on ports 3000-9000.

    Without a command, lists the dev servers.
    """
    try:
        settings = load_settings().with_range(min_port, max_port)
    except ConfigError as e:
        error(str(e))
        raise typer.Exit(1)

    ctx.obj = settings
    if ctx.invoked_subcommand is None:
        show_processes(settings)


# Register all commands
app.command(name="list")(list_cmd)
app.command()(kill)
app.command()(interactive)
app.command(name="i", hidden=True)(interactive)
app.command()(config)


def main() -> None:
    """Main entry point."""
    app()
