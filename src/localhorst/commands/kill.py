"""Kill command - terminate dev servers by port."""

import typer
from rich.markup import escape

from ..killer import count_processes, kill_all, send_signal, signal_for
from .common import error, fetch_processes, get_settings, info, success, warning


def _describe_failure(pid: int, exc: OSError) -> str:
    if isinstance(exc, PermissionError):
        return f"Permission denied killing PID {pid}. Try sudo."
    return f"Failed to kill PID {pid}: {escape(exc.strerror or str(exc))}"


def kill(
    ctx: typer.Context,
    port: str | None = typer.Argument(None, help="Port of the dev server to kill"),
    force: bool = typer.Option(False, "-f", "--force", help="Use SIGKILL instead of SIGTERM"),
    all: bool = typer.Option(False, "-a", "--all", help="Kill all discovered dev servers"),
) -> None:
    """Kill the dev server on a port, or all of them.

    Examples:
        localhorst kill 3000
        localhorst kill 3000 --force
        localhorst kill --all
    """
    port_number: int | None = None
    if port is not None:
        try:
            port_number = int(port)
        except ValueError:
            error(f'"{escape(port)}" is not a valid port number.')
            raise typer.Exit(1)

    if port_number is None and not all:
        error("Please specify a port number or use --all.")
        info("Usage: localhorst kill <port> or localhorst kill --all")
        raise typer.Exit(1)

    processes = fetch_processes(get_settings(ctx))
    sig = signal_for(force)

    if all:
        if not processes:
            warning("No dev servers found to kill.")
            return

        summary = kill_all(processes, force)
        for proc in summary.killed:
            success(f"Killed {proc.framework} on port {proc.port} (PID {proc.pid}) with {sig.name}")
        for proc in summary.exited:
            warning(f"Process on port {proc.port} (PID {proc.pid}) already exited.")
        for proc, exc in summary.errors:
            error(_describe_failure(proc.pid, exc))

        if not summary.killed:
            warning("No processes were killed.")
        else:
            info(f"\nKilled {count_processes(len(summary.killed))}.")
        return

    target = next((p for p in processes if p.port == port_number), None)
    if target is None:
        error(f"No process found listening on port {port_number}.")
        raise typer.Exit(1)

    try:
        send_signal(target.pid, force)
    except ProcessLookupError:
        warning(f"Process on port {target.port} (PID {target.pid}) already exited.")
    except OSError as e:
        error(_describe_failure(target.pid, e))
        raise typer.Exit(1)
    else:
        success(
            f"Killed {target.framework} on port {target.port} (PID {target.pid}) with {sig.name}"
        )
