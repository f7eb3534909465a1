"""Interactive terminal session for browsing and killing dev servers."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from rich.console import Console
from rich.markup import escape

from .config import Settings
from .console import debug, mark_failure, mark_success, mark_warning
from .killer import count_processes, kill_all, send_signal
from .launcher import open_in_editor, open_url
from .models import ProcessInfo
from .output import (
    PID_MIN_WIDTH,
    PORT_MIN_WIDTH,
    PROCESS_MIN_WIDTH,
    no_servers_message,
    shorten_path,
)
from .ports import DiscoveryError
from .process_info import load_processes
from .terminal import CTRL_C, DOWN, ENTER, ESCAPE, UP, RawTerminal


FOOTER = "↑/↓ navigate · Enter select · K kill all · r refresh · q quit"


class Mode(Enum):
    """What the session is currently showing and which keys it accepts."""

    LIST = "list"
    ACTIONS = "actions"
    CONFIRM_KILL_ALL = "confirm-kill-all"


@dataclass
class SessionState:
    """Mutable UI state, owned by a single Session."""

    processes: list[ProcessInfo] = field(default_factory=list)
    selected_index: int = 0
    mode: Mode = Mode.LIST
    message: str | None = None

    @property
    def selected(self) -> ProcessInfo | None:
        if not self.processes:
            return None
        return self.processes[self.selected_index]

    def clamp(self) -> None:
        """Keep selected_index inside [0, len(processes) - 1], or 0 if empty."""
        if not self.processes:
            self.selected_index = 0
        else:
            self.selected_index = max(0, min(self.selected_index, len(self.processes) - 1))

    def move(self, delta: int) -> None:
        self.selected_index += delta
        self.clamp()


def render_frame(state: SessionState, settings: Settings) -> str:
    """Render the whole screen for a session state as rich markup.

    Pure: the same state always yields the same text. Column widths are
    recomputed from the current processes on every call.
    """
    lines = ["", "[bold]localhorst[/bold] [dim]interactive mode[/dim]", ""]

    if not state.processes:
        lines.append(f"[dim]{no_servers_message(settings.min_port, settings.max_port)}[/dim]")
        if state.message:
            lines += ["", state.message]
        lines += ["", "[dim]Press[/dim] r [dim]to refresh ·[/dim] q [dim]to quit[/dim]"]
        return "\n".join(lines)

    port_w = max(PORT_MIN_WIDTH, *(len(str(p.port)) for p in state.processes))
    pid_w = max(PID_MIN_WIDTH, *(len(str(p.pid)) for p in state.processes))
    fw_w = max(PROCESS_MIN_WIDTH, *(len(p.framework) for p in state.processes))

    lines.append(
        f"[bold]{'PORT'.ljust(port_w)}  {'PID'.ljust(pid_w)}  "
        f"{'PROCESS'.ljust(fw_w)}  DIRECTORY[/bold]"
    )
    lines.append(f"[dim]{'─' * port_w}  {'─' * pid_w}  {'─' * fw_w}  {'─' * 30}[/dim]")

    for i, proc in enumerate(state.processes):
        port = str(proc.port).ljust(port_w)
        pid = str(proc.pid).ljust(pid_w)
        framework = escape(proc.framework.ljust(fw_w))
        directory = escape(shorten_path(proc.cwd))

        if i == state.selected_index:
            lines.append(f"[reverse bold]{port}  {pid}  {framework}  {directory}  [/reverse bold]")
            if state.mode is Mode.ACTIONS:
                lines.append(
                    "  [cyan]\\[o][/cyan] Open  [cyan]\\[c][/cyan] Code  "
                    "[cyan]\\[k][/cyan] Kill  [dim]\\[Esc] Back[/dim]"
                )
        else:
            lines.append(
                f"[cyan]{port}[/cyan]  [dim]{pid}[/dim]  [green]{framework}[/green]  "
                f"[bright_black]{directory}[/bright_black]"
            )

    if state.mode is Mode.CONFIRM_KILL_ALL:
        lines += [
            "",
            f"[bold red]Kill all {count_processes(len(state.processes))}?[/bold red] "
            "[cyan]\\[y][/cyan] Yes  [cyan]\\[n][/cyan] No",
        ]

    if state.message:
        lines += ["", state.message]

    lines += ["", f"[dim]{FOOTER}[/dim]"]
    return "\n".join(lines)


class Session:
    """Event-driven controller for the interactive mode.

    Keys are handled one at a time; each handler runs to completion,
    including any refresh, before the next key is read.
    """

    def __init__(
        self,
        settings: Settings,
        console: Console | None = None,
        loader: Callable[[], list[ProcessInfo]] | None = None,
        fd: int | None = None,
    ) -> None:
        """Initialize Session.

        Args:
            settings: Scan range and launcher commands
            console: Console to paint on. Defaults to a new Console.
            loader: Returns the current dev servers. Defaults to discovery
                plus enrichment over the configured range.
            fd: Terminal input descriptor. Defaults to stdin.
        """
        self.settings = settings
        self.console = console or Console()
        self.loader = loader or (lambda: load_processes(settings.min_port, settings.max_port))
        self.state = SessionState()
        self.fd = fd

    def run(self) -> None:
        """Refresh, take over the terminal and process keys until quit."""
        self.refresh()
        with RawTerminal(self.console, fd=self.fd) as terminal:
            self.paint()
            for key in terminal.read_keys():
                if not self.handle_key(key):
                    break

    def paint(self) -> None:
        """Clear the screen and draw the current state."""
        self.console.clear()
        self.console.print(render_frame(self.state, self.settings), highlight=False)

    def refresh(self) -> bool:
        """Reload the process list, replacing it wholesale.

        The mode always returns to LIST. On failure the previous list is
        kept and the error becomes the status message.

        Returns:
            True if the list was reloaded
        """
        state = self.state
        state.mode = Mode.LIST
        try:
            processes = self.loader()
        except DiscoveryError as e:
            debug(f"Refresh failed: {e}")
            if e.permission_denied:
                state.message = mark_failure("Permission denied. Try running with sudo.")
            else:
                state.message = mark_failure(f"Failed to list processes: {escape(str(e))}")
            return False

        state.processes = processes
        state.clamp()
        return True

    def _refresh_after_kill(self) -> None:
        """Refresh, keeping the kill outcome above any refresh error."""
        outcome = self.state.message
        if not self.refresh() and outcome:
            self.state.message = f"{outcome}\n{self.state.message}"

    def handle_key(self, key: str) -> bool:
        """Apply one key sequence to the session.

        Returns:
            False when the session should end
        """
        if key == CTRL_C:
            return False

        mode = self.state.mode
        if mode is Mode.CONFIRM_KILL_ALL:
            self._handle_confirm_key(key)
            return True
        if mode is Mode.ACTIONS:
            self._handle_action_key(key)
            return True
        return self._handle_list_key(key)

    def _handle_list_key(self, key: str) -> bool:
        state = self.state

        if key == "q":
            return False

        if key in (UP, DOWN):
            if state.processes:
                state.move(-1 if key == UP else 1)
                state.message = None
                self.paint()
        elif key in ENTER:
            if state.processes:
                state.mode = Mode.ACTIONS
                state.message = None
                self.paint()
        elif key == "K":
            if state.processes:
                state.mode = Mode.CONFIRM_KILL_ALL
                state.message = None
                self.paint()
        elif key == "r":
            state.message = "[dim]Refreshing...[/dim]"
            self.paint()
            if self.refresh():
                state.message = None
            self.paint()

        return True

    def _handle_action_key(self, key: str) -> None:
        state = self.state
        selected = state.selected
        if selected is None:
            state.mode = Mode.LIST
            return

        if key == "o":
            self._open_browser(selected)
        elif key == "c":
            self._open_editor(selected)
        elif key == "k":
            self._kill_one(selected)
            self._refresh_after_kill()
        elif key == ESCAPE:
            state.message = None
        else:
            return

        state.mode = Mode.LIST
        self.paint()

    def _handle_confirm_key(self, key: str) -> None:
        state = self.state
        if key in ("y", "Y"):
            self._kill_all()
            self._refresh_after_kill()
        elif key in ("n", "N", ESCAPE):
            state.message = None
        else:
            return

        state.mode = Mode.LIST
        self.paint()

    def _open_browser(self, proc: ProcessInfo) -> None:
        url = f"http://localhost:{proc.port}"
        try:
            open_url(url, self.settings.opener)
        except OSError as e:
            reason = escape(e.strerror or str(e))
            self.state.message = mark_failure(f"Could not open {url}: {reason}")
            return
        self.state.message = mark_success(f"Opened {url} in browser")

    def _open_editor(self, proc: ProcessInfo) -> None:
        if not proc.cwd:
            self.state.message = mark_warning("No working directory found for this process")
            return
        directory = escape(shorten_path(proc.cwd))
        try:
            open_in_editor(proc.cwd, self.settings.editor)
        except OSError as e:
            self.state.message = mark_failure(
                f"Could not open {directory} in {escape(self.settings.editor)}: "
                f"{escape(e.strerror or str(e))}"
            )
            return
        self.state.message = mark_success(f"Opened {directory} in {escape(self.settings.editor)}")

    def _kill_one(self, proc: ProcessInfo) -> None:
        try:
            send_signal(proc.pid)
        except ProcessLookupError:
            self.state.message = mark_warning(f"Process on port {proc.port} already exited")
        except PermissionError:
            self.state.message = mark_failure(
                f"Permission denied killing PID {proc.pid}. Try sudo."
            )
        except OSError as e:
            self.state.message = mark_failure(
                f"Failed to kill PID {proc.pid}: {escape(e.strerror or str(e))}"
            )
        else:
            self.state.message = mark_success(
                f"Killed {escape(proc.framework)} on port {proc.port} (PID {proc.pid})"
            )

    def _kill_all(self) -> None:
        # Already-exited processes count as failures here
        summary = kill_all(self.state.processes)
        killed = len(summary.killed)
        if summary.failed:
            self.state.message = mark_success(
                f"Killed {count_processes(killed)}, "
                f"[yellow]{summary.failed} failed[/yellow]"
            )
        else:
            self.state.message = mark_success(f"Killed all {count_processes(killed)}")
