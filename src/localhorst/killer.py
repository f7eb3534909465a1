"""Process termination for localhorst."""

import os
import signal
from dataclasses import dataclass, field

from .console import debug
from .models import ProcessInfo


@dataclass
class KillSummary:
    """Result of a kill-all pass."""

    killed: list[ProcessInfo] = field(default_factory=list)
    exited: list[ProcessInfo] = field(default_factory=list)  # Gone before the signal
    errors: list[tuple[ProcessInfo, OSError]] = field(default_factory=list)

    @property
    def failed(self) -> int:
        """Number of processes that were not signalled, for any reason."""
        return len(self.exited) + len(self.errors)


def signal_for(force: bool) -> signal.Signals:
    """SIGKILL when forcing, otherwise SIGTERM."""
    return signal.SIGKILL if force else signal.SIGTERM


def send_signal(pid: int, force: bool = False) -> None:
    """Send a termination signal to a process.

    Args:
        pid: Target process ID
        force: Use SIGKILL instead of SIGTERM

    Raises:
        ProcessLookupError: If the process no longer exists
        PermissionError: If we may not signal the process
        OSError: For any other delivery failure
    """
    sig = signal_for(force)
    debug(f"Sending {sig.name} to pid {pid}")
    os.kill(pid, sig)


def kill_all(processes: list[ProcessInfo], force: bool = False) -> KillSummary:
    """Signal every process in order, never stopping on failure.

    Args:
        processes: Processes to terminate
        force: Use SIGKILL instead of SIGTERM

    Returns:
        KillSummary with per-process outcomes
    """
    summary = KillSummary()

    for proc in processes:
        try:
            send_signal(proc.pid, force)
        except ProcessLookupError:
            summary.exited.append(proc)
        except OSError as e:
            summary.errors.append((proc, e))
        else:
            summary.killed.append(proc)

    return summary


def count_processes(count: int) -> str:
    """Format a process count, e.g. "1 process" or "3 processes"."""
    return f"{count} process" + ("" if count == 1 else "es")
