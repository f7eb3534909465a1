"""Fire-and-forget launching of browsers and editors."""

import shlex
import subprocess

from .console import debug


def spawn_detached(command: str, target: str) -> None:
    """Start `command target` without waiting for it.

    Output is discarded and the child gets its own session so it survives
    the terminal UI.

    Raises:
        OSError: If the command cannot be started (e.g. not installed)
    """
    args = [*shlex.split(command), target]
    debug(f"Launching {' '.join(args)}")
    subprocess.Popen(
        args,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
    )


def open_url(url: str, opener: str) -> None:
    """Open a URL in the default browser."""
    spawn_detached(opener, url)


def open_in_editor(path: str, editor: str) -> None:
    """Open a directory in the configured code editor."""
    spawn_detached(editor, path)
