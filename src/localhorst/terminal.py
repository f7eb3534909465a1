"""Raw terminal handling for the interactive session."""

import atexit
import os
import signal
import sys
import termios
from collections.abc import Iterator
from types import FrameType
from typing import Any

from rich.console import Console

from .console import debug

CTRL_C = "\x03"
ESCAPE = "\x1b"
UP = "\x1b[A"
DOWN = "\x1b[B"
ENTER = ("\r", "\n")

READ_SIZE = 64

# Exit paths that bypass normal control flow
HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM, signal.SIGHUP)


def split_keys(data: str) -> list[str]:
    """Split a chunk of terminal input into key sequences.

    CSI sequences (ESC [ ... final) stay together; SS3 arrows (ESC O A) are
    normalised to their CSI form. Everything else is one key per character,
    including a lone ESC.

    Examples:
        "\\x1b[Ak" -> ["\\x1b[A", "k"]
        "\\x1b"    -> ["\\x1b"]
    """
    keys: list[str] = []
    i = 0
    while i < len(data):
        if data[i] == ESCAPE and i + 1 < len(data) and data[i + 1] in "[O":
            end = i + 2
            while end < len(data) and not "\x40" <= data[end] <= "\x7e":
                end += 1
            seq = data[i : end + 1]
            if seq[1] == "O":
                seq = ESCAPE + "[" + seq[2:]
            keys.append(seq)
            i = end + 1
        else:
            keys.append(data[i])
            i += 1
    return keys


def stdin_is_tty() -> bool:
    """Whether standard input is an interactive terminal."""
    return sys.stdin.isatty()


class RawTerminal:
    """Put the terminal in key-at-a-time mode and guarantee its restoration.

    Restoration happens exactly once, whichever exit path runs first:
    leaving the context, interpreter shutdown (atexit), or SIGINT/SIGTERM/
    SIGHUP delivered from outside.
    """

    def __init__(self, console: Console, fd: int | None = None) -> None:
        """Initialize RawTerminal.

        Args:
            console: Console whose cursor is hidden while active
            fd: Input file descriptor. Defaults to stdin.
        """
        self.console = console
        self.fd = sys.stdin.fileno() if fd is None else fd
        self._saved: list[Any] | None = None
        self._previous_handlers: dict[int, Any] = {}
        self._restored = False

    def __enter__(self) -> "RawTerminal":
        self._saved = termios.tcgetattr(self.fd)

        mode = termios.tcgetattr(self.fd)
        mode[0] &= ~(termios.ICRNL | termios.IXON)  # iflag
        mode[3] &= ~(termios.ICANON | termios.ECHO | termios.ISIG)  # lflag
        mode[6][termios.VMIN] = 1
        mode[6][termios.VTIME] = 0
        termios.tcsetattr(self.fd, termios.TCSAFLUSH, mode)

        atexit.register(self.restore)
        for signum in HANDLED_SIGNALS:
            self._previous_handlers[signum] = signal.signal(signum, self._on_signal)

        self.console.show_cursor(False)
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.restore()

    @property
    def restored(self) -> bool:
        return self._restored

    def restore(self) -> None:
        """Restore cursor, input mode and signal handlers. Idempotent."""
        if self._restored or self._saved is None:
            return
        self._restored = True

        self.console.show_cursor(True)
        termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved)
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        atexit.unregister(self.restore)
        debug("Terminal restored")

    def _on_signal(self, signum: int, frame: FrameType | None) -> None:
        self.restore()
        raise SystemExit(0)

    def read_keys(self) -> Iterator[str]:
        """Yield key sequences as they arrive. Stops at end of input."""
        while True:
            data = os.read(self.fd, READ_SIZE)
            if not data:
                return
            yield from split_keys(data.decode(errors="replace"))
