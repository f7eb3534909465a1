"""Tests for terminal module."""

import itertools
import os
import signal
import termios

import pytest

from localhorst.terminal import DOWN, ESCAPE, UP, RawTerminal, split_keys


@pytest.mark.parametrize(
    ("data", "expected"),
    [
        ("q", ["q"]),
        ("\x1b[A", [UP]),
        ("\x1b[Bk", [DOWN, "k"]),
        ("\x1bOA", [UP]),
        ("\x1b", [ESCAPE]),
        ("yY\r", ["y", "Y", "\r"]),
        ("\x1b[1;5C", ["\x1b[1;5C"]),
        ("\x1b[", ["\x1b["]),
    ],
)
def test_split_keys(data, expected):
    """Test splitting input chunks into key sequences."""
    assert split_keys(data) == expected


@pytest.fixture
def pty_fds():
    """A pseudo-terminal pair (master, slave)."""
    master, slave = os.openpty()
    yield master, slave
    os.close(master)
    os.close(slave)


def test_raw_terminal_sets_and_restores_mode(pty_fds, quiet_console):
    """Test that entering disables line mode and leaving restores it."""
    _, slave = pty_fds
    original = termios.tcgetattr(slave)

    with RawTerminal(quiet_console, fd=slave):
        raw = termios.tcgetattr(slave)
        assert not raw[3] & termios.ICANON
        assert not raw[3] & termios.ECHO
        assert not raw[3] & termios.ISIG

    assert termios.tcgetattr(slave) == original


def test_raw_terminal_restores_exactly_once(pty_fds, quiet_console, monkeypatch):
    """Test that repeated restore calls only touch the terminal once."""
    _, slave = pty_fds
    restores = []
    real_tcsetattr = termios.tcsetattr

    def spy(fd, when, attrs):
        if when == termios.TCSADRAIN:
            restores.append(fd)
        real_tcsetattr(fd, when, attrs)

    monkeypatch.setattr(termios, "tcsetattr", spy)

    with RawTerminal(quiet_console, fd=slave) as terminal:
        terminal.restore()
        terminal.restore()

    assert terminal.restored
    assert restores == [slave]


def test_raw_terminal_signal_restores_and_exits(pty_fds, quiet_console):
    """Test that an external termination signal restores before exiting."""
    _, slave = pty_fds
    previous = signal.getsignal(signal.SIGTERM)
    original = termios.tcgetattr(slave)

    with pytest.raises(SystemExit) as exc_info:
        with RawTerminal(quiet_console, fd=slave) as terminal:
            assert signal.getsignal(signal.SIGTERM) == terminal._on_signal
            terminal._on_signal(signal.SIGTERM, None)

    assert exc_info.value.code == 0
    assert terminal.restored
    assert termios.tcgetattr(slave) == original
    assert signal.getsignal(signal.SIGTERM) == previous


def test_read_keys(pty_fds, quiet_console):
    """Test reading decoded keys from the terminal."""
    master, slave = pty_fds

    with RawTerminal(quiet_console, fd=slave) as terminal:
        os.write(master, b"\x1b[Bq")
        keys = list(itertools.islice(terminal.read_keys(), 2))

    assert keys == [DOWN, "q"]
