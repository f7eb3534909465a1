"""Data models for localhorst."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PortEntry:
    """A listening TCP port and the process that owns it."""

    port: int
    pid: int
    command: str  # Short command name as reported by the scanner


@dataclass(frozen=True)
class ProcessInfo(PortEntry):
    """A port entry enriched with process metadata."""

    cwd: str = ""  # Empty when the working directory could not be resolved
    full_command: str = ""
    framework: str = ""
