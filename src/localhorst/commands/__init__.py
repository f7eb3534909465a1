"""Command modules for localhorst CLI."""

from .config import config
from .interactive import interactive
from .kill import kill
from .list import list_cmd, show_processes

__all__ = [
    "config",
    "interactive",
    "kill",
    "list_cmd",
    "show_processes",
]
