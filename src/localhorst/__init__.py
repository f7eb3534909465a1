"""localhorst - find and kill local dev servers."""

__version__ = "0.1.0"

from .config import ConfigError, Settings, load_settings
from .interactive import Mode, Session, SessionState, render_frame
from .killer import KillSummary, kill_all, send_signal
from .models import PortEntry, ProcessInfo
from .ports import DiscoveryError, PortScanner, discover_ports
from .process_info import detect_framework, enrich_processes, load_processes

__all__ = [
    "__version__",
    "ConfigError",
    "Settings",
    "load_settings",
    "Mode",
    "Session",
    "SessionState",
    "render_frame",
    "KillSummary",
    "kill_all",
    "send_signal",
    "PortEntry",
    "ProcessInfo",
    "DiscoveryError",
    "PortScanner",
    "discover_ports",
    "detect_framework",
    "enrich_processes",
    "load_processes",
]
