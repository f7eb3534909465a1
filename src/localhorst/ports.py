"""Listening port discovery for localhorst."""

import re
import subprocess

from .config import DEFAULT_MAX_PORT, DEFAULT_MIN_PORT
from .console import debug
from .models import PortEntry

SCAN_TIMEOUT = 10

_SS_USER_RE = re.compile(r'\("([^"]*)",pid=(\d+)')


class DiscoveryError(Exception):
    """Raised when the system cannot be queried for processes."""

    def __init__(self, message: str, permission_denied: bool = False) -> None:
        super().__init__(message)
        self.permission_denied = permission_denied


def parse_lsof_output(raw: str) -> list[PortEntry]:
    """Parse lsof field output (-F pcn) into port entries.

    lsof -F prints one field per line, prefixed by a single letter:
        p<pid>   process ID
        c<cmd>   command name
        n<name>  network name, e.g. *:3000 or [::1]:5173

    Args:
        raw: lsof stdout

    Returns:
        Entries in the order lsof reported them (not deduplicated)
    """
    entries: list[PortEntry] = []
    pid = 0
    command = ""

    for line in raw.splitlines():
        if not line:
            continue
        tag, value = line[0], line[1:]
        if tag == "p":
            pid = int(value)
        elif tag == "c":
            command = value
        elif tag == "n":
            _, sep, port_str = value.rpartition(":")
            if sep and port_str.isdigit():
                entries.append(PortEntry(port=int(port_str), pid=pid, command=command))

    return entries


def parse_ss_output(raw: str) -> list[PortEntry]:
    """Parse `ss -tlnpH` output into port entries.

    Format: LISTEN 0 511 0.0.0.0:3000 0.0.0.0:* users:(("node",pid=1234,fd=22))
    Sockets without a users column (owned by other users) are skipped.
    """
    entries: list[PortEntry] = []

    for line in raw.splitlines():
        parts = line.split()
        if len(parts) < 6:
            continue
        _, sep, port_str = parts[3].rpartition(":")
        if not sep or not port_str.isdigit():
            continue
        for command, pid in _SS_USER_RE.findall(" ".join(parts[5:])):
            entries.append(PortEntry(port=int(port_str), pid=int(pid), command=command))

    return entries


def filter_entries(entries: list[PortEntry], min_port: int, max_port: int) -> list[PortEntry]:
    """Keep entries in range, drop (pid, port) duplicates, sort by port.

    IPv4 and IPv6 sockets of the same process produce duplicate pairs;
    the first occurrence wins. Sorting is stable.
    """
    seen: set[tuple[int, int]] = set()
    unique: list[PortEntry] = []

    for entry in entries:
        if not min_port <= entry.port <= max_port:
            continue
        key = (entry.pid, entry.port)
        if key in seen:
            continue
        seen.add(key)
        unique.append(entry)

    return sorted(unique, key=lambda e: e.port)


class PortScanner:
    """Scan the system for listening TCP sockets with their owning process."""

    def scan(self) -> list[PortEntry]:
        """Get all listening TCP sockets.

        Tries lsof first (macOS/Linux), then ss (Linux) if lsof is missing.

        Returns:
            Raw entries, possibly with duplicates

        Raises:
            DiscoveryError: If no scanner can be run
        """
        try:
            return self._scan_lsof()
        except FileNotFoundError:
            debug("lsof not found, falling back to ss")

        try:
            return self._scan_ss()
        except FileNotFoundError as e:
            raise DiscoveryError("Neither lsof nor ss is available") from e

    def _run(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        debug(f"Running {' '.join(args)}")
        try:
            return subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=SCAN_TIMEOUT,
            )
        except PermissionError as e:
            raise DiscoveryError(
                f"Permission denied running {args[0]}", permission_denied=True
            ) from e
        except subprocess.TimeoutExpired as e:
            raise DiscoveryError(f"{args[0]} timed out after {SCAN_TIMEOUT}s") from e

    def _scan_lsof(self) -> list[PortEntry]:
        result = self._run(["lsof", "-iTCP", "-sTCP:LISTEN", "-P", "-n", "-F", "pcn"])
        if result.returncode != 0 and not result.stdout:
            # lsof exits 1 when nothing matches
            return []
        return parse_lsof_output(result.stdout)

    def _scan_ss(self) -> list[PortEntry]:
        result = self._run(["ss", "-tlnpH"])
        if result.returncode != 0:
            stderr = result.stderr.strip()
            raise DiscoveryError(
                f"ss failed: {stderr or 'exit code ' + str(result.returncode)}",
                permission_denied="permission denied" in stderr.lower(),
            )
        return parse_ss_output(result.stdout)


def discover_ports(
    min_port: int = DEFAULT_MIN_PORT,
    max_port: int = DEFAULT_MAX_PORT,
    scanner: PortScanner | None = None,
) -> list[PortEntry]:
    """Discover listening TCP ports in the given range.

    Args:
        min_port: Lowest port to include
        max_port: Highest port to include
        scanner: Scanner to use. Defaults to PortScanner().

    Returns:
        Entries deduplicated by (pid, port), sorted ascending by port

    Raises:
        DiscoveryError: If the system cannot be queried
    """
    scanner = scanner or PortScanner()
    entries = filter_entries(scanner.scan(), min_port, max_port)
    debug(f"Found {len(entries)} listening ports in {min_port}-{max_port}")
    return entries
