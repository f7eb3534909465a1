"""Process metadata lookup and framework detection for localhorst."""

import os
import re
import subprocess

from .console import debug
from .models import PortEntry, ProcessInfo
from .ports import SCAN_TIMEOUT, DiscoveryError, discover_ports

# Ordered: the first matching pattern wins. Specific tools must come before
# the runtimes they run on (Next.js before Node, etc.).
FRAMEWORK_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"next[\s-]server|next[\s-]dev|\.next"), "Next.js"),
    (re.compile(r"vite"), "Vite"),
    (re.compile(r"nuxt"), "Nuxt"),
    (re.compile(r"remix[\s-]serve"), "Remix"),
    (re.compile(r"angular"), "Angular"),
    (re.compile(r"svelte[\s-]kit|svelte"), "SvelteKit"),
    (re.compile(r"astro"), "Astro"),
    (re.compile(r"webpack[\s-]dev[\s-]server|webpack"), "Webpack"),
    (re.compile(r"parcel"), "Parcel"),
    (re.compile(r"gatsby"), "Gatsby"),
    (re.compile(r"expo"), "Expo"),
    (re.compile(r"storybook"), "Storybook"),
    (re.compile(r"esbuild"), "esbuild"),
    (re.compile(r"turbopack|turbo"), "Turbopack"),
    (re.compile(r"node"), "Node"),
    (re.compile(r"bun"), "Bun"),
    (re.compile(r"deno"), "Deno"),
    (re.compile(r"python|flask|django|uvicorn|gunicorn"), "Python"),
    (re.compile(r"ruby|rails|puma"), "Rails"),
    (re.compile(r"php|artisan|laravel"), "Laravel"),
]


def detect_framework(full_command: str, short_command: str) -> str | None:
    """Infer the dev server framework from a process's command lines.

    Args:
        full_command: Full command line with arguments
        short_command: Short command name from the port scanner

    Returns:
        Framework label, or None if the process is not a known dev server
    """
    haystack = f"{full_command} {short_command}".lower()
    for pattern, label in FRAMEWORK_PATTERNS:
        if pattern.search(haystack):
            return label
    return None


def parse_cwd_output(raw: str) -> dict[int, str]:
    """Parse `lsof -a -d cwd -F pn` output into a pid -> directory map."""
    result: dict[int, str] = {}
    pid = 0
    for line in raw.splitlines():
        if not line:
            continue
        if line[0] == "p":
            pid = int(line[1:])
        elif line[0] == "n":
            result[pid] = line[1:]
    return result


def parse_ps_output(raw: str) -> dict[int, str]:
    """Parse `ps -o pid=,args=` output into a pid -> command line map."""
    result: dict[int, str] = {}
    for line in raw.splitlines():
        pid_str, _, args = line.strip().partition(" ")
        if pid_str.isdigit() and args:
            result[int(pid_str)] = args.strip()
    return result


def _spawn(args: list[str]) -> subprocess.Popen[str]:
    debug(f"Running {' '.join(args)}")
    try:
        return subprocess.Popen(
            args,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
        )
    except FileNotFoundError as e:
        raise DiscoveryError(f"{args[0]} is not available") from e
    except PermissionError as e:
        raise DiscoveryError(f"Permission denied running {args[0]}", permission_denied=True) from e


def _collect(proc: subprocess.Popen[str]) -> str:
    try:
        stdout, _ = proc.communicate(timeout=SCAN_TIMEOUT)
    except subprocess.TimeoutExpired as e:
        _reap(proc)
        raise DiscoveryError(f"{proc.args[0]} timed out after {SCAN_TIMEOUT}s") from e
    return stdout


def _reap(proc: subprocess.Popen[str] | None) -> None:
    """Kill and wait for a lookup that is still running."""
    if proc is None or proc.returncode is not None:
        return
    proc.kill()
    proc.communicate()


def read_proc_cwds(pids: list[int]) -> dict[int, str]:
    """Resolve working directories from /proc, skipping unreadable pids."""
    result: dict[int, str] = {}
    for pid in pids:
        try:
            result[pid] = os.readlink(f"/proc/{pid}/cwd")
        except OSError:
            continue
    return result


def lookup_processes(pids: list[int]) -> tuple[dict[int, str], dict[int, str]]:
    """Batch-resolve working directories and command lines for pids.

    Both lookups are started before either is waited on, so they run
    concurrently. Without lsof, working directories are read from /proc
    where it exists and are otherwise left unknown.

    Returns:
        (pid -> cwd, pid -> full command line)

    Raises:
        DiscoveryError: If ps cannot be run or a lookup times out
    """
    if not pids:
        return {}, {}

    pid_list = ",".join(str(pid) for pid in pids)
    cwd_proc: subprocess.Popen[str] | None = None
    try:
        cwd_proc = _spawn(["lsof", "-a", "-d", "cwd", "-F", "pn", "-p", pid_list])
    except DiscoveryError as e:
        if e.permission_denied:
            raise
        debug("lsof not found, reading working directories from /proc")

    ps_proc: subprocess.Popen[str] | None = None
    try:
        ps_proc = _spawn(["ps", "-o", "pid=,args=", "-p", pid_list])
        cwds = parse_cwd_output(_collect(cwd_proc)) if cwd_proc else read_proc_cwds(pids)
        commands = parse_ps_output(_collect(ps_proc))
    finally:
        _reap(cwd_proc)
        _reap(ps_proc)

    return cwds, commands


def enrich_processes(entries: list[PortEntry]) -> list[ProcessInfo]:
    """Enrich port entries with cwd, full command line and framework.

    Entries whose framework cannot be detected are dropped. The order of
    surviving entries is preserved.

    Raises:
        DiscoveryError: If a lookup tool cannot be run
    """
    pids = list(dict.fromkeys(entry.pid for entry in entries))
    cwds, commands = lookup_processes(pids)

    processes: list[ProcessInfo] = []
    for entry in entries:
        full_command = commands.get(entry.pid, "")
        framework = detect_framework(full_command, entry.command)
        if framework is None:
            debug(f"Skipping pid {entry.pid} ({entry.command}): no known framework")
            continue
        processes.append(
            ProcessInfo(
                port=entry.port,
                pid=entry.pid,
                command=entry.command,
                cwd=cwds.get(entry.pid, ""),
                full_command=full_command,
                framework=framework,
            )
        )

    return processes


def load_processes(min_port: int, max_port: int) -> list[ProcessInfo]:
    """Discover and enrich dev servers in the given port range."""
    return enrich_processes(discover_ports(min_port, max_port))
