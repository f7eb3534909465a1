"""Test fixtures and configuration."""

import io
import tempfile
from pathlib import Path

import pytest
from rich.console import Console

from localhorst.config import Settings
from localhorst.models import ProcessInfo


@pytest.fixture
def temp_dir():
    """Temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def isolated_config(temp_dir, monkeypatch):
    """Point the config file at a temp location so user config never leaks in."""
    config_path = temp_dir / "config.yaml"
    monkeypatch.setenv("LOCALHORST_CONFIG", str(config_path))
    return config_path


@pytest.fixture
def settings():
    """Default settings with fixed launcher commands."""
    return Settings(editor="code", opener="xdg-open")


@pytest.fixture
def quiet_console():
    """Console that writes to memory instead of the terminal."""
    return Console(file=io.StringIO(), width=120)


def _make_process(
    port: int, pid: int, framework: str = "Vite", cwd: str = "/srv/app"
) -> ProcessInfo:
    """Build a ProcessInfo with sensible defaults."""
    return ProcessInfo(
        port=port,
        pid=pid,
        command="node",
        cwd=cwd,
        full_command=f"node {framework.lower()}",
        framework=framework,
    )


@pytest.fixture
def make_process():
    """Factory for ProcessInfo instances."""
    return _make_process


@pytest.fixture
def sample_processes():
    """Three dev servers on distinct ports."""
    return [
        _make_process(3000, 111, "Next.js", "/home/dev/web"),
        _make_process(5173, 222, "Vite", "/home/dev/ui"),
        _make_process(8000, 333, "Python", ""),
    ]
