"""Tests for output module."""

import io

from rich.console import Console
from rich.table import Table
from rich.text import Text

from localhorst.output import build_table, shorten_path


def render(renderable) -> str:
    console = Console(file=io.StringIO(), width=120)
    console.print(renderable)
    return console.file.getvalue()


def test_shorten_path(monkeypatch):
    """Test replacing the home directory with ~."""
    monkeypatch.setenv("HOME", "/home/dev")

    assert shorten_path("/home/dev/projects/web") == "~/projects/web"
    assert shorten_path("/home/dev") == "~"
    assert shorten_path("/home/developer/web") == "/home/developer/web"
    assert shorten_path("/srv/app") == "/srv/app"
    assert shorten_path("") == ""


def test_build_table_empty():
    """Test that no processes yields a single message line."""
    result = build_table([], 3000, 9000)

    assert isinstance(result, Text)
    assert result.plain == "No dev servers found on ports 3000-9000."


def test_build_table_rows(sample_processes, monkeypatch):
    """Test table contents for discovered processes."""
    monkeypatch.setenv("HOME", "/home/dev")

    table = build_table(sample_processes, 3000, 9000)

    assert isinstance(table, Table)
    assert [c.header for c in table.columns] == ["PORT", "PID", "PROCESS", "DIRECTORY"]
    assert table.row_count == 3

    output = render(table)
    assert "5173" in output
    assert "Next.js" in output
    assert "~/web" in output


def test_build_table_column_minimum_widths(make_process):
    """Test minimum widths and the directory cap."""
    table = build_table([make_process(3000, 1, "Vite", "/x" * 60)], 3000, 9000)

    port, pid, process, directory = table.columns
    assert port.min_width == 4
    assert pid.min_width == 3
    assert process.min_width == 7
    assert directory.max_width == 40
