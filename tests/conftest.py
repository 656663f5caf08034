# tests/conftest.py
"""Pytest configuration with shared fixtures for the TTE editor tests.

The editor core (`tte.core`) does not touch curses, so most fixtures build
real documents and editors. UI tests patch the `curses` module as imported by
the module under test with `curses_mock`, which carries concrete key codes and
a real exception class for `curses.error`.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from tte.core.Document import Document
from tte.core.Editor import Editor
from tte.utils.utils import DEFAULT_CONFIG


class CursesError(Exception):
    """Minimal replacement for `curses.error` used in tests."""


# Concrete values of the curses constants the UI layer reads.
CURSES_CONSTANTS: dict[str, int] = {
    "KEY_UP": 259,
    "KEY_DOWN": 258,
    "KEY_LEFT": 260,
    "KEY_RIGHT": 261,
    "KEY_HOME": 262,
    "KEY_END": 360,
    "KEY_PPAGE": 339,
    "KEY_NPAGE": 338,
    "KEY_DC": 330,
    "KEY_BACKSPACE": 263,
    "KEY_ENTER": 343,
    "KEY_RESIZE": 410,
    "ERR": -1,
    "A_NORMAL": 0,
    "A_REVERSE": 1 << 18,
    "A_BOLD": 1 << 21,
    "COLORS": 256,
    "COLOR_BLACK": 0,
    "COLOR_RED": 1,
    "COLOR_GREEN": 2,
    "COLOR_BLUE": 4,
    "COLOR_MAGENTA": 5,
    "COLOR_CYAN": 6,
    "COLOR_WHITE": 7,
}


@pytest.fixture
def curses_mock() -> MagicMock:
    """Create a `curses` stand-in with concrete constants.

    Returns:
        MagicMock: Mock module; `color_pair(n)` returns ``n * 256`` so tests
        can tell pairs apart.
    """
    mock = MagicMock()
    mock.error = CursesError
    for name, value in CURSES_CONSTANTS.items():
        setattr(mock, name, value)
    for i in range(1, 13):
        setattr(mock, f"KEY_F{i}", 264 + i)
    mock.has_colors.return_value = True
    mock.color_pair.side_effect = lambda n: n * 256
    return mock


@pytest.fixture
def mock_stdscr() -> MagicMock:
    """Create a mock of the curses stdscr with a 24x80 terminal."""
    stdscr = MagicMock()
    stdscr.getmaxyx.return_value = (24, 80)
    return stdscr


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Provide the default configuration with a copy the test may modify."""
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def rust_file(tmp_path: Path) -> Path:
    """A small Rust source file with a block comment spanning two lines."""
    path = tmp_path / "main.rs"
    path.write_text('fn main() {\n    /* start\n    end */ let x = 42;\n    println!("hi");\n}\n')
    return path


@pytest.fixture
def editor(mock_config: dict[str, Any]) -> Editor:
    """A real editor on an empty, unnamed document (80x24 terminal)."""
    return Editor(mock_config)


@pytest.fixture
def make_editor(mock_config: dict[str, Any]):
    """Factory building an editor preloaded with `lines`."""

    def _make(lines: list[str], width: int = 80, height: int = 24) -> Editor:
        ed = Editor(mock_config, width=width, height=height)
        ed.document = Document(lines, tab_stop=ed.tab_stop)
        ed.search.document = ed.document
        return ed

    return _make
