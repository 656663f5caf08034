#!/usr/bin/env python3
# /tte/main.py
"""
TTE Main Entry Point
====================

This script launches the TTE editor. It performs:
1) Configuration & Logging: loads config and initializes logging first.
2) Core Import: imports the editor after logging is ready.
3) Curses Wrapper: initializes and tears down curses so the terminal is
   always restored, even when the editor crashes.
4) Main Loop: draw, read a key, decode it, apply it, until quit.

Usage:
    python main.py [FILE]
"""

from __future__ import annotations

import curses
import locale
import logging
import signal
import sys
from typing import Any, Optional

# --- Step 1: Immediate Logging and Configuration Setup ---
try:
    from tte.utils.logging_config import setup_logging
    from tte.utils.utils import load_config

    config: dict[str, Any] = load_config()
    setup_logging(config)
    logger = logging.getLogger("tte")
except Exception as e:
    print(f"FATAL: Could not initialize configuration or logging system: {e}", file=sys.stderr)
    sys.exit(1)

# --- Step 2: Import the Core Application ---
from tte.core.Commands import CommandKind  # noqa: E402
from tte.core.Editor import Editor  # noqa: E402
from tte.ui.DrawScreen import DrawScreen  # noqa: E402
from tte.ui.KeyBinder import KeyBinder  # noqa: E402
from tte.ui.TerminalAppMode import TerminalAppMode  # noqa: E402


def run_editor(stdscr: curses.window, config: dict[str, Any], file_to_open: Optional[str]) -> None:
    """
    Target for `curses.wrapper`. Builds the editor and runs the main loop.

    Every iteration fully applies one command before the next key is read.
    Terminal read failures are fatal; `curses.wrapper` restores the terminal
    before the exception reaches `start()`.
    """
    height, width = stdscr.getmaxyx()
    editor = Editor(config, file_to_open, width=width, height=height)
    drawer = DrawScreen(editor, stdscr, config)
    keys = KeyBinder(config, stdscr)

    with TerminalAppMode(stdscr):
        # ^Z reaches the editor as a key in raw mode; also ignore SIGTSTP if sent.
        if hasattr(signal, "SIGTSTP"):
            signal.signal(signal.SIGTSTP, signal.SIG_IGN)

        needs_redraw = True
        while not editor.should_quit:
            if needs_redraw:
                drawer.draw()
            key = keys.get_key_input()
            if key == curses.ERR:
                raise curses.error("could not read from terminal")

            command = keys.decode(key)
            if command is None:
                needs_redraw = False
                continue
            if command.kind is CommandKind.RESIZE:
                height, width = stdscr.getmaxyx()
                editor.resize(width, height)
            needs_redraw = editor.process(command)

    logger.info("Main loop finished.")


def start() -> None:
    """Sets the locale and runs the editor inside `curses.wrapper`."""
    logger.info("TTE editor starting up...")
    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    file_to_open = sys.argv[1] if len(sys.argv) > 1 else None

    try:
        curses.wrapper(run_editor, config, file_to_open)
    except curses.error as e:
        logger.critical("Terminal failure, exiting.", exc_info=True)
        print(f"tte: terminal error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception:
        logger.critical("Unhandled exception at the top level.", exc_info=True)
        sys.exit(1)
    logger.info("TTE editor shut down gracefully.")


if __name__ == "__main__":
    start()
