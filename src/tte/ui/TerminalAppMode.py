# src/tte/ui/TerminalAppMode.py
from __future__ import annotations

import curses
import logging
from typing import Optional


class TerminalAppMode:
    """
    Raw-mode terminal state for the editor.

    While entered, the terminal is on the alternate screen with application
    cursor keys, every control character (including ^S, ^Q and ^Z) reaches the
    editor unprocessed, typed keys are not echoed and curses decodes function
    keys. `exit()` restores the previous modes; it is safe to call twice.

    Usable as a context manager::

        with TerminalAppMode(stdscr):
            run_editor()
    """

    ENTER_CAPS = ("smcup", "smkx")
    EXIT_CAPS = ("rmkx", "rmcup")
    ESC_DELAY_MS = 25

    def __init__(self, stdscr: Optional[curses.window] = None) -> None:
        self._stdscr = stdscr
        self._entered = False

    def __enter__(self) -> TerminalAppMode:
        if self._stdscr is None:
            raise RuntimeError("TerminalAppMode needs a window to enter")
        self.enter(self._stdscr)
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.exit()

    @property
    def entered(self) -> bool:
        return self._entered

    def enter(self, stdscr: curses.window) -> None:
        self._stdscr = stdscr
        for cap in self.ENTER_CAPS:
            self._tputs(cap)

        try:
            curses.raw()
        except curses.error:
            curses.cbreak()
        curses.noecho()
        stdscr.keypad(True)
        try:
            curses.set_escdelay(self.ESC_DELAY_MS)
        except (AttributeError, curses.error):
            logging.debug("set_escdelay unavailable; ESC detection uses the terminal default")

        stdscr.scrollok(False)
        stdscr.clearok(True)
        stdscr.erase()
        stdscr.refresh()

        self._entered = True
        logging.debug("TerminalAppMode: raw mode on alternate screen")

    def exit(self) -> None:
        if not self._entered:
            return
        try:
            if self._stdscr is not None:
                self._stdscr.keypad(False)
            curses.noraw()
            curses.echo()
        except curses.error as e:
            logging.debug("TerminalAppMode: restoring input modes failed: %r", e)

        for cap in self.EXIT_CAPS:
            self._tputs(cap)
        self._entered = False
        logging.debug("TerminalAppMode: terminal modes restored")

    def _tputs(self, capname: str) -> None:
        """Emits a terminfo capability if the terminal defines it."""
        try:
            sequence = curses.tigetstr(capname)
            if sequence:
                curses.putp(sequence)
        except curses.error as e:
            logging.debug("tputs(%s) skipped: %r", capname, e)
