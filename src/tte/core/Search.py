# tte/core/Search.py
"""Incremental search session.

A session lives for the duration of the "Search: " prompt. Every keystroke
re-runs `Document.find` from the current cursor; the navigation keys pick the
direction and let the user step from match to match.
"""

import logging
from typing import TYPE_CHECKING, Optional

from tte.core.Position import Direction, Position, SearchDirection


if TYPE_CHECKING:
    from tte.core.Document import Document
    from tte.core.Viewport import Viewport


_BACKWARD_KEYS = (Direction.LEFT, Direction.UP)
_STEP_KEYS = (Direction.RIGHT, Direction.DOWN)


class SearchSession:
    """Drives the cursor and the Match overlay while a query is typed.

    Attributes:
        document (Document): Searched document.
        viewport (Viewport): Viewport whose cursor follows the matches.
        saved_cursor (Position): Cursor at the start of the session.
        saved_offset (Position): Scroll offset at the start of the session.
        direction (SearchDirection): Direction used for the last step.
        active (bool): False once the session is finished or aborted.
    """

    def __init__(self, document: "Document", viewport: "Viewport") -> None:
        self.document = document
        self.viewport = viewport
        self.saved_cursor = Position(0, 0)
        self.saved_offset = Position(0, 0)
        self.direction = SearchDirection.FORWARD
        self.active = False

    def start(self) -> None:
        self.saved_cursor = self.viewport.cursor
        self.saved_offset = self.viewport.offset
        self.direction = SearchDirection.FORWARD
        self.active = True
        logging.debug(f"Search started at {tuple(self.saved_cursor)}")

    def update(self, query: str, last_key: Optional[Direction] = None) -> Optional[Position]:
        """Runs one incremental step after the query or a navigation key changed.

        Left/Up search backward from the cursor. Right/Down first step the
        cursor one position right so a repeated press moves to the next match,
        and step back if nothing further is found. Any other key searches
        forward from the cursor and, on a miss, returns to where the session
        started.

        Returns:
            Optional[Position]: The match position, or None.
        """
        if not self.active:
            return None

        moved = False
        if last_key in _BACKWARD_KEYS:
            self.direction = SearchDirection.BACKWARD
        else:
            self.direction = SearchDirection.FORWARD
            if last_key in _STEP_KEYS:
                self.viewport.move(self.document, Direction.RIGHT)
                moved = True

        found = self.document.find(query, self.viewport.cursor, self.direction)
        if found is not None:
            self.viewport.cursor = found
            self.viewport.scroll(self.document)
        elif moved:
            self.viewport.move(self.document, Direction.LEFT)
        else:
            self._restore()
        logging.debug(f"Search step query={query!r} direction={self.direction.value} found={found}")
        return found

    def abort(self) -> None:
        """Ends the session, returning the cursor to where it started."""
        self._restore()
        self._end()

    def finish(self) -> None:
        """Ends the session, keeping the cursor on the current match."""
        self._end()

    def _restore(self) -> None:
        self.viewport.cursor = self.saved_cursor
        self.viewport.offset = self.saved_offset
        self.viewport.scroll(self.document)

    def _end(self) -> None:
        self.document.clear_matches()
        self.active = False
