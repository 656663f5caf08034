# tte/core/Viewport.py
"""Cursor/viewport controller.

The cursor is kept as a *document* position (raw index, row). The scroll
offset is kept as a *render* position: ``offset.x`` is a column in the
tab-expanded line, ``offset.y`` is the first visible row. All conversions go
through `Row.raw_to_render_x`.
"""

import logging
from typing import TYPE_CHECKING

from tte.core.Position import Direction, Position


if TYPE_CHECKING:
    from tte.core.Document import Document


## ==================== Viewport Class ====================
class Viewport:
    """Class Viewport
    =================
    Tracks the cursor and the visible window over a document.

    Attributes:
        cursor (Position): Cursor as a document position.
        offset (Position): Top-left visible cell (render column, row index).
        width (int): Visible text columns.
        height (int): Visible text rows.
    """

    def __init__(self, width: int = 80, height: int = 24) -> None:
        self.cursor = Position(0, 0)
        self.offset = Position(0, 0)
        self.width = max(1, width)
        self.height = max(1, height)

    def resize(self, width: int, height: int) -> None:
        self.width = max(1, width)
        self.height = max(1, height)
        logging.debug(f"Viewport resized to {self.width}x{self.height}")

    def set_cursor(self, document: "Document", position: Position) -> None:
        """Moves the cursor to `position`, clamped to the document."""
        self.cursor = self._clamp(document, position.x, position.y)

    # ---------------- Motion ----------------
    def move(self, document: "Document", direction: Direction) -> None:
        """Applies one cursor motion.

        Left at column 0 wraps to the end of the previous row and Right at the
        end of a row wraps to the start of the next one. Vertical motions clamp
        the row to the document and the column to the target row's length.
        """
        x, y = self.cursor
        last = max(0, len(document) - 1)
        row = document.row(y)
        row_len = len(row) if row is not None else 0

        if direction is Direction.UP:
            y = max(0, y - 1)
        elif direction is Direction.DOWN:
            y = min(last, y + 1)
        elif direction is Direction.LEFT:
            if x > 0:
                x -= 1
            elif y > 0:
                y -= 1
                previous = document.row(y)
                x = len(previous) if previous is not None else 0
        elif direction is Direction.RIGHT:
            if x < row_len:
                x += 1
            elif y < last:
                y += 1
                x = 0
        elif direction is Direction.PAGE_UP:
            y = max(0, y - self.height)
        elif direction is Direction.PAGE_DOWN:
            y = min(last, y + self.height)
        elif direction is Direction.HOME:
            x = 0
        elif direction is Direction.END:
            x = row_len

        self.cursor = self._clamp(document, x, y)

    def _clamp(self, document: "Document", x: int, y: int) -> Position:
        y = max(0, min(y, len(document) - 1)) if len(document) else 0
        row = document.row(y)
        x = max(0, min(x, len(row) if row is not None else 0))
        return Position(x, y)

    # ---------------- Scrolling ----------------
    def render_x(self, document: "Document") -> int:
        """Cursor column in render coordinates."""
        row = document.row(self.cursor.y)
        return row.raw_to_render_x(self.cursor.x) if row is not None else 0

    def scroll(self, document: "Document") -> None:
        """Shifts the offset by the minimum needed to keep the cursor visible."""
        render_x = self.render_x(document)
        off_x, off_y = self.offset
        y = self.cursor.y

        if y < off_y:
            off_y = y
        elif y >= off_y + self.height:
            off_y = y - self.height + 1

        if render_x < off_x:
            off_x = render_x
        elif render_x >= off_x + self.width:
            off_x = render_x - self.width + 1

        self.offset = Position(off_x, off_y)

    def screen_cursor(self, document: "Document") -> Position:
        """Cursor position relative to the top-left of the text area."""
        return Position(self.render_x(document) - self.offset.x, self.cursor.y - self.offset.y)
