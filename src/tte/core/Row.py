# tte/core/Row.py
"""Row Module
=============
One line of the open document.

A `Row` owns three parallel views of the same line:

- ``raw``: the text as stored in the file (one Python ``str``; indices are
  code points, the *document* x coordinate),
- ``rendered``: ``raw`` with every tab expanded to the next tab stop, used
  only for display and for *render* x coordinates,
- ``highlights``: one `HighlightType` per raw character.

``rendered`` and ``highlights`` are recomputed on every mutation, so they are
always consistent with ``raw``. The search Match overlay is kept apart in
``match_term`` and only merged at render time.
"""

import logging
from typing import Optional

from tte.core.FileType import FileType
from tte.core.Highlighter import HighlightType, apply_match_overlay, highlight
from tte.core.Position import SearchDirection


DEFAULT_TAB_STOP = 8


## ==================== Row Class ====================
class Row:
    """Class Row
    ============
    A single line with its render cache and highlight overlay.

    Attributes:
        raw (str): The line content.
        rendered (str): Tab-expanded display form of ``raw``.
        highlights (list[HighlightType]): Category per raw character.
        tab_stop (int): Tab stop width used to build ``rendered``.
        file_type (FileType): Rule set used for highlighting.
        start_context (Optional[str]): Open context this row was highlighted with.
        open_context (Optional[str]): Open context left at the end of the row.
        match_term (Optional[str]): Transient search term for the Match overlay.

    Methods:
        insert(at, char), delete(at), split(at), append(other):
            Mutations; each re-renders and re-highlights the row.
        render(start, end), render_segments(start, end):
            Visible slices of the rendered line.
        raw_to_render_x(raw_x), render_to_raw_x(render_x):
            Coordinate conversion through tab expansion.
        find(query, at, direction):
            Substring search within the row.
        update_highlighting(file_type, start_context):
            Recomputes highlights, reports whether the open context changed.
    """

    def __init__(
        self,
        raw: str = "",
        tab_stop: int = DEFAULT_TAB_STOP,
        file_type: Optional[FileType] = None,
        start_context: Optional[str] = None,
    ) -> None:
        self.raw: str = raw
        self.tab_stop: int = max(1, int(tab_stop))
        self.file_type: FileType = file_type or FileType()
        self.start_context: Optional[str] = start_context
        self.open_context: Optional[str] = None
        self.match_term: Optional[str] = None
        self.rendered: str = ""
        self.highlights: list[HighlightType] = []
        self._refresh()

    def __len__(self) -> int:
        return len(self.raw)

    def __str__(self) -> str:
        return self.raw

    def __repr__(self) -> str:
        return f"Row({self.raw!r})"

    @property
    def is_highlighted(self) -> bool:
        """True when a multi-line construct is still open at the end of the row."""
        return self.open_context is not None

    # ---------------- Mutations ----------------
    def insert(self, at: int, char: str) -> None:
        """Inserts one character at raw index `at` (clamped to ``[0, len]``)."""
        at = max(0, min(at, len(self.raw)))
        self.raw = self.raw[:at] + char + self.raw[at:]
        self._refresh()

    def delete(self, at: int) -> None:
        """Removes the character at `at`; nothing happens outside ``[0, len)``."""
        if not 0 <= at < len(self.raw):
            return
        self.raw = self.raw[:at] + self.raw[at + 1 :]
        self._refresh()

    def split(self, at: int) -> tuple["Row", "Row"]:
        """Splits the row at `at`.

        This row keeps ``raw[:at]`` and is returned as the left half; the right
        half is a new row holding ``raw[at:]``. The right row still needs to be
        highlighted with this row's end context by the owning document.
        """
        at = max(0, min(at, len(self.raw)))
        right = Row(self.raw[at:], self.tab_stop, self.file_type)
        self.raw = self.raw[:at]
        self._refresh()
        return self, right

    def append(self, other: "Row") -> None:
        """Concatenates `other`'s raw content onto this row."""
        self.raw += other.raw
        self._refresh()

    # ---------------- Rendering ----------------
    def render(self, start: int, end: int) -> str:
        """Returns the rendered text between render columns `start` and `end`.

        Bounds are clipped silently, so any pair of integers is accepted.
        """
        start = max(0, start)
        end = min(end, len(self.rendered))
        if start >= end:
            return ""
        return self.rendered[start:end]

    def render_segments(self, start: int, end: int) -> list[tuple[str, HighlightType]]:
        """Returns the visible slice as ``(text, category)`` runs.

        Tab cells take the category of the tab character. The Match overlay is
        applied when a search term is set on the row.
        """
        start = max(0, start)
        end = min(end, len(self.rendered))
        if start >= end:
            return []

        categories = self.highlights
        if self.match_term:
            categories = apply_match_overlay(list(self.highlights), self.raw, self.match_term)

        segments: list[tuple[str, HighlightType]] = []
        buffer: list[str] = []
        current = HighlightType.NONE
        render_x = 0
        for ch, category in zip(self.raw, categories):
            cells = " " * self._cell_width(ch, render_x) if ch == "\t" else ch
            for cell in cells:
                if start <= render_x < end:
                    if buffer and category is not current:
                        segments.append(("".join(buffer), current))
                        buffer = []
                    current = category
                    buffer.append(cell)
                render_x += 1
            if render_x >= end:
                break
        if buffer:
            segments.append(("".join(buffer), current))
        return segments

    def raw_to_render_x(self, raw_x: int) -> int:
        """Converts a raw index to a render column."""
        raw_x = max(0, min(raw_x, len(self.raw)))
        render_x = 0
        for ch in self.raw[:raw_x]:
            render_x += self._cell_width(ch, render_x)
        return render_x

    def render_to_raw_x(self, render_x: int) -> int:
        """Converts a render column back to a raw index.

        Columns inside an expanded tab map to the tab itself; columns past the
        end map to ``len(raw)``.
        """
        current = 0
        for raw_x, ch in enumerate(self.raw):
            current += self._cell_width(ch, current)
            if current > render_x:
                return raw_x
        return len(self.raw)

    # ---------------- Search ----------------
    def find(self, query: str, at: int, direction: SearchDirection) -> Optional[int]:
        """Finds `query` in this row.

        Forward searches ``raw[at:]`` and returns the first hit; backward
        searches ``raw[:at]`` and returns the last hit.
        """
        if not query or at > len(self.raw) or at < 0:
            return None
        if direction is SearchDirection.FORWARD:
            index = self.raw.find(query, at)
        else:
            index = self.raw.rfind(query, 0, at)
        return index if index != -1 else None

    def set_match(self, term: Optional[str]) -> None:
        self.match_term = term or None

    def clear_match(self) -> None:
        self.match_term = None

    # ---------------- Highlighting ----------------
    def update_highlighting(self, file_type: FileType, start_context: Optional[str]) -> bool:
        """Re-highlights with a new rule set and/or incoming context.

        Returns:
            bool: True if the open context at the end of the row changed.
        """
        previous = self.open_context
        self.file_type = file_type
        self.start_context = start_context
        self.highlights, self.open_context = highlight(self.raw, file_type, start_context)
        return previous != self.open_context

    def _refresh(self) -> None:
        """Rebuilds ``rendered`` and ``highlights`` from ``raw``."""
        self.rendered = self._expand_tabs()
        self.highlights, self.open_context = highlight(self.raw, self.file_type, self.start_context)
        if len(self.highlights) != len(self.raw):
            logging.error(f"Row: highlight length mismatch for {self.raw!r}")

    def _expand_tabs(self) -> str:
        parts: list[str] = []
        width = 0
        for ch in self.raw:
            cells = self._cell_width(ch, width)
            parts.append(" " * cells if ch == "\t" else ch)
            width += cells
        return "".join(parts)

    def _cell_width(self, ch: str, render_x: int) -> int:
        if ch == "\t":
            return self.tab_stop - (render_x % self.tab_stop)
        return 1
