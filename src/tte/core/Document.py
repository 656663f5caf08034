# tte/core/Document.py
"""Document Module
==================
The ordered collection of `Row`s that make up the open file, plus the file
identity (name, detected encoding, newline style) and the dirty flag.

Key Features:
-------------
- Loading: the file is read as bytes and decoded as UTF-8 first, then with
  the encoding guessed by `chardet`, then as Latin-1. The newline style and
  the presence of a final newline are remembered so that saving an unchanged
  document reproduces the original bytes.
- Editing: `insert` and `delete` mutate single rows (or split/merge two
  rows) and re-highlight only what changed. When an edit changes the open
  context at the end of a row (an unterminated string or block comment), the
  following rows are re-highlighted one by one until the context stabilises.
- Search: `find` walks the rows in one direction without wrapping and marks
  the matched row with the transient Match overlay.

A new document has no rows at all; the first insert creates one. Once rows
exist, deleting never removes the last one, so cursor coordinates stay valid.
"""

import logging
import os
import re
from typing import Optional

import chardet

from tte.core.errors import FileReadError, FileWriteError
from tte.core.FileType import FileType
from tte.core.Position import Position, SearchDirection
from tte.core.Row import DEFAULT_TAB_STOP, Row


CHARDET_SAMPLE_SIZE = 20 * 1024
CHARDET_MIN_CONFIDENCE = 0.75
LINE_BREAK = re.compile(r"\r\n|\r|\n")


## ==================== Document Class ====================
class Document:
    """Class Document
    =================
    Owns the rows of the open file.

    Attributes:
        rows (list[Row]): Lines in file order.
        file_name (Optional[str]): Path of the file, None for an unnamed buffer.
        dirty (bool): True when there are unsaved changes.
        file_type (FileType): Language and highlighting rules.
        tab_stop (int): Tab width passed to every row.
        encoding (str): Encoding used to decode the file and to save it.
        newline (str): Line separator, "\\n" or "\\r\\n".
        trailing_newline (bool): Whether the saved text ends with a separator.

    Methods:
        open(path, tab_stop): Class method, loads a file.
        save(): Writes the rows back to `file_name`.
        insert(at, char), delete(at): Edits at a document position.
        find(query, at, direction): Directional search without wraparound.
        clear_matches(): Removes the search Match overlay.
        is_dirty(), len(), is_empty(), row(index): Accessors.
    """

    def __init__(
        self,
        rows: Optional[list[str]] = None,
        file_name: Optional[str] = None,
        tab_stop: int = DEFAULT_TAB_STOP,
    ) -> None:
        self.file_name: Optional[str] = file_name
        self.file_type: FileType = FileType.from_file_name(file_name)
        self.tab_stop: int = tab_stop
        self.dirty: bool = False
        self.encoding: str = "utf-8"
        self.newline: str = "\n"
        self.trailing_newline: bool = True
        self._match_row: Optional[int] = None
        self._match_term: Optional[str] = None
        self.rows: list[Row] = [Row(line, tab_stop, self.file_type) for line in rows or []]
        self._highlight_all()

    @classmethod
    def open(cls, path: str, tab_stop: int = DEFAULT_TAB_STOP) -> "Document":
        """Loads `path` into a new document.

        Args:
            path: File to read.
            tab_stop: Tab width for rendering.

        Returns:
            Document: A clean (not dirty) document named after `path`.

        Raises:
            FileReadError: If the file is missing, is a directory or cannot be read.
        """
        logging.debug(f"Document.open: reading '{path}'")
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            logging.warning(f"Document.open: could not read '{path}': {e}")
            raise FileReadError(f"Could not open file: {e.strerror or e}", path) from e

        text, encoding = _decode(data, path)
        newline = "\r\n" if "\r\n" in text else "\n"
        lines = LINE_BREAK.split(text)
        trailing_newline = lines[-1] == ""
        if trailing_newline:
            lines.pop()

        document = cls(lines, file_name=path, tab_stop=tab_stop)
        document.encoding = encoding
        document.newline = newline
        document.trailing_newline = trailing_newline
        logging.info(
            f"Document opened: '{path}' ({len(document.rows)} lines, encoding {encoding}, "
            f"type {document.file_type.name})"
        )
        return document

    def save(self) -> None:
        """Writes all rows to `file_name` and clears the dirty flag.

        Raises:
            FileWriteError: If no file name is set or the write fails. The
                dirty flag is left untouched in that case.
        """
        if not self.file_name:
            raise FileWriteError("No file name set")

        content = self.newline.join(row.raw for row in self.rows)
        if self.rows and self.trailing_newline:
            content += self.newline

        try:
            with open(self.file_name, "w", encoding=self.encoding, newline="") as f:
                f.write(content)
        except (OSError, UnicodeError, LookupError) as e:
            logging.error(f"Failed to write file '{self.file_name}': {e}", exc_info=True)
            raise FileWriteError(f"Could not write file: {e}", self.file_name) from e

        self.dirty = False
        logging.info(f"Document saved: '{self.file_name}' ({len(self.rows)} lines)")

        file_type = FileType.from_file_name(self.file_name)
        if file_type != self.file_type:
            self.file_type = file_type
            self._highlight_all()

    def set_file_name(self, file_name: str) -> None:
        """Renames the document and re-resolves its file type."""
        self.file_name = file_name
        file_type = FileType.from_file_name(file_name)
        if file_type != self.file_type:
            self.file_type = file_type
            self._highlight_all()

    # ---------------- Accessors ----------------
    def __len__(self) -> int:
        return len(self.rows)

    def len(self) -> int:
        return len(self.rows)

    def is_empty(self) -> bool:
        return not self.rows

    def is_dirty(self) -> bool:
        return self.dirty

    def row(self, index: int) -> Optional[Row]:
        if 0 <= index < len(self.rows):
            return self.rows[index]
        return None

    # ---------------- Editing ----------------
    def insert(self, at: Position, char: str) -> None:
        """Inserts `char` at document position `at`.

        A newline splits the row at ``at.x``; past the last row it appends an
        empty row, and on an empty document it yields two empty rows. Any other character goes into the row at
        ``at.y`` clamped to the last row, creating the first row of an empty
        document.
        """
        if char == "\n":
            self._insert_newline(at)
            self.dirty = True
            return

        if not self.rows:
            self.rows.append(Row("", self.tab_stop, self.file_type))
        y = max(0, min(at.y, len(self.rows) - 1))
        row = self.rows[y]
        previous_end = row.open_context
        row.insert(at.x, char)
        self._cascade_from(y, previous_end)
        self.dirty = True

    def delete(self, at: Position) -> None:
        """Deletes the character at `at`, or joins the next row at end of line.

        Positions past the last row, and the end of the last row, are no-ops.
        """
        if at.y < 0 or at.y >= len(self.rows):
            return
        row = self.rows[at.y]

        if at.x == len(row):
            if at.y + 1 >= len(self.rows):
                return
            following = self.rows.pop(at.y + 1)
            row.append(following)
            self._cascade_from(at.y, following.open_context)
            self.dirty = True
            return

        if not 0 <= at.x < len(row):
            return
        previous_end = row.open_context
        row.delete(at.x)
        self._cascade_from(at.y, previous_end)
        self.dirty = True

    def _insert_newline(self, at: Position) -> None:
        if not self.rows:
            # An empty document behaves like a single empty line.
            self.rows.append(Row("", self.tab_stop, self.file_type))
            at = Position(0, 0)
        elif at.y >= len(self.rows):
            start = self.rows[-1].open_context
            self.rows.append(Row("", self.tab_stop, self.file_type, start_context=start))
            return

        row = self.rows[at.y]
        previous_end = row.open_context
        left, right = row.split(at.x)
        right.update_highlighting(self.file_type, left.open_context)
        self.rows.insert(at.y + 1, right)
        self._cascade_from(at.y + 1, previous_end)

    # ---------------- Search ----------------
    def find(self, query: str, at: Position, direction: SearchDirection) -> Optional[Position]:
        """Finds `query` starting at `at`, moving one row at a time.

        The search stops at the start or end of the document (no wraparound).
        On a hit the matched row gets the Match overlay and any previously
        matched row loses it.

        Returns:
            Optional[Position]: Document position of the match start, or None.
        """
        if not query:
            self.clear_matches()
            return None
        if query != self._match_term:
            self.clear_matches()
        if at.y < 0 or at.y >= len(self.rows):
            return None

        y = at.y
        x = max(0, min(at.x, len(self.rows[y])))
        steps = len(self.rows) - y if direction is SearchDirection.FORWARD else y + 1

        for _ in range(steps):
            found = self.rows[y].find(query, x, direction)
            if found is not None:
                self._mark_match(y, query)
                return Position(found, y)
            if direction is SearchDirection.FORWARD:
                y += 1
                x = 0
            else:
                y -= 1
                x = len(self.rows[y]) if y >= 0 else 0
        return None

    def clear_matches(self) -> None:
        """Removes the Match overlay from whichever row carries it."""
        if self._match_row is not None and self._match_row < len(self.rows):
            self.rows[self._match_row].clear_match()
        self._match_row = None
        self._match_term = None

    def _mark_match(self, index: int, query: str) -> None:
        if self._match_row is not None and self._match_row != index and self._match_row < len(self.rows):
            self.rows[self._match_row].clear_match()
        self.rows[index].set_match(query)
        self._match_row = index
        self._match_term = query

    # ---------------- Highlighting ----------------
    def _highlight_all(self) -> None:
        """Highlights every row top to bottom, threading the open context."""
        context: Optional[str] = None
        for row in self.rows:
            row.update_highlighting(self.file_type, context)
            context = row.open_context

    def _cascade_from(self, index: int, previous_end: Optional[str]) -> None:
        """Re-highlights the rows after `index` while the open context changes.

        Args:
            index: Row that was just edited and re-highlighted.
            previous_end: The open context the next row was highlighted with
                before the edit.
        """
        context = self.rows[index].open_context
        if context == previous_end:
            return
        updated = 0
        for row in self.rows[index + 1 :]:
            changed = row.update_highlighting(self.file_type, context)
            context = row.open_context
            updated += 1
            if not changed:
                break
        logging.debug(f"Document: open context changed at row {index}, re-highlighted {updated} row(s)")


def _decode(data: bytes, path: str) -> tuple[str, str]:
    """Decodes file bytes, returning the text and the encoding used."""
    if not data:
        return "", "utf-8"
    try:
        return data.decode("utf-8"), "utf-8"
    except UnicodeDecodeError:
        pass

    guess = chardet.detect(data[:CHARDET_SAMPLE_SIZE])
    encoding = guess.get("encoding")
    confidence = guess.get("confidence") or 0.0
    logging.debug(
        f"Chardet detected encoding '{encoding}' with confidence {confidence:.2f} "
        f"for '{os.path.basename(path)}'."
    )
    if encoding and confidence >= CHARDET_MIN_CONFIDENCE:
        try:
            return data.decode(encoding), encoding
        except (UnicodeDecodeError, LookupError) as e:
            logging.warning(f"Failed to decode '{path}' as '{encoding}': {e}")

    # Latin-1 maps every byte, so this always succeeds.
    return data.decode("latin-1"), "latin-1"
