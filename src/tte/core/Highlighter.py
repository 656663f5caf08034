# tte/core/Highlighter.py
"""Highlighter Module
=====================
The highlight engine: a pure, single-pass function from one line of raw text
to a parallel list of highlight categories.

Cross-row state (an unterminated string or block comment) is passed in and
returned as an explicit *open context* value: ``None`` when nothing is open,
otherwise the closing delimiter the next row is still waiting for
(``'"'``, ``"*/"``, ...). Rows never share mutable highlighting state.

Priority at a single position:
    1. An open construct carried from the previous position or row.
    2. Comment markers. When both a block-comment start and the line-comment
       prefix match, the longer marker wins; on equal length the block
       comment wins.
    3. String, then character literals.
    4. Numbers.
The search Match overlay is applied afterwards and overrides all of the above.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional


if TYPE_CHECKING:
    from tte.core.FileType import FileType


## ==================== Highlight categories ====================
class HighlightType(Enum):
    """Closed set of highlight categories with their display colours."""

    NONE = "none"
    NUMBER = "number"
    MATCH = "match"
    STRING = "string"
    CHARACTER = "character"
    COMMENT = "comment"

    def to_color(self) -> str:
        """Returns the default foreground colour as a hex RGB string."""
        return HIGHLIGHT_COLORS[self]


HIGHLIGHT_COLORS: dict[HighlightType, str] = {
    HighlightType.NONE: "#ffffff",
    HighlightType.NUMBER: "#dca3a3",
    HighlightType.MATCH: "#268bd2",
    HighlightType.STRING: "#d33682",
    HighlightType.CHARACTER: "#6c71c4",
    HighlightType.COMMENT: "#859900",
}


# ==================== Engine ====================
def highlight(
    raw: str,
    file_type: "FileType",
    open_context: Optional[str] = None,
    search_term: Optional[str] = None,
) -> tuple[list[HighlightType], Optional[str]]:
    """Highlights one line of raw text.

    Args:
        raw: The raw line content (no trailing newline).
        file_type: The file type whose rules apply.
        open_context: Closing delimiter carried over from the previous row,
            or None.
        search_term: When non-empty, every occurrence is tagged MATCH.

    Returns:
        tuple: ``(categories, new_open_context)`` where
        ``len(categories) == len(raw)``.
    """
    rules = file_type.rules
    line_comment: Optional[str] = rules.get("line_comment")
    block = rules.get("block_comment")
    block_start, block_end = block if block else (None, None)
    quotes = tuple(rules.get("string_delimiters") or ())

    categories = [HighlightType.NONE] * len(raw)
    context = open_context
    n = len(raw)
    i = 0

    while i < n:
        # 1. Continue a construct left open by the previous row.
        if context is not None:
            if context == block_end:
                i, context = _consume_block_comment(raw, i, block_end, categories)
            else:
                i, context = _consume_string(raw, i, context, categories)
            continue

        ch = raw[i]
        prev = raw[i - 1] if i > 0 else ""

        # 2. Comments.
        starts_block = bool(block_start) and raw.startswith(block_start, i)
        starts_line = bool(line_comment) and raw.startswith(line_comment, i)
        if starts_block and (not starts_line or len(block_start) >= len(line_comment)):
            end = i + len(block_start)
            categories[i:end] = [HighlightType.COMMENT] * (end - i)
            i, context = _consume_block_comment(raw, end, block_end, categories)
            continue
        if starts_line:
            categories[i:] = [HighlightType.COMMENT] * (n - i)
            break

        # 3. Strings and characters.
        if ch in quotes:
            categories[i] = HighlightType.STRING
            i, context = _consume_string(raw, i + 1, ch, categories)
            continue

        if ch == "'" and rules.get("characters"):
            close = _character_literal_end(raw, i, int(rules.get("max_char_len", 1)))
            if close is not None:
                categories[i : close + 1] = [HighlightType.CHARACTER] * (close + 1 - i)
                i = close + 1
                continue

        # 4. Numbers. Digits glued to a word ("x1", "utf8") stay plain.
        if ch.isalpha() or ch == "_":
            i = _skip_word(raw, i)
            continue
        if rules.get("numbers") and ch.isdigit() and not prev.isalpha():
            i = _consume_number(raw, i, categories)
            continue

        i += 1

    if search_term:
        apply_match_overlay(categories, raw, search_term)
    return categories, context


def apply_match_overlay(categories: list[HighlightType], raw: str, term: str) -> list[HighlightType]:
    """Tags every non-overlapping, case-sensitive occurrence of `term` as MATCH.

    Works in place and returns the same list for convenience.
    """
    if not term:
        return categories
    start = raw.find(term)
    while start != -1:
        end = start + len(term)
        categories[start:end] = [HighlightType.MATCH] * len(term)
        start = raw.find(term, end)
    return categories


# ==================== Helpers ====================
def _consume_string(
    raw: str, i: int, quote: str, categories: list[HighlightType]
) -> tuple[int, Optional[str]]:
    """Tags string content from `i` up to and including the closing quote.

    Returns the next index and the open context (`quote` if unterminated).
    """
    n = len(raw)
    while i < n:
        ch = raw[i]
        categories[i] = HighlightType.STRING
        if ch == "\\" and i + 1 < n:
            categories[i + 1] = HighlightType.STRING
            i += 2
            continue
        i += 1
        if ch == quote:
            return i, None
    return i, quote


def _consume_block_comment(
    raw: str, i: int, block_end: str, categories: list[HighlightType]
) -> tuple[int, Optional[str]]:
    """Tags a block comment body from `i` through the end marker."""
    close = raw.find(block_end, i)
    if close == -1:
        categories[i:] = [HighlightType.COMMENT] * (len(raw) - i)
        return len(raw), block_end
    end = close + len(block_end)
    categories[i:end] = [HighlightType.COMMENT] * (end - i)
    return end, None


def _character_literal_end(raw: str, i: int, max_len: int) -> Optional[int]:
    """Returns the index of the closing quote of a character literal at `i`.

    An escape pair counts as one logical character. Returns None when the
    literal is empty, too long or unterminated.
    """
    j = i + 1
    count = 0
    n = len(raw)
    while j < n and count <= max_len:
        ch = raw[j]
        if ch == "'":
            return j if count > 0 else None
        j += 2 if ch == "\\" else 1
        count += 1
    return None


def _skip_word(raw: str, i: int) -> int:
    n = len(raw)
    while i < n and (raw[i].isalnum() or raw[i] == "_"):
        i += 1
    return i


def _consume_number(raw: str, i: int, categories: list[HighlightType]) -> int:
    """Tags a run of digits with at most one internal dot."""
    n = len(raw)
    seen_dot = False
    while i < n:
        ch = raw[i]
        if ch.isdigit():
            categories[i] = HighlightType.NUMBER
        elif ch == "." and not seen_dot and i + 1 < n and raw[i + 1].isdigit():
            seen_dot = True
            categories[i] = HighlightType.NUMBER
        else:
            break
        i += 1
    return i
