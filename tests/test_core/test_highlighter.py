# tests/test_core/test_highlighter.py
"""Highlighter Tests
====================

Unit tests for the single-pass highlight engine.

This module verifies that `highlight`:

1. Tags comments, strings, characters and numbers for a language's rules.
2. Carries unterminated strings and block comments to the next row through
   the returned open context.
3. Resolves a position where both comment markers match (longer wins, block
   wins a tie).
4. Always returns one category per raw character.
"""

import pytest

from tte.core.FileType import FileType
from tte.core.Highlighter import HighlightType, apply_match_overlay, highlight


H = HighlightType
RUST = FileType.from_file_name("main.rs")
PYTHON = FileType.from_file_name("script.py")
PLAIN = FileType()


def test_hash_line_comment_tags_every_position() -> None:
    """Test: "# comment" with a '#' line comment is entirely Comment."""
    categories, context = highlight("# comment", PYTHON)

    assert categories == [H.COMMENT] * 9
    assert context is None


def test_line_comment_after_code() -> None:
    categories, _ = highlight("x = 1 // note", RUST)

    assert categories[:6] == [H.NONE, H.NONE, H.NONE, H.NONE, H.NUMBER, H.NONE]
    assert categories[6:] == [H.COMMENT] * 7


def test_numbers_and_glued_digits() -> None:
    """Test: Numbers are tagged only when not glued to a word."""
    categories, _ = highlight("x1 = 3.14;", RUST)

    assert categories[0:2] == [H.NONE, H.NONE]
    assert categories[5:9] == [H.NUMBER] * 4
    assert categories[9] is H.NONE


def test_plain_rules_tag_nothing() -> None:
    categories, context = highlight('42 "str" // c', PLAIN)

    assert categories == [H.NONE] * len('42 "str" // c')
    assert context is None


def test_string_with_escaped_quote() -> None:
    raw = 'let s = "a\\"b";'
    categories, context = highlight(raw, RUST)

    start = raw.index('"')
    end = raw.rindex('"')
    assert categories[start : end + 1] == [H.STRING] * (end + 1 - start)
    assert categories[-1] is H.NONE
    assert context is None


def test_unterminated_string_opens_context() -> None:
    """Test: A string left open returns its quote as the open context."""
    categories, context = highlight('let s = "abc', RUST)

    assert context == '"'
    assert categories[-4:] == [H.STRING] * 4

    next_categories, next_context = highlight('def" + 1', RUST, context)
    assert next_categories[:4] == [H.STRING] * 4
    assert next_categories[-1] is H.NUMBER
    assert next_context is None


def test_block_comment_spans_rows() -> None:
    categories, context = highlight("a /* open", RUST)

    assert categories[0] is H.NONE
    assert categories[2:] == [H.COMMENT] * 7
    assert context == "*/"

    middle, context = highlight("still inside", RUST, context)
    assert middle == [H.COMMENT] * len("still inside")
    assert context == "*/"

    last, context = highlight("end */ 7", RUST, context)
    assert last[:6] == [H.COMMENT] * 6
    assert last[-1] is H.NUMBER
    assert context is None


def test_character_literals() -> None:
    raw = "let c = 'a'; let n = '\\n';"
    categories, _ = highlight(raw, RUST)

    first = raw.index("'a'")
    assert categories[first : first + 3] == [H.CHARACTER] * 3
    escaped = raw.index("'\\n'")
    assert categories[escaped : escaped + 4] == [H.CHARACTER] * 4


def test_lifetime_is_not_a_character_literal() -> None:
    categories, _ = highlight("fn f<'a>(x: &'a str)", RUST)

    assert H.CHARACTER not in categories


def test_longer_comment_marker_wins() -> None:
    """Test: A longer line-comment prefix beats a shorter block start."""
    file_type = FileType("Test", {"line_comment": "//", "block_comment": ("/", "!")})

    categories, context = highlight("// x ! y", file_type)
    assert categories == [H.COMMENT] * 8
    assert context is None

    categories, context = highlight("/ x ! y", file_type)
    assert categories[:5] == [H.COMMENT] * 5
    assert categories[5:] == [H.NONE, H.NONE]
    assert context is None


def test_block_comment_wins_equal_length_tie() -> None:
    file_type = FileType("Test", {"line_comment": "#", "block_comment": ("#", "!")})

    categories, context = highlight("# a ! b", file_type)

    assert categories[:5] == [H.COMMENT] * 5
    assert categories[5:] == [H.NONE, H.NONE]
    assert context is None


def test_search_term_overrides_other_categories() -> None:
    categories, _ = highlight("hello 42 hello", PLAIN, None, "hello")

    assert categories[:5] == [H.MATCH] * 5
    assert categories[5:9] == [H.NONE] * 4
    assert categories[9:] == [H.MATCH] * 5


def test_apply_match_overlay_is_case_sensitive() -> None:
    categories = [H.NONE] * 11
    apply_match_overlay(categories, "Hello hello", "hello")

    assert categories[:6] == [H.NONE] * 6
    assert categories[6:] == [H.MATCH] * 5


@pytest.mark.parametrize(
    "raw",
    ["", "plain", '"open', "/* c */ 1.5", "'x' '\\t' 'toolong'", "tab\tsep\t42", "ünïcødé 7 // ç"],
)
def test_one_category_per_character(raw: str) -> None:
    for file_type in (RUST, PYTHON, PLAIN):
        categories, _ = highlight(raw, file_type)
        assert len(categories) == len(raw)


def test_default_colors() -> None:
    assert H.NONE.to_color() == "#ffffff"
    assert H.COMMENT.to_color() == "#859900"
    assert all(category.to_color().startswith("#") for category in H)
