# tests/test_core/test_editor.py
"""Editor Tests
===============

Behavioural tests for `Editor.process` and the render model it exposes.

This module verifies:

1. Text editing through commands (typing, Enter, Backspace, Delete).
2. Quit confirmation while the document has unsaved changes.
3. The save flow, including the "Save as: " prompt, abort and write errors.
4. Incremental search driven through the prompt.
5. The welcome screen, status line and expiring message line.
"""

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

from tte.core.Commands import Command, CommandKind
from tte.core.Editor import NO_NAME, SAVE_AS_PROMPT, SEARCH_PROMPT, Editor, Prompt
from tte.core.Highlighter import HighlightType
from tte.core.Position import Direction, Position


def type_text(editor: Editor, text: str) -> None:
    for char in text:
        editor.process(Command.insert_char(char))


def press(editor: Editor, kind: CommandKind) -> bool:
    return editor.process(Command.of(kind))


def raws(editor: Editor) -> list[str]:
    return [row.raw for row in editor.document.rows]


# ---------------- Editing ----------------
def test_typing_inserts_and_moves_cursor(editor: Editor) -> None:
    type_text(editor, "ab")

    assert raws(editor) == ["ab"]
    assert editor.viewport.cursor == Position(2, 0)
    assert editor.document.is_dirty()


def test_enter_at_end_of_row(make_editor) -> None:
    """Test: Enter at the end of "hello" opens an empty row and moves down."""
    editor = make_editor(["hello", "world"])
    editor.viewport.cursor = Position(5, 0)

    assert press(editor, CommandKind.INSERT_NEWLINE) is True

    assert raws(editor) == ["hello", "", "world"]
    assert editor.viewport.cursor == Position(0, 1)


def test_enter_on_empty_document(editor: Editor) -> None:
    press(editor, CommandKind.INSERT_NEWLINE)

    assert raws(editor) == ["", ""]
    assert editor.viewport.cursor == Position(0, 1)


def test_backspace_joins_rows(make_editor) -> None:
    editor = make_editor(["ab", "cd"])
    editor.viewport.cursor = Position(0, 1)

    press(editor, CommandKind.DELETE_BACKWARD)

    assert raws(editor) == ["abcd"]
    assert editor.viewport.cursor == Position(2, 0)


def test_backspace_at_origin_does_nothing(make_editor) -> None:
    editor = make_editor(["ab"])

    press(editor, CommandKind.DELETE_BACKWARD)

    assert raws(editor) == ["ab"]
    assert not editor.document.is_dirty()


def test_delete_forward(make_editor) -> None:
    editor = make_editor(["abc"])
    editor.viewport.cursor = Position(1, 0)

    press(editor, CommandKind.DELETE_FORWARD)

    assert raws(editor) == ["ac"]
    assert editor.viewport.cursor == Position(1, 0)


def test_move_command(make_editor) -> None:
    editor = make_editor(["abc", "d"])

    editor.process(Command.move(Direction.END))
    editor.process(Command.move(Direction.DOWN))

    assert editor.viewport.cursor == Position(1, 1)


def test_escape_outside_prompt_needs_no_redraw(editor: Editor) -> None:
    assert press(editor, CommandKind.ESCAPE) is False


# ---------------- Quit ----------------
def test_clean_document_quits_immediately(editor: Editor) -> None:
    press(editor, CommandKind.QUIT)

    assert editor.should_quit


def test_dirty_document_needs_three_quits(editor: Editor) -> None:
    type_text(editor, "x")

    press(editor, CommandKind.QUIT)
    assert not editor.should_quit
    assert editor.status_message.text == (
        "WARNING! File has unsaved changes. Press Ctrl-Q 2 more times to quit."
    )

    press(editor, CommandKind.QUIT)
    assert not editor.should_quit
    assert editor.status_message.text == (
        "WARNING! File has unsaved changes. Press Ctrl-Q 1 more times to quit."
    )

    press(editor, CommandKind.QUIT)
    assert editor.should_quit


def test_other_command_resets_quit_counter(editor: Editor) -> None:
    type_text(editor, "x")
    press(editor, CommandKind.QUIT)
    assert editor.quit_times == 2

    editor.process(Command.move(Direction.LEFT))

    assert editor.quit_times == 3
    assert editor.status_message.text == ""


def test_resize_does_not_reset_quit_counter(editor: Editor) -> None:
    type_text(editor, "x")
    press(editor, CommandKind.QUIT)

    press(editor, CommandKind.RESIZE)

    assert editor.quit_times == 2


def test_quit_times_from_config(mock_config: dict[str, Any]) -> None:
    mock_config["editor"]["quit_times"] = 1
    editor = Editor(mock_config)
    type_text(editor, "x")

    press(editor, CommandKind.QUIT)

    assert editor.should_quit


# ---------------- Save ----------------
def test_save_named_document(make_editor, tmp_path: Path) -> None:
    path = tmp_path / "out.txt"
    editor = make_editor(["abc"])
    editor.document.set_file_name(str(path))
    type_text(editor, "x")

    press(editor, CommandKind.SAVE)

    assert path.read_text() == "xabc\n"
    assert editor.status_message.text == "File saved successfully."
    assert not editor.document.is_dirty()


def test_save_as_prompt_names_and_writes(editor: Editor, tmp_path: Path) -> None:
    path = tmp_path / "new.rs"
    type_text(editor, "fn")

    press(editor, CommandKind.SAVE)
    assert editor.prompt is not None
    assert editor.message_line(200) == SAVE_AS_PROMPT

    type_text(editor, str(path))
    assert editor.message_line(200) == f"{SAVE_AS_PROMPT}{path}"
    assert raws(editor) == ["fn"]

    press(editor, CommandKind.INSERT_NEWLINE)

    assert editor.prompt is None
    assert editor.document.file_name == str(path)
    assert editor.document.file_type.name == "Rust"
    assert path.read_text() == "fn\n"
    assert editor.status_message.text == "File saved successfully."


def test_save_as_backspace_edits_input(editor: Editor) -> None:
    press(editor, CommandKind.SAVE)
    type_text(editor, "abc")

    press(editor, CommandKind.DELETE_BACKWARD)

    assert editor.message_line(80) == f"{SAVE_AS_PROMPT}ab"


def test_save_as_escape_aborts(editor: Editor) -> None:
    press(editor, CommandKind.SAVE)
    type_text(editor, "name.txt")

    press(editor, CommandKind.ESCAPE)

    assert editor.prompt is None
    assert editor.document.file_name is None
    assert editor.status_message.text == "Save aborted."


def test_save_as_empty_name_aborts(editor: Editor) -> None:
    press(editor, CommandKind.SAVE)
    press(editor, CommandKind.INSERT_NEWLINE)

    assert editor.status_message.text == "Save aborted."
    assert editor.document.is_empty()


def test_save_error_keeps_document_dirty(make_editor, tmp_path: Path) -> None:
    editor = make_editor(["abc"])
    editor.document.set_file_name(str(tmp_path))
    type_text(editor, "x")

    press(editor, CommandKind.SAVE)

    assert editor.status_message.text == "Error writing file!"
    assert editor.document.is_dirty()


# ---------------- Find ----------------
def test_find_moves_cursor_and_enter_keeps_it(make_editor) -> None:
    editor = make_editor(["hello", "world"])

    press(editor, CommandKind.FIND)
    assert editor.message_line(200) == SEARCH_PROMPT

    type_text(editor, "lo")
    assert editor.viewport.cursor == Position(3, 0)
    assert editor.message_line(200) == f"{SEARCH_PROMPT}lo"

    press(editor, CommandKind.INSERT_NEWLINE)

    assert editor.prompt is None
    assert editor.viewport.cursor == Position(3, 0)
    assert editor.document.rows[0].match_term is None
    assert raws(editor) == ["hello", "world"]


def test_find_escape_restores_cursor(make_editor) -> None:
    editor = make_editor(["hello", "world"])
    editor.viewport.cursor = Position(1, 0)

    press(editor, CommandKind.FIND)
    type_text(editor, "wor")
    assert editor.viewport.cursor == Position(0, 1)

    press(editor, CommandKind.ESCAPE)

    assert editor.viewport.cursor == Position(1, 0)
    assert not editor.search.active


def test_find_arrows_step_between_matches(make_editor) -> None:
    editor = make_editor(["ab", "xab", "ab"])

    press(editor, CommandKind.FIND)
    type_text(editor, "ab")
    assert editor.viewport.cursor == Position(0, 0)

    editor.process(Command.move(Direction.DOWN))
    assert editor.viewport.cursor == Position(1, 1)

    editor.process(Command.move(Direction.RIGHT))
    assert editor.viewport.cursor == Position(0, 2)

    editor.process(Command.move(Direction.UP))
    assert editor.viewport.cursor == Position(1, 1)


def test_control_commands_ignored_while_searching(make_editor) -> None:
    editor = make_editor(["ab", "xab", "ab"])

    press(editor, CommandKind.FIND)
    type_text(editor, "ab")
    editor.process(Command.move(Direction.DOWN))
    assert editor.viewport.cursor == Position(1, 1)

    for kind in (CommandKind.FIND, CommandKind.SAVE, CommandKind.QUIT):
        press(editor, kind)

    assert editor.prompt is not None
    assert editor.viewport.cursor == Position(1, 1)
    assert editor.message_line(200) == f"{SEARCH_PROMPT}ab"
    assert not editor.should_quit


def test_prompt_skips_key_callback_for_control_commands() -> None:
    on_key = MagicMock()
    prompt = Prompt("Search: ", MagicMock(), on_key)

    for kind in (CommandKind.SAVE, CommandKind.FIND, CommandKind.QUIT):
        assert prompt.feed(Command.of(kind)) is False

    on_key.assert_not_called()
    prompt.feed(Command.insert_char("a"))
    on_key.assert_called_once_with("a", Command.insert_char("a"))


def test_find_overlay_visible_in_render_model(make_editor) -> None:
    editor = make_editor(["say hello"])

    press(editor, CommandKind.FIND)
    type_text(editor, "hello")

    assert editor.visible_rows()[0] == [("say ", HighlightType.NONE), ("hello", HighlightType.MATCH)]


# ---------------- Render model ----------------
def test_initial_help_message(editor: Editor) -> None:
    assert editor.status_message.text == "HELP: Ctrl-F = find | Ctrl-S = save | Ctrl-Q = quit"


def test_help_message_follows_keybindings(mock_config: dict[str, Any]) -> None:
    mock_config["keybindings"]["quit"] = "ctrl+x"

    editor = Editor(mock_config)

    assert editor.status_message.text.endswith("Ctrl-X = quit")


def test_welcome_screen_on_empty_document(editor: Editor) -> None:
    rows = editor.visible_rows()

    assert len(rows) == 22
    assert rows[0] == [("~", HighlightType.NONE)]
    welcome = rows[22 // 3][0][0]
    assert welcome.startswith("~")
    assert welcome.endswith("TTE -- version 0.1.0")
    assert len(welcome) <= 80


def test_welcome_hidden_once_document_has_rows(make_editor) -> None:
    editor = make_editor(["a"])

    rows = editor.visible_rows()

    assert rows[0] == [("a", HighlightType.NONE)]
    assert all(row == [("~", HighlightType.NONE)] for row in rows[1:])


def test_visible_rows_follow_horizontal_offset(make_editor) -> None:
    editor = make_editor(["0123456789abcdef"], width=10)
    editor.process(Command.move(Direction.END))

    assert editor.viewport.offset.x == 7
    assert editor.visible_rows()[0] == [("789abcdef", HighlightType.NONE)]
    assert editor.screen_cursor() == Position(9, 0)


def test_status_line_contents(make_editor) -> None:
    editor = make_editor(["a", "b"])
    editor.document.set_file_name("notes.txt")

    line = editor.status_line(80)

    assert len(line) == 80
    assert line.startswith("notes.txt - 2 lines")
    assert line.endswith("No filetype | 1/2")

    editor.process(Command.insert_char("x"))
    assert "notes.txt - 2 lines (modified)" in editor.status_line(80)


def test_status_line_unnamed_and_truncated(editor: Editor, make_editor) -> None:
    assert editor.status_line(80).startswith(f"{NO_NAME} - 0 lines")

    named = make_editor(["a"])
    named.document.set_file_name("a_very_long_file_name_indeed.txt")
    assert named.status_line(80).startswith("a_very_long_file_nam - 1 lines")
    assert len(named.status_line(15)) == 15


def test_message_expires_after_timeout(editor: Editor) -> None:
    editor._set_status_message("hi")
    created = editor.status_message.time

    assert editor.message_line(80, now=created + 4.9) == "hi"
    assert editor.message_line(80, now=created + 6) == ""


def test_open_failure_reports_error(mock_config: dict[str, Any], tmp_path: Path) -> None:
    missing = tmp_path / "missing.txt"

    editor = Editor(mock_config, file_name=str(missing))

    assert editor.document.is_empty()
    assert editor.status_message.text == f"ERR: Could not open file: {missing}"


def test_open_existing_file(mock_config: dict[str, Any], rust_file: Path) -> None:
    editor = Editor(mock_config, file_name=str(rust_file))

    assert len(editor.document) == 5
    assert "Rust | 1/5" in editor.status_line(80)


def test_resize_updates_viewport(make_editor) -> None:
    editor = make_editor([str(i) for i in range(40)])
    editor.viewport.cursor = Position(0, 30)
    editor.viewport.scroll(editor.document)

    editor.resize(40, 12)

    assert (editor.viewport.width, editor.viewport.height) == (40, 10)
    assert editor.viewport.offset.y == 21
    assert len(editor.visible_rows()) == 10
