# tte/core/Editor.py
"""tte.core.Editor
==================
Editor: the terminal-independent heart of TTE.

The `Editor` class consumes abstract `Command`s one at a time and keeps the
`Document`, the `Viewport` and the user-facing messages consistent. It does
not know about curses: the screen layer asks it for a render model
(`visible_rows`, `status_line`, `message_line`, `screen_cursor`) and paints
that.

Responsibilities:

- Dispatching edit and motion commands to the document and viewport
- Save flow, including the "Save as: " prompt for unnamed buffers
- Incremental search through a `SearchSession` driven by a prompt
- Quit confirmation when the document has unsaved changes
- Status messages that expire after a configurable number of seconds

Prompts are non-blocking: while a prompt is active, every command is routed to
it instead of the document, and a callback is invoked once it is confirmed or
cancelled.
"""

import logging
import time
from typing import Any, Callable, Optional

from tte import __version__
from tte.core.Commands import Command, CommandKind
from tte.core.Document import Document
from tte.core.errors import FileReadError, FileWriteError
from tte.core.Highlighter import HighlightType
from tte.core.Position import Direction, Position
from tte.core.Row import DEFAULT_TAB_STOP
from tte.core.Search import SearchSession
from tte.core.Viewport import Viewport


DEFAULT_QUIT_TIMES = 3
DEFAULT_MESSAGE_TIMEOUT = 5.0
STATUS_NAME_LIMIT = 20
NO_NAME = "[NO NAME]"
SEARCH_PROMPT = "Search (ESC to cancel, Arrows to navigate): "
SAVE_AS_PROMPT = "Save as: "
DEFAULT_BINDINGS = {"save_file": "ctrl+s", "find": "ctrl+f", "quit": "ctrl+q"}

Segment = tuple[str, HighlightType]


class StatusMessage:
    """A message line entry stamped with the wall-clock time it was set."""

    def __init__(self, text: str = "", created: Optional[float] = None) -> None:
        self.text = text
        self.time = time.time() if created is None else created

    def is_expired(self, timeout: float, now: Optional[float] = None) -> bool:
        now = time.time() if now is None else now
        return now - self.time >= timeout


class Prompt:
    """A single-line input collected one command at a time.

    Attributes:
        message (str): Text shown before the input.
        buffer (str): Characters typed so far.
        on_done (Callable): Called with the input, or None when the prompt
            was cancelled or confirmed empty.
        on_key (Optional[Callable]): Called with the current input and the
            command after every key that does not end the prompt.
    """

    def __init__(
        self,
        message: str,
        on_done: Callable[[Optional[str]], None],
        on_key: Optional[Callable[[str, Command], None]] = None,
    ) -> None:
        self.message = message
        self.buffer = ""
        self.on_done = on_done
        self.on_key = on_key

    def text(self) -> str:
        return f"{self.message}{self.buffer}"

    def feed(self, command: Command) -> bool:
        """Applies one command. Returns True when the prompt has ended."""
        kind = command.kind
        if kind is CommandKind.INSERT_NEWLINE:
            return True
        if kind is CommandKind.ESCAPE:
            self.buffer = ""
            return True
        if kind in (CommandKind.SAVE, CommandKind.FIND, CommandKind.QUIT):
            # Control-key commands are ignored while a prompt is open.
            return False
        if kind is CommandKind.INSERT_CHAR and command.char.isprintable():
            self.buffer += command.char
        elif kind is CommandKind.DELETE_BACKWARD:
            self.buffer = self.buffer[:-1]
        if self.on_key is not None:
            self.on_key(self.buffer, command)
        return False

    def result(self) -> Optional[str]:
        return self.buffer or None


## ==================== Editor Class ====================
class Editor:
    """Class Editor
    ===============
    Owns one document and everything needed to edit and display it.

    Attributes:
        config (dict[str, Any]): Merged configuration.
        document (Document): The open document.
        viewport (Viewport): Cursor and scroll state.
        search (SearchSession): Search state, active only during a find.
        status_message (StatusMessage): Current message line entry.
        prompt (Optional[Prompt]): Active prompt, if any.
        quit_times (int): Quit presses still required while dirty.
        should_quit (bool): Set when the main loop must stop.

    Methods:
        process(command): Applies one command; returns True if a redraw is needed.
        resize(width, height): Adapts to a new terminal size.
        visible_rows(): Highlighted segments per text row on screen.
        status_line(width), message_line(width, now): Bottom lines.
        screen_cursor(): Cursor position in the text area.
    """

    def __init__(
        self,
        config: Optional[dict[str, Any]] = None,
        file_name: Optional[str] = None,
        width: int = 80,
        height: int = 24,
    ) -> None:
        self.config: dict[str, Any] = config or {}
        editor_cfg = self.config.get("editor", {})
        self.tab_stop: int = int(editor_cfg.get("tab_size", DEFAULT_TAB_STOP))
        self.max_quit_times: int = max(1, int(editor_cfg.get("quit_times", DEFAULT_QUIT_TIMES)))
        self.message_timeout: float = float(editor_cfg.get("message_timeout", DEFAULT_MESSAGE_TIMEOUT))

        self.quit_times: int = self.max_quit_times
        self.should_quit: bool = False
        self.prompt: Optional[Prompt] = None
        self.viewport = Viewport(width, height - 2)

        initial_message = (
            f"HELP: {self._key_label('find')} = find | {self._key_label('save_file')} = save"
            f" | {self._key_label('quit')} = quit"
        )
        self.document = Document(tab_stop=self.tab_stop)
        if file_name:
            try:
                self.document = Document.open(file_name, tab_stop=self.tab_stop)
            except FileReadError as e:
                logging.warning(f"Editor: starting with an empty document: {e}")
                initial_message = f"ERR: Could not open file: {file_name}"
        self.status_message = StatusMessage(initial_message)
        self.search = SearchSession(self.document, self.viewport)
        logging.info(f"Editor initialized (file={file_name!r}, tab_stop={self.tab_stop})")

    # ---------------- Messages ----------------
    def _set_status_message(self, text: str) -> None:
        if self.status_message.text != text:
            logging.debug(f"Status message set to: '{text}'")
        self.status_message = StatusMessage(text)

    def _key_label(self, action: str) -> str:
        """Human form of a configured binding: "ctrl+q" -> "Ctrl-Q"."""
        binding = self.config.get("keybindings", {}).get(action, DEFAULT_BINDINGS.get(action))
        if isinstance(binding, list):
            binding = binding[0] if binding else None
        if not isinstance(binding, str) or not binding:
            return action
        return "-".join(part.capitalize() if len(part) > 1 else part.upper() for part in binding.split("+"))

    # ---------------- Command dispatch ----------------
    def process(self, command: Command) -> bool:
        """Applies one command.

        Returns:
            bool: True if the screen needs to be redrawn.
        """
        kind = command.kind
        if kind is CommandKind.RESIZE:
            self.viewport.scroll(self.document)
            return True

        if kind is not CommandKind.QUIT:
            self._reset_quit_times()

        if self.prompt is not None:
            self._feed_prompt(command)
            return True

        if kind is CommandKind.QUIT:
            self._handle_quit()
        elif kind is CommandKind.SAVE:
            self.save()
        elif kind is CommandKind.FIND:
            self.find()
        elif kind is CommandKind.INSERT_CHAR:
            self.document.insert(self.viewport.cursor, command.char)
            self.viewport.move(self.document, Direction.RIGHT)
        elif kind is CommandKind.INSERT_NEWLINE:
            y = self.viewport.cursor.y
            self.document.insert(self.viewport.cursor, "\n")
            self.viewport.set_cursor(self.document, Position(0, y + 1))
        elif kind is CommandKind.DELETE_FORWARD:
            self.document.delete(self.viewport.cursor)
        elif kind is CommandKind.DELETE_BACKWARD:
            if self.viewport.cursor != Position(0, 0):
                self.viewport.move(self.document, Direction.LEFT)
                self.document.delete(self.viewport.cursor)
        elif kind is CommandKind.MOVE and command.direction is not None:
            self.viewport.move(self.document, command.direction)
        elif kind is CommandKind.ESCAPE:
            return False
        else:
            logging.debug(f"Editor: ignoring command {command}")
            return False

        self.viewport.scroll(self.document)
        return True

    def _handle_quit(self) -> None:
        if self.document.is_dirty() and self.quit_times > 1:
            remaining = self.quit_times - 1
            self._set_status_message(
                f"WARNING! File has unsaved changes. Press {self._key_label('quit')} "
                f"{remaining} more times to quit."
            )
            logging.info(f"Quit requested with unsaved changes, {remaining} more press(es) needed")
            self.quit_times -= 1
            return
        logging.info("Quit confirmed")
        self.should_quit = True

    def _reset_quit_times(self) -> None:
        if self.quit_times < self.max_quit_times:
            self.quit_times = self.max_quit_times
            self._set_status_message("")

    # ---------------- Prompt ----------------
    def _start_prompt(
        self,
        message: str,
        on_done: Callable[[Optional[str]], None],
        on_key: Optional[Callable[[str, Command], None]] = None,
    ) -> None:
        self.prompt = Prompt(message, on_done, on_key)
        logging.debug(f"Prompt opened: '{message}'")

    def _feed_prompt(self, command: Command) -> None:
        prompt = self.prompt
        if prompt is None:
            return
        if prompt.feed(command):
            self.prompt = None
            self._set_status_message("")
            prompt.on_done(prompt.result())
        self.viewport.scroll(self.document)

    # ---------------- Save ----------------
    def save(self) -> None:
        """Saves the document, asking for a file name first if it has none."""
        if not self.document.file_name:
            self._start_prompt(SAVE_AS_PROMPT, self._finish_save_as)
            return
        self._write_document()

    def _finish_save_as(self, file_name: Optional[str]) -> None:
        if not file_name:
            self._set_status_message("Save aborted.")
            logging.info("Save aborted: no file name given")
            return
        self.document.set_file_name(file_name)
        self._write_document()

    def _write_document(self) -> None:
        try:
            self.document.save()
        except FileWriteError as e:
            logging.error(f"Editor: save failed: {e}")
            self._set_status_message("Error writing file!")
            return
        self._set_status_message("File saved successfully.")

    # ---------------- Find ----------------
    def find(self) -> None:
        """Opens the incremental search prompt."""
        self.search = SearchSession(self.document, self.viewport)
        self.search.start()
        self._start_prompt(SEARCH_PROMPT, self._finish_find, self._search_step)

    def _search_step(self, query: str, command: Command) -> None:
        direction = command.direction if command.kind is CommandKind.MOVE else None
        self.search.update(query, direction)

    def _finish_find(self, query: Optional[str]) -> None:
        if query is None:
            self.search.abort()
        else:
            self.search.finish()

    # ---------------- Geometry ----------------
    def resize(self, width: int, height: int) -> None:
        """Takes the terminal size; two lines are reserved for status and messages."""
        self.viewport.resize(width, height - 2)
        self.viewport.scroll(self.document)

    def screen_cursor(self) -> Position:
        return self.viewport.screen_cursor(self.document)

    # ---------------- Render model ----------------
    def visible_rows(self) -> list[list[Segment]]:
        """Returns what each text row of the screen shows.

        Document rows become highlighted segments clipped to the viewport
        width. Rows past the end of the document show a ``~`` filler, with the
        welcome message a third of the way down an empty document.
        """
        width = self.viewport.width
        height = self.viewport.height
        start_x = self.viewport.offset.x
        lines: list[list[Segment]] = []
        for screen_y in range(height):
            row = self.document.row(self.viewport.offset.y + screen_y)
            if row is not None:
                lines.append(row.render_segments(start_x, start_x + width))
            elif self.document.is_empty() and screen_y == height // 3:
                lines.append([(self.welcome_message(width), HighlightType.NONE)])
            else:
                lines.append([("~", HighlightType.NONE)])
        return lines

    def welcome_message(self, width: int) -> str:
        message = f"TTE -- version {__version__}"
        padding = max(0, width - len(message)) // 2
        spaces = " " * max(0, padding - 1)
        return f"~{spaces}{message}"[:width]

    def status_line(self, width: int) -> str:
        """Builds the status bar text, padded or truncated to `width`."""
        name = self.document.file_name[:STATUS_NAME_LIMIT] if self.document.file_name else NO_NAME
        modified = " (modified)" if self.document.is_dirty() else ""
        status = f"{name} - {len(self.document)} lines{modified}"
        indicator = (
            f"{self.document.file_type.name} | {self.viewport.cursor.y + 1}/{len(self.document)}"
        )
        padding = max(0, width - len(status) - len(indicator))
        return f"{status}{' ' * padding}{indicator}"[:width]

    def message_line(self, width: int, now: Optional[float] = None) -> str:
        """Text of the message bar: the active prompt, or a fresh status message."""
        if self.prompt is not None:
            return self.prompt.text()[:width]
        if self.status_message.is_expired(self.message_timeout, now):
            return ""
        return self.status_message.text[:width]
