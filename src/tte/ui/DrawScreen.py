# tte/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen paints the editor's render model onto a curses window.

It is responsible for:
- creating one colour pair per highlight category,
- drawing the visible text rows as highlighted segments,
- drawing the status bar in reverse video and the message bar below it,
- placing the terminal cursor.

All content decisions (which rows are visible, the filler and welcome line,
status and message text) are made by `tte.core.Editor`; this class only
converts them to cells. Widths are measured with `wcwidth` so wide glyphs
never overflow a line.
"""

import curses
import logging
from typing import TYPE_CHECKING, Any

from wcwidth import wcwidth

from tte.core.Highlighter import HighlightType
from tte.utils.utils import hex_to_xterm


if TYPE_CHECKING:
    from tte.core.Editor import Editor


# Basic-colour fallbacks for terminals with fewer than 256 colours.
_BASIC_COLORS: dict[HighlightType, str] = {
    HighlightType.NONE: "COLOR_WHITE",
    HighlightType.NUMBER: "COLOR_RED",
    HighlightType.MATCH: "COLOR_BLUE",
    HighlightType.STRING: "COLOR_MAGENTA",
    HighlightType.CHARACTER: "COLOR_CYAN",
    HighlightType.COMMENT: "COLOR_GREEN",
}


## ================= class DrawScreen ==============================
class DrawScreen:
    """DrawScreen Class
    =========================
    Renders an `Editor` into a curses window.

    Attributes:
        MIN_WINDOW_WIDTH (int): Narrowest window the editor draws into.
        MIN_WINDOW_HEIGHT (int): Lowest window the editor draws into.
        editor (Editor): The editor whose render model is painted.
        stdscr (curses.window): Target window.
        config (dict[str, Any]): Configuration (``colors`` section).
        colors (dict[str, int]): Curses attribute per highlight category
            value plus ``"status"`` and ``"message"``.

    Methods:
        draw(): Paints the full frame and refreshes the terminal.
        truncate_string(s, max_width): Clips `s` to `max_width` cells.
        text_width(s): Display width of `s` in cells.
    """

    MIN_WINDOW_WIDTH = 10
    MIN_WINDOW_HEIGHT = 3

    def __init__(self, editor: "Editor", stdscr: "curses.window", config: dict[str, Any]) -> None:
        self.editor = editor
        self.stdscr = stdscr
        self.config = config
        self.colors: dict[str, int] = {}
        self._init_colors()

    # ---------------- Colours ----------------
    def _init_colors(self) -> None:
        """Creates one colour pair per highlight category.

        Without colour support every category is drawn with ``A_NORMAL``. The
        status bar always uses reverse video.
        """
        self.colors["status"] = curses.A_REVERSE
        self.colors["message"] = curses.A_NORMAL

        try:
            if not curses.has_colors():
                raise curses.error("terminal has no colours")
            curses.start_color()
            try:
                curses.use_default_colors()
                background = -1
            except curses.error:
                background = curses.COLOR_BLACK

            user_colors = self.config.get("colors", {})
            for pair_number, category in enumerate(HighlightType, start=1):
                hex_color = user_colors.get(category.value, category.to_color())
                curses.init_pair(pair_number, self._color_index(category, hex_color), background)
                self.colors[category.value] = curses.color_pair(pair_number)
        except curses.error as e:
            logging.warning("Colour setup failed (%s); drawing without colours", e)
            for category in HighlightType:
                self.colors[category.value] = curses.A_NORMAL

    def _color_index(self, category: HighlightType, hex_color: str) -> int:
        if curses.COLORS >= 256:
            return hex_to_xterm(hex_color)
        return getattr(curses, _BASIC_COLORS[category])

    # ---------------- Width helpers ----------------
    @staticmethod
    def char_width(ch: str) -> int:
        w = wcwidth(ch)
        return w if w > 0 else 1

    def text_width(self, s: str) -> int:
        return sum(self.char_width(ch) for ch in s)

    def truncate_string(self, s: str, max_width: int) -> str:
        """Returns the longest prefix of `s` that fits in `max_width` cells."""
        result: list[str] = []
        consumed = 0
        for ch in s:
            w = self.char_width(ch)
            if consumed + w > max_width:
                break
            result.append(ch)
            consumed += w
        return "".join(result)

    # ---------------- Drawing ----------------
    def draw(self) -> None:
        """Paints text rows, status bar, message bar and cursor."""
        try:
            height, width = self.stdscr.getmaxyx()
            if height < self.MIN_WINDOW_HEIGHT or width < self.MIN_WINDOW_WIDTH:
                self._show_small_window_error(height, width)
                return

            self.stdscr.erase()
            for screen_y, segments in enumerate(self.editor.visible_rows()):
                if screen_y >= height - 2:
                    break
                self._draw_row(screen_y, segments, width)

            self._draw_status_bar(height - 2, width)
            self._draw_message_bar(height - 1, width)
            self._position_cursor(height, width)
            self._update_display()
        except curses.error as e:
            logging.error(f"Curses error in DrawScreen.draw(): {e}", exc_info=True)

    def _draw_row(self, screen_y: int, segments: list[tuple[str, HighlightType]], width: int) -> None:
        x = 0
        for text, category in segments:
            if x >= width:
                break
            visible = self.truncate_string(text, width - x)
            if not visible:
                break
            attr = self.colors.get(category.value, curses.A_NORMAL)
            try:
                self.stdscr.addstr(screen_y, x, visible, attr)
            except curses.error:
                # Writing the last cell of the window moves the cursor off-screen.
                logging.debug("addstr failed at (%d,%d)", screen_y, x)
            x += self.text_width(visible)

    def _draw_status_bar(self, y: int, width: int) -> None:
        line = self.truncate_string(self.editor.status_line(width), width)
        line += " " * (width - self.text_width(line))
        try:
            self.stdscr.addstr(y, 0, line, self.colors["status"])
        except curses.error as e:
            logging.debug(f"Status bar not drawn: {e}")

    def _draw_message_bar(self, y: int, width: int) -> None:
        # The bottom-right cell cannot be written without a curses error.
        message = self.truncate_string(self.editor.message_line(width), width - 1)
        try:
            self.stdscr.addstr(y, 0, message, self.colors["message"])
        except curses.error as e:
            logging.debug(f"Message bar not drawn: {e}")

    def _position_cursor(self, height: int, width: int) -> None:
        """Moves the terminal cursor to the editor cursor, in display cells."""
        viewport = self.editor.viewport
        screen = self.editor.screen_cursor()
        row = self.editor.document.row(viewport.cursor.y)
        screen_x = screen.x
        if row is not None:
            screen_x = self.text_width(row.render(viewport.offset.x, viewport.offset.x + screen.x))

        final_y = max(0, min(screen.y, height - 3))
        final_x = max(0, min(screen_x, width - 1))
        try:
            self.stdscr.move(final_y, final_x)
        except curses.error as e:
            logging.warning(f"Curses error positioning cursor at ({final_y}, {final_x}): {e}")

    def _show_small_window_error(self, height: int, width: int) -> None:
        msg = f"Window too small ({width}x{height})"
        try:
            self.stdscr.erase()
            self.stdscr.addstr(0, 0, self.truncate_string(msg, max(0, width - 1)))
            self._update_display()
        except curses.error as e:
            logging.warning(f"Could not report small window: {e}")

    def _update_display(self) -> None:
        """Flushes all pending drawing in one terminal update."""
        try:
            self.stdscr.noutrefresh()
            curses.doupdate()
        except curses.error as e:
            logging.error(f"Curses doupdate error: {e}")
