# tte/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
The KeyBinder class turns terminal key presses into the abstract `Command`s
consumed by `tte.core.Editor`. It is the only place that knows about curses
key codes and escape sequences.

Key Features:
- Reads single keys and ESC sequences (CSI/SS3) from the terminal.
- Decodes key specification strings from the configuration ("ctrl+s",
  "pagedown", ...) into key codes.
- Maps the configurable actions (save_file, find, quit) and the fixed editing
  keys (arrows, Home/End, PageUp/PageDown, Enter, Backspace, Delete, Esc) to
  commands.
- Treats every other visible character as text to insert.

Main Methods:
1. get_key_input: Reads one key or key sequence from the terminal.
2. decode: Turns a key into a `Command`, or None when the key is not bound.
"""

import curses
import logging
import re
from typing import Any, Optional, Union

from wcwidth import wcswidth

from tte.core.Commands import Command, CommandKind
from tte.core.Position import Direction
from tte.utils.logging_config import KEY_LOGGER


KeyCode = Union[int, str]

# Actions the user may rebind in the [keybindings] section.
CONFIGURABLE_ACTIONS: dict[str, CommandKind] = {
    "save_file": CommandKind.SAVE,
    "find": CommandKind.FIND,
    "quit": CommandKind.QUIT,
}

DEFAULT_KEYBINDINGS: dict[str, list[KeyCode]] = {
    "save_file": ["ctrl+s"],
    "find": ["ctrl+f"],
    "quit": ["ctrl+q"],
}


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Class KeyBinder
    ====================
    Translates key presses into editor commands.

    Attributes:
        config (dict[str, Any]): Editor configuration (only ``keybindings`` is read).
        stdscr: The curses window keys are read from.
        keybindings (dict[str, list[KeyCode]]): Action name to decoded key codes.
        command_map (dict[KeyCode, Command]): Key code to command.
    """

    # Keys do not include the leading ESC; get_key_input() consumes it first.
    ESCAPE_SEQUENCE_MAP: dict[str, str] = {
        "[A": "up", "[B": "down", "[C": "right", "[D": "left",
        "OA": "up", "OB": "down", "OC": "right", "OD": "left",
        "[H": "home", "[F": "end", "OH": "home", "OF": "end",
        "[1~": "home", "[7~": "home", "[4~": "end", "[8~": "end",
        "[3~": "delete", "[5~": "pageup", "[6~": "pagedown",
    }

    def __init__(self, config: dict[str, Any], stdscr: Optional["curses.window"] = None) -> None:
        self.config = config
        self.stdscr = stdscr
        self.keybindings = self._load_keybindings()
        self.command_map = self._setup_command_map()
        logging.debug("KeyBinder initialized with %d bound keys", len(self.command_map))

    # ---------------- Configuration ----------------
    def _load_keybindings(self) -> dict[str, list[KeyCode]]:
        """Merges user keybindings over the defaults and decodes them.

        A binding may be a single spec, a list of specs or a "|"-separated
        string. An empty value disables the action.
        """
        user_bindings: dict[str, Any] = self.config.get("keybindings", {})
        parsed: dict[str, list[KeyCode]] = {}

        for action, default_specs in DEFAULT_KEYBINDINGS.items():
            spec = user_bindings.get(action, default_specs)
            if not spec:
                logging.debug("Keybinding for action %r is disabled.", action)
                continue

            if isinstance(spec, list):
                specs = spec
            elif isinstance(spec, str) and "|" in spec:
                specs = [s.strip() for s in spec.split("|")]
            else:
                specs = [spec]

            codes: list[KeyCode] = []
            for item in specs:
                try:
                    code = self._decode_keystring(item)
                except ValueError as e:
                    logging.error("Ignoring keybinding %r for action %r: %s", item, action, e)
                    continue
                if code not in codes:
                    codes.append(code)

            if codes:
                parsed[action] = codes
            else:
                logging.warning("No valid key codes for action %r; it will not be bound.", action)

        logging.debug("Loaded keybindings: %s", parsed)
        return parsed

    def _decode_keystring(self, key_input: KeyCode) -> KeyCode:
        """Decodes a key spec ("ctrl+q", "f2", "pagedown", 17) into a key code.

        Raises:
            ValueError: If the spec is empty or uses an unknown key or modifier.
        """
        if isinstance(key_input, int):
            return key_input
        if not isinstance(key_input, str):
            raise ValueError(f"Invalid key spec type: {type(key_input).__name__}")

        s = key_input.strip().lower()
        if not s:
            raise ValueError("Key string cannot be empty.")

        named_keys = self._named_keys()
        if s in named_keys:
            return named_keys[s]

        *modifiers, base = s.split("+")
        if not base:
            raise ValueError(f"Missing base key in {key_input!r}")
        if len(base) == 1:
            code = ord(base)
        elif base in named_keys:
            code = named_keys[base]
        else:
            raise ValueError(f"Unknown base key {base!r} in {key_input!r}")

        for modifier in modifiers:
            if modifier == "ctrl" and "a" <= base <= "z" and len(base) == 1:
                code = ord(base) - ord("a") + 1
            elif modifier == "ctrl" and base in ("[", "\\", "]"):
                code = ord(base) - 64
            else:
                raise ValueError(f"Unsupported modifier {modifier!r} in {key_input!r}")
        return code

    def _named_keys(self) -> dict[str, int]:
        return {
            "up": curses.KEY_UP,
            "down": curses.KEY_DOWN,
            "left": curses.KEY_LEFT,
            "right": curses.KEY_RIGHT,
            "home": curses.KEY_HOME,
            "end": curses.KEY_END,
            "pageup": curses.KEY_PPAGE,
            "pgup": curses.KEY_PPAGE,
            "pagedown": curses.KEY_NPAGE,
            "pgdn": curses.KEY_NPAGE,
            "delete": curses.KEY_DC,
            "del": curses.KEY_DC,
            "backspace": curses.KEY_BACKSPACE,
            "enter": curses.KEY_ENTER,
            "tab": 9,
            "esc": 27,
            "escape": 27,
            **{f"f{i}": getattr(curses, f"KEY_F{i}", 264 + i) for i in range(1, 13)},
        }

    def _setup_command_map(self) -> dict[KeyCode, Command]:
        """Builds the key code to command table.

        Fixed editing keys are installed first; configured actions are laid
        over them, so a user binding wins on conflict.
        """
        moves = {
            curses.KEY_UP: Direction.UP,
            curses.KEY_DOWN: Direction.DOWN,
            curses.KEY_LEFT: Direction.LEFT,
            curses.KEY_RIGHT: Direction.RIGHT,
            curses.KEY_HOME: Direction.HOME,
            curses.KEY_END: Direction.END,
            curses.KEY_PPAGE: Direction.PAGE_UP,
            curses.KEY_NPAGE: Direction.PAGE_DOWN,
        }
        command_map: dict[KeyCode, Command] = {code: Command.move(d) for code, d in moves.items()}

        for code in (curses.KEY_ENTER, 10, 13):
            command_map[code] = Command.of(CommandKind.INSERT_NEWLINE)
        for code in (curses.KEY_BACKSPACE, 8, 127):
            command_map[code] = Command.of(CommandKind.DELETE_BACKWARD)
        command_map[curses.KEY_DC] = Command.of(CommandKind.DELETE_FORWARD)
        command_map[curses.KEY_RESIZE] = Command.of(CommandKind.RESIZE)
        command_map[27] = Command.of(CommandKind.ESCAPE)
        command_map[9] = Command.insert_char("\t")

        for action, codes in self.keybindings.items():
            command = Command.of(CONFIGURABLE_ACTIONS[action])
            for code in codes:
                if code in command_map and command_map[code] != command:
                    logging.warning(
                        "Keybinding for action %r (key: %r) overrides %s", action, code, command_map[code].kind
                    )
                command_map[code] = command
        return command_map

    # ---------------- Decoding ----------------
    def decode(self, key: KeyCode) -> Optional[Command]:
        """Turns a key from `get_key_input` into a command.

        Returns:
            Optional[Command]: The bound command, an INSERT_CHAR for visible
            characters, or None for unbound keys.
        """
        if isinstance(key, str) and len(key) == 1 and (ord(key) < 32 or ord(key) == 127):
            key = ord(key)

        command = self.command_map.get(key)
        if command is None:
            char = self._printable_character(key)
            if char:
                command = Command.insert_char(char)

        KEY_LOGGER.debug("key=%r -> %s", key, command.kind.value if command else None)
        if command is None:
            logging.debug("KeyBinder: unbound key %r", key)
        return command

    def _printable_character(self, key: KeyCode) -> str:
        if isinstance(key, int):
            # get_wch() returns text as str; integer codes above ASCII are function keys.
            if not 32 <= key < 127:
                return ""
            key = chr(key)
        if len(key) == 1 and wcswidth(key) > 0:
            return key
        return ""

    # ---------------- Terminal input ----------------
    def get_key_input(self, window: Optional["curses.window"] = None) -> KeyCode:
        """Reads one key or ESC sequence.

        Returns:
            KeyCode: A curses key code, a one-character string, 27 for a lone
            ESC or an unknown sequence, or ``curses.ERR`` on a read error.
        """
        target = window or self.stdscr
        if target is None:
            raise RuntimeError("KeyBinder has no window to read from")

        try:
            key = target.get_wch()
        except curses.error:
            return curses.ERR

        if key not in ("\x1b", 27):
            return key

        seq = ""
        target.nodelay(True)
        try:
            while True:
                nx = target.getch()
                if nx == curses.ERR:
                    break
                if 0 <= nx <= 255:
                    seq += chr(nx)
        finally:
            target.nodelay(False)

        if not seq:
            return 27

        mapped = self.ESCAPE_SEQUENCE_MAP.get(seq)
        if not mapped:
            cleaned = "".join(re.findall(r"[\[O0-9;~A-Za-z]", seq))
            mapped = self.ESCAPE_SEQUENCE_MAP.get(cleaned)
        if mapped:
            logging.debug("get_key_input: ESC %r -> %r", seq, mapped)
            return self._decode_keystring(mapped)

        logging.warning("get_key_input: unknown escape sequence: ESC + %r", seq)
        return 27
