# tte/core/Commands.py
"""Abstract edit commands consumed by `Editor.process`.

The key decoder turns terminal input into these values; the editor core never
looks at raw key codes.
"""

from enum import Enum
from typing import NamedTuple, Optional

from tte.core.Position import Direction


class CommandKind(Enum):
    INSERT_CHAR = "insert_char"
    INSERT_NEWLINE = "insert_newline"
    DELETE_FORWARD = "delete_forward"
    DELETE_BACKWARD = "delete_backward"
    MOVE = "move"
    SAVE = "save"
    FIND = "find"
    QUIT = "quit"
    ESCAPE = "escape"
    RESIZE = "resize"


class Command(NamedTuple):
    """One decoded command.

    ``char`` is only meaningful for INSERT_CHAR and ``direction`` only for MOVE.
    """

    kind: CommandKind
    char: str = ""
    direction: Optional[Direction] = None

    @classmethod
    def insert_char(cls, char: str) -> "Command":
        return cls(CommandKind.INSERT_CHAR, char=char)

    @classmethod
    def move(cls, direction: Direction) -> "Command":
        return cls(CommandKind.MOVE, direction=direction)

    @classmethod
    def of(cls, kind: CommandKind) -> "Command":
        return cls(kind)
