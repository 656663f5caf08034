# tte/core/Position.py
"""Value types shared by the editor core.

`Position` is used in two flavours that must not be mixed up:

- a *document* position, where ``x`` is a raw character index into
  `Row.raw`,
- a *render* position, where ``x`` is a column in the tab-expanded
  `Row.rendered`.

Use `Row.raw_to_render_x` / `Row.render_to_raw_x` to convert.
"""

from enum import Enum
from typing import NamedTuple


class Position(NamedTuple):
    x: int = 0
    y: int = 0


class SearchDirection(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


class Direction(Enum):
    """Cursor motions understood by the viewport controller."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"
