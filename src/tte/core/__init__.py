# src/tte/core/__init__.py
"""Public facade for tte.core: re-export main classes from CamelCase modules.

Keeps Java-like file names (Document.py, Row.py, ...),
but provides flat imports for convenience and stability.
"""

# Re-export classes/symbols from CamelCase modules
from .Commands import Command, CommandKind  # noqa: F401
from .Document import Document  # noqa: F401
from .Editor import Editor  # noqa: F401
from .errors import FileReadError, FileWriteError, TteError  # noqa: F401
from .FileType import FileType  # noqa: F401
from .Highlighter import HighlightType, highlight  # noqa: F401
from .Position import Direction, Position, SearchDirection  # noqa: F401
from .Row import Row  # noqa: F401
from .Search import SearchSession  # noqa: F401
from .Viewport import Viewport  # noqa: F401


__all__ = [
    "Command",
    "CommandKind",
    "Direction",
    "Document",
    "Editor",
    "FileReadError",
    "FileType",
    "FileWriteError",
    "HighlightType",
    "Position",
    "Row",
    "SearchDirection",
    "SearchSession",
    "TteError",
    "Viewport",
    "highlight",
]
