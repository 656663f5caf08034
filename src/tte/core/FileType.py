# tte/core/FileType.py
"""FileType Module
==================
Resolves a file name to a language and the fixed set of highlighting rules
used by the highlight engine.

Language detection is delegated to Pygments (`get_lexer_for_filename`), the
same library the editor uses to name the language in other places. Pygments
only provides the *name*; the actual highlighting is done by the editor's own
single-pass engine (`tte.core.Highlighter`) using the rule sets below.

The rule table is intentionally fixed in code. There is no user-editable
highlighting configuration.
"""

import logging
import os
from typing import Any, Optional

from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound


# Rule set keys understood by the highlight engine:
#   numbers            - tag numeric literals
#   string_delimiters  - characters that open/close a string literal
#   characters         - tag single-quoted character literals
#   max_char_len       - max logical chars between the quotes of a character literal
#   line_comment       - line comment prefix or None
#   block_comment      - (start, end) markers or None
PLAIN_RULES: dict[str, Any] = {
    "numbers": False,
    "string_delimiters": (),
    "characters": False,
    "max_char_len": 1,
    "line_comment": None,
    "block_comment": None,
}

_C_LIKE: dict[str, Any] = {
    "numbers": True,
    "string_delimiters": ('"',),
    "characters": True,
    "max_char_len": 1,
    "line_comment": "//",
    "block_comment": ("/*", "*/"),
}

_HASH_COMMENTED: dict[str, Any] = {
    "numbers": True,
    "string_delimiters": ('"', "'"),
    "characters": False,
    "max_char_len": 1,
    "line_comment": "#",
    "block_comment": None,
}

LANGUAGE_RULES: dict[str, dict[str, Any]] = {
    "Rust": dict(_C_LIKE),
    "C": dict(_C_LIKE),
    "C++": dict(_C_LIKE),
    "Java": dict(_C_LIKE),
    "Go": {**_C_LIKE, "string_delimiters": ('"', "`")},
    "JavaScript": {**_C_LIKE, "string_delimiters": ('"', "`"), "characters": False},
    "TypeScript": {**_C_LIKE, "string_delimiters": ('"', "`"), "characters": False},
    "Python": dict(_HASH_COMMENTED),
    "Bash": dict(_HASH_COMMENTED),
    "TOML": dict(_HASH_COMMENTED),
    "YAML": dict(_HASH_COMMENTED),
}

# Used when Pygments does not know the file or is asked about a name without
# an extension it can match.
EXTENSION_LANGUAGES: dict[str, str] = {
    "rs": "Rust",
    "c": "C",
    "h": "C",
    "cpp": "C++",
    "cc": "C++",
    "hpp": "C++",
    "java": "Java",
    "go": "Go",
    "js": "JavaScript",
    "mjs": "JavaScript",
    "ts": "TypeScript",
    "py": "Python",
    "sh": "Bash",
    "bash": "Bash",
    "toml": "TOML",
    "yaml": "YAML",
    "yml": "YAML",
}

# Pygments lexer names that differ from the rule table keys.
_LEXER_ALIASES: dict[str, str] = {
    "Python 2.x": "Python",
    "Python 3": "Python",
    "Bash Session": "Bash",
    "Shell": "Bash",
}

DEFAULT_NAME = "No filetype"


## ==================== FileType Class ====================
class FileType:
    """A named language with its highlighting rule set.

    Attributes:
        name (str): Display name of the language ("Rust", "Python", ...).
        rules (dict[str, Any]): Highlighting rules consumed by the engine.
    """

    def __init__(self, name: str = DEFAULT_NAME, rules: Optional[dict[str, Any]] = None) -> None:
        self.name = name
        self.rules: dict[str, Any] = dict(PLAIN_RULES)
        if rules:
            self.rules.update(rules)

    def __repr__(self) -> str:
        return f"FileType({self.name!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileType):
            return NotImplemented
        return self.name == other.name and self.rules == other.rules

    @classmethod
    def from_file_name(cls, file_name: Optional[str]) -> "FileType":
        """Resolves the file type for `file_name`.

        The lookup tries Pygments first and then the built-in extension
        table. Languages without a rule set fall back to the plain
        "No filetype" rules.

        Args:
            file_name: Path or bare name of the file, or None for a new buffer.

        Returns:
            FileType: The resolved file type (never None).
        """
        if not file_name:
            return cls()

        language = _language_from_pygments(file_name)
        if language not in LANGUAGE_RULES:
            _, ext = os.path.splitext(os.path.basename(file_name))
            language = EXTENSION_LANGUAGES.get(ext.lstrip(".").lower(), language)

        rules = LANGUAGE_RULES.get(language or "")
        if rules is None:
            logging.debug(f"FileType: no rule set for {file_name!r} (language={language!r})")
            return cls()

        logging.debug(f"FileType: {file_name!r} resolved to {language}")
        return cls(language, rules)


def _language_from_pygments(file_name: str) -> Optional[str]:
    """Returns the Pygments lexer name for `file_name`, or None if unknown."""
    try:
        lexer = get_lexer_for_filename(os.path.basename(file_name))
    except ClassNotFound:
        return None
    return _LEXER_ALIASES.get(lexer.name, lexer.name)
