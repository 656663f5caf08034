# tte/utils/utils.py
"""
tte.utils.utils.py
==================

Configuration and colour helpers for the TTE editor.

Key functionalities include:
- Automatic User Configuration: on first run a `config.toml` template is copied
  to `~/.config/tte`, so users have a documented file to edit.
- Layered Configuration Loading: the embedded `DEFAULT_CONFIG` is loaded first,
  then recursively merged with the user's `~/.config/tte/config.toml`. A broken
  user file is logged and ignored.
- Colour Conversion: hex colours from the configuration are mapped to the
  nearest xterm-256 palette index for curses.

The editor is always runnable, even when the user configuration is missing or
corrupted, because every key has an embedded default.
"""

import copy
import logging
import shutil
from pathlib import Path
from typing import Any, Dict, Optional

import toml

logger = logging.getLogger("tte")

# --- Constants ---
WHITE_FG_IDX = 255
CONFIG_DIR_NAME = "tte"

# Embedded copy of the shipped `config.toml`. Used as the base layer of every
# loaded configuration.
DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {
        "tab_size": 8,
        "quit_times": 3,
        "message_timeout": 5,
    },
    "keybindings": {
        "save_file": "ctrl+s",
        "find": "ctrl+f",
        "quit": "ctrl+q",
    },
    "colors": {
        "none": "#ffffff",
        "number": "#dca3a3",
        "match": "#268bd2",
        "string": "#d33682",
        "character": "#6c71c4",
        "comment": "#859900",
    },
    "logging": {
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
        "log_dir": "",
    },
}


# --- Helper Functions ---

def get_project_root() -> Path:
    """Determines the project's root directory for finding template files."""
    return Path(__file__).resolve().parents[3]


def user_config_dir() -> Path:
    return Path.home() / ".config" / CONFIG_DIR_NAME


def ensure_user_config_exists(config_dir: Optional[Path] = None) -> None:
    """Copies the `config.toml` template into the user config directory if missing."""
    config_dir = config_dir or user_config_dir()
    try:
        user_config_path = config_dir / "config.toml"
        config_dir.mkdir(parents=True, exist_ok=True)

        if not user_config_path.exists():
            source_config_path = get_project_root() / "config.toml"
            if source_config_path.exists():
                shutil.copy(source_config_path, user_config_path)
                logger.info(f"Created user config template at: {user_config_path}")
    except OSError as e:
        logger.error(f"Could not create user configuration files: {e}", exc_info=True)


def load_config(config_dir: Optional[Path] = None) -> Dict[str, Any]:
    """
    Loads the embedded defaults and merges the user's `config.toml` over them.

    Args:
        config_dir: Directory holding `config.toml`. Defaults to `~/.config/tte`.

    Returns:
        The merged configuration dictionary.
    """
    final_config = copy.deepcopy(DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    config_dir = config_dir or user_config_dir()
    ensure_user_config_exists(config_dir)

    user_config_path = config_dir / "config.toml"
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {user_config_path}")
        except (toml.TomlDecodeError, OSError) as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")

    return final_config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def hex_to_xterm(hex_color: str) -> int:
    """
    Converts a hexadecimal colour string to the nearest xterm-256 colour index.

    Greys map onto the 24-step grey ramp (232-255), other colours onto the
    6x6x6 cube (16-231). Malformed input yields `WHITE_FG_IDX`.
    """
    hex_color = hex_color.lstrip("#")
    if len(hex_color) != 6:
        return WHITE_FG_IDX
    try:
        r, g, b = (int(hex_color[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return WHITE_FG_IDX

    if r == g == b:
        if r < 8:
            return 16
        if r > 248:
            return 231
        return round(((r - 8) / 247) * 24) + 232

    return int(
        16
        + (36 * round(r / 255 * 5))
        + (6 * round(g / 255 * 5))
        + round(b / 255 * 5)
    )
