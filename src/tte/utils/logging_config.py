# tte/utils/logging_config.py
"""tte.utils.logging_config
==========================

Logging configuration for TTE.

The terminal belongs to curses while the editor runs, so diagnostics go to
files by default:

    - editor.log: rotating log of everything at or above ``file_level``.
    - error.log: optional rotating log of ERROR and CRITICAL records only.
    - keytrace.log: optional trace of decoded keys, written through the
      ``tte.keyevents`` logger when the ``TTE_KEYTRACE`` environment variable
      is ``1``, ``true`` or ``yes``.
    - stderr: optional console handler, off unless ``log_to_console`` is set.

Log files are created in ``logging.log_dir`` (current directory when empty).
If that directory cannot be created the system temp directory is used.
`setup_logging` never raises; problems are reported to stderr and logging
continues with whatever handlers could be built.

Globals:
    logger: Main application logger ("tte").
    KEY_LOGGER: Logger for key trace events ("tte.keyevents").
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Optional


# ======================== Global loggers ========================
logger = logging.getLogger("tte")
KEY_LOGGER = logging.getLogger("tte.keyevents")

KEYTRACE_ENV = "TTE_KEYTRACE"
FILE_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
CONSOLE_FORMAT = "%(levelname)-8s - %(name)-12s - %(message)s"


def _level(name: Any, default: int) -> int:
    level = getattr(logging, str(name).upper(), None)
    return level if isinstance(level, int) else default


def _resolve_log_dir(log_dir: str) -> str:
    """Returns a usable directory for log files, creating it if needed."""
    if not log_dir:
        return ""
    log_dir = os.path.expanduser(log_dir)
    try:
        os.makedirs(log_dir, exist_ok=True)
        return log_dir
    except OSError as e:
        fallback = tempfile.gettempdir()
        print(f"Error creating log directory '{log_dir}': {e}. Logging to '{fallback}'.", file=sys.stderr)
        return fallback


def _rotating_handler(
    path: str, max_bytes: int, backups: int, level: int, formatter: logging.Formatter
) -> Optional[logging.Handler]:
    try:
        handler = logging.handlers.RotatingFileHandler(
            path, maxBytes=max_bytes, backupCount=backups, encoding="utf-8"
        )
    except OSError as e:
        print(f"Error setting up log file '{path}': {e}. File logging may be impaired.", file=sys.stderr)
        return None
    handler.setFormatter(formatter)
    handler.setLevel(level)
    return handler


def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Configures application-wide logging handlers and levels.

    Existing handlers on the root logger are replaced, so calling this twice
    (for example from tests) does not duplicate records.

    Args:
        config (dict | None): Application configuration. Only the
            ``["logging"]`` section is read:

            - ``file_level`` (str): level for editor.log. Default ``"DEBUG"``.
            - ``console_level`` (str): level for stderr. Default ``"WARNING"``.
            - ``log_to_console`` (bool): enable the stderr handler. Default ``False``.
            - ``separate_error_log`` (bool): create error.log. Default ``False``.
            - ``log_dir`` (str): directory for log files. Default: current directory.
    """
    logging_cfg = (config or {}).get("logging", {})
    file_level = _level(logging_cfg.get("file_level", "DEBUG"), logging.DEBUG)
    log_dir = _resolve_log_dir(str(logging_cfg.get("log_dir", "") or ""))
    file_formatter = logging.Formatter(FILE_FORMAT)

    handlers: list[logging.Handler] = []

    log_filename = os.path.join(log_dir, "editor.log")
    file_handler = _rotating_handler(log_filename, 2 * 1024 * 1024, 5, file_level, file_formatter)
    if file_handler:
        handlers.append(file_handler)

    console_handler = None
    if logging_cfg.get("log_to_console", False):
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        console_handler.setLevel(_level(logging_cfg.get("console_level", "WARNING"), logging.WARNING))
        handlers.append(console_handler)

    error_handler = None
    if logging_cfg.get("separate_error_log", False):
        error_handler = _rotating_handler(
            os.path.join(log_dir, "error.log"), 1024 * 1024, 3, logging.ERROR, file_formatter
        )
        if error_handler:
            handlers.append(error_handler)

    root_logger = logging.getLogger()
    root_logger.handlers = handlers
    root_logger.setLevel(file_level)

    _setup_key_logger(log_dir)

    logging.info("Logging setup complete. Root logger level: %s.", logging.getLevelName(root_logger.level))
    if file_handler:
        logging.info(f"File logging to '{log_filename}' at level: {logging.getLevelName(file_level)}.")
    if console_handler:
        logging.info(f"Console logging to stderr at level: {logging.getLevelName(console_handler.level)}.")
    if error_handler:
        logging.info("Error logging to 'error.log' at level: ERROR.")


def _setup_key_logger(log_dir: str) -> None:
    """Attaches the key trace file to `KEY_LOGGER`, or silences it."""
    KEY_LOGGER.propagate = False
    KEY_LOGGER.setLevel(logging.DEBUG)
    KEY_LOGGER.handlers = []
    KEY_LOGGER.disabled = False

    if os.environ.get(KEYTRACE_ENV, "").lower() not in {"1", "true", "yes"}:
        KEY_LOGGER.addHandler(logging.NullHandler())
        KEY_LOGGER.disabled = True
        logging.debug("Key event tracing is disabled.")
        return

    key_trace_filename = os.path.join(log_dir, "keytrace.log")
    handler = _rotating_handler(
        key_trace_filename, 1024 * 1024, 3, logging.DEBUG, logging.Formatter("%(asctime)s - %(message)s")
    )
    if handler is None:
        KEY_LOGGER.disabled = True
        logging.error("Failed to set up key trace logging.")
        return
    KEY_LOGGER.addHandler(handler)
    logging.info("Key event tracing enabled, logging to '%s'.", key_trace_filename)
