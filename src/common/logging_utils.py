"""Centralized logging setup and helpers for structured debug records."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Dict, Optional

from constants import Constants

_HANDLER_NAME = "npmsweep-console"


def _level_from_env(default: int = logging.INFO) -> int:
    name = os.environ.get(Constants.ENV_LOG_LEVEL, "").strip().upper()
    if not name:
        return default
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else default


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None, quiet: bool = False) -> None:
    """Configure the root logger for CLI use.

    Diagnostics go to stderr so stdout stays reserved for the match report.
    Calling this more than once replaces the console handler instead of
    stacking a second one.

    Args:
        level: Level name; when omitted the NPMSWEEP_LOG_LEVEL environment
            variable is consulted, then INFO.
        log_file: Optional path that receives a timestamped copy of all records.
        quiet: Only errors reach the console.
    """
    root = logging.getLogger()
    if level:
        level_value = getattr(logging, str(level).upper(), logging.INFO)
    else:
        level_value = _level_from_env()
    root.setLevel(level_value)

    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    console = logging.StreamHandler(sys.stderr)
    console.set_name(_HANDLER_NAME)
    console.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
    if quiet:
        console.setLevel(logging.ERROR)
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
        root.addHandler(file_handler)
        logging.getLogger(__name__).info("Logging to file: %s", log_file)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when debug records from this logger would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**kwargs: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured log records, dropping None values."""
    return {k: v for k, v in kwargs.items() if v is not None}
