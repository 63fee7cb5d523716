"""Stdlib logging setup for the CLI.

Library modules only create ``logging.getLogger(__name__)`` loggers; handlers
are installed here, once, by the command-line entry point.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from .utils.io import ensure_directory

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"

_INSTALLED_HANDLERS: list[logging.Handler] = []


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str = "INFO", log_path: Optional[Path] = None, *, json_mode: bool = False) -> None:
    """Configure the root logger.

    Args:
        level: Level name (DEBUG, INFO, ...)
        log_path: Optional file that receives all records at ``level``
        json_mode: Keep stdout/stderr machine-readable: no console handler,
            and a NullHandler so the lastResort handler never prints

    Calling again replaces the handlers installed by a previous call.
    """
    root = logging.getLogger()
    for handler in _INSTALLED_HANDLERS:
        root.removeHandler(handler)
        handler.close()
    _INSTALLED_HANDLERS.clear()

    numeric = _level_from_name(level)
    root.setLevel(numeric)

    handlers: list[logging.Handler] = []
    if json_mode:
        handlers.append(logging.NullHandler())
    else:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(numeric)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        handlers.append(console)

    if log_path is not None:
        resolved = Path(log_path).resolve()
        ensure_directory(resolved.parent)
        file_handler = logging.FileHandler(resolved, encoding="utf-8")
        file_handler.setLevel(numeric)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(file_handler)

    for handler in handlers:
        root.addHandler(handler)
        _INSTALLED_HANDLERS.append(handler)


def reset_logging_for_tests() -> None:
    """Test-only: remove handlers installed by :func:`configure_logging`."""
    root = logging.getLogger()
    for handler in _INSTALLED_HANDLERS:
        root.removeHandler(handler)
        handler.close()
    _INSTALLED_HANDLERS.clear()


__all__ = ["LOG_FORMAT", "configure_logging", "reset_logging_for_tests"]
