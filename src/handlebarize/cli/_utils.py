"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict

from ..core.config import ConfigManager
from ..core.stdlib_logging import configure_logging
from ..core.utils.paths import resolve_project_root


def get_repo_root(args: argparse.Namespace) -> Path:
    """Get project root from ``--repo-root`` or auto-detect."""
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).resolve()
    return resolve_project_root()


def load_config(args: argparse.Namespace) -> Dict[str, Any]:
    """Load and validate the merged configuration for this invocation.

    Raises:
        ConfigError: If configuration is invalid
    """
    return ConfigManager(get_repo_root(args)).load_config(validate=True)


def setup_logging(args: argparse.Namespace, config: Dict[str, Any]) -> None:
    """Configure logging from ``--verbose``/``--json`` and the ``logging`` config section."""
    logging_cfg = config.get("logging") or {}
    level = "DEBUG" if getattr(args, "verbose", False) else logging_cfg.get("level", "INFO")
    log_file = logging_cfg.get("file")
    log_path = None
    if log_file:
        log_path = Path(log_file)
        if not log_path.is_absolute():
            log_path = get_repo_root(args) / log_path
    configure_logging(level, log_path, json_mode=bool(getattr(args, "json", False)))


__all__ = ["get_repo_root", "load_config", "setup_logging"]
