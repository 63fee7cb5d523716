"""Project root resolution."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

PROJECT_ROOT_ENV = "HANDLEBARIZE_PROJECT_ROOT"

# Files/directories that mark a project root, checked from the start directory upwards.
ROOT_MARKERS = ("handlebarize.yaml", "handlebarize.yml", ".handlebarize", "pyproject.toml", ".git")


def resolve_project_root(start: Optional[Path] = None) -> Path:
    """Resolve the project root.

    Resolution priority:
    1. HANDLEBARIZE_PROJECT_ROOT environment variable
    2. Closest ancestor of ``start`` (default: cwd) containing a root marker
    3. ``start`` itself
    """
    env_root = os.environ.get(PROJECT_ROOT_ENV)
    if env_root:
        return Path(env_root).expanduser().resolve()

    origin = Path(start or Path.cwd()).resolve()
    for candidate in (origin, *origin.parents):
        if any((candidate / marker).exists() for marker in ROOT_MARKERS):
            return candidate
    return origin


__all__ = ["PROJECT_ROOT_ENV", "ROOT_MARKERS", "resolve_project_root"]
