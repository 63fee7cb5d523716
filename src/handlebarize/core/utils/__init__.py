"""Shared utilities: file I/O, mapping merges and project root lookup."""
from __future__ import annotations

from .io import PathLike, ensure_directory, read_json, read_text, read_yaml, write_text
from .merge import deep_merge, merge_arrays
from .paths import resolve_project_root

__all__ = [
    "PathLike",
    "deep_merge",
    "ensure_directory",
    "merge_arrays",
    "read_json",
    "read_text",
    "read_yaml",
    "resolve_project_root",
    "write_text",
]
