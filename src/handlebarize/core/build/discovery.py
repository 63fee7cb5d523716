"""Component file discovery."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

DEFAULT_SUFFIXES = (".py",)
DEFAULT_SKIP_PREFIXES = ("_", "test_")


def _skipped(name: str, skip_prefixes: Iterable[str]) -> bool:
    return name.startswith(".") or any(name.startswith(prefix) for prefix in skip_prefixes)


def find_component_files(
    root: Path,
    suffixes: Iterable[str] = DEFAULT_SUFFIXES,
    skip_prefixes: Iterable[str] = DEFAULT_SKIP_PREFIXES,
) -> List[Path]:
    """Recursively collect component modules under ``root`` in sorted order.

    Files and directories whose name starts with one of ``skip_prefixes``
    (``__init__.py``, ``__pycache__``, ``test_*.py``) or a dot are ignored.

    Raises:
        FileNotFoundError: If ``root`` does not exist
        NotADirectoryError: If ``root`` is not a directory
    """
    root = Path(root)
    if not root.exists():
        raise FileNotFoundError(f"Directory not found: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    suffixes = tuple(suffixes)
    skip_prefixes = tuple(skip_prefixes)
    found: List[Path] = []
    for path in sorted(root.rglob("*")):
        rel_parts = path.relative_to(root).parts
        if any(_skipped(part, skip_prefixes) for part in rel_parts):
            continue
        if path.is_file() and path.suffix in suffixes:
            found.append(path)
    return found


__all__ = ["DEFAULT_SKIP_PREFIXES", "DEFAULT_SUFFIXES", "find_component_files"]
