"""File I/O helpers used by the build drivers and the config loader.

Generated templates and previews are written atomically: a build that dies
halfway never leaves a truncated ``.handlebars`` file behind.
"""
from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Union

import yaml

PathLike = Union[str, Path]

_MISSING = object()


def ensure_directory(path: PathLike) -> Path:
    """Create ``path`` (and parents) if needed and return it.

    Raises:
        NotADirectoryError: If ``path`` exists and is a file
    """
    directory = Path(path)
    if directory.exists() and not directory.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def write_text(path: PathLike, content: str, *, encoding: str = "utf-8") -> None:
    """Replace ``path`` with ``content`` atomically.

    The text goes to a sibling temp file which is fsync'd and then renamed
    over the target, so readers see either the old or the new file.
    """
    target = Path(path)
    ensure_directory(target.parent)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding=encoding) as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp, target)
    finally:
        if tmp.exists():
            tmp.unlink()


def read_text(path: PathLike) -> str:
    """Read a UTF-8 file.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    source = Path(path)
    if not source.is_file():
        raise FileNotFoundError(f"File not found: {source}")
    return source.read_text(encoding="utf-8")


def read_yaml(path: PathLike, default: Any = None, *, strict: bool = False) -> Any:
    """Parse a YAML file.

    A missing file, an empty document or (unless ``strict``) a parse error
    yields ``default``. With ``strict`` a missing file raises
    FileNotFoundError and invalid YAML raises ``yaml.YAMLError``.
    """
    source = Path(path)
    if not source.is_file():
        if strict:
            raise FileNotFoundError(f"File not found: {source}")
        return default
    try:
        data = yaml.safe_load(source.read_text(encoding="utf-8"))
    except yaml.YAMLError:
        if strict:
            raise
        return default
    return default if data is None else data


def read_json(path: PathLike, *, default: Any = _MISSING) -> Any:
    """Parse a JSON file; ``default`` (when given) stands in for a missing file.

    Invalid JSON always raises ``json.JSONDecodeError``.
    """
    source = Path(path)
    if not source.is_file():
        if default is _MISSING:
            raise FileNotFoundError(f"File not found: {source}")
        return default
    return json.loads(source.read_text(encoding="utf-8"))


__all__ = ["PathLike", "ensure_directory", "read_json", "read_text", "read_yaml", "write_text"]
