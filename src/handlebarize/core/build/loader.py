"""Import component modules from arbitrary files."""
from __future__ import annotations

import hashlib
import importlib.util
import logging
import os
import re
import sys
from contextlib import contextmanager
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Iterable, Iterator, Optional

from ..compiler.renderer import MODE_ENV_VAR
from ..exceptions import ComponentLoadError

logger = logging.getLogger(__name__)

DEFAULT_COMPONENT_ATTRIBUTES = ("default", "Component")


def pascal_case(stem: str) -> str:
    """``order_receipt`` / ``order-receipt`` -> ``OrderReceipt``."""
    return "".join(part[:1].upper() + part[1:] for part in re.split(r"[-_\s.]+", stem) if part)


def _module_name(path: Path) -> str:
    digest = hashlib.sha1(str(path.resolve()).encode("utf-8")).hexdigest()[:12]
    return f"_handlebarize_component_{digest}_{re.sub(r'[^0-9A-Za-z_]', '_', path.stem)}"


def load_component_module(path: Path) -> ModuleType:
    """Execute ``path`` as an isolated module.

    The file's directory is on ``sys.path`` while it runs, so sibling modules
    (shared layouts, partial components) can be imported.

    Raises:
        ComponentLoadError: If the file cannot be imported
    """
    path = Path(path)
    spec = importlib.util.spec_from_file_location(_module_name(path), path)
    if spec is None or spec.loader is None:
        raise ComponentLoadError(f"Cannot load module from {path}", context={"path": str(path)})

    module = importlib.util.module_from_spec(spec)
    parent = str(path.parent.resolve())
    added = parent not in sys.path
    if added:
        sys.path.insert(0, parent)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise ComponentLoadError(f"Error importing {path}: {exc}", context={"path": str(path)}) from exc
    finally:
        if added and parent in sys.path:
            sys.path.remove(parent)
    return module


def select_component(
    module: ModuleType,
    path: Path,
    attributes: Iterable[str] = DEFAULT_COMPONENT_ATTRIBUTES,
) -> Optional[Callable[..., Any]]:
    """Pick the component a module exposes.

    Checks ``attributes`` in order, then a callable named after the file in
    PascalCase. Returns None when the module exposes no component.
    """
    for name in (*attributes, pascal_case(Path(path).stem)):
        candidate = getattr(module, name, None)
        if candidate is not None and callable(candidate):
            return candidate
    return None


@contextmanager
def build_mode(var: str = MODE_ENV_VAR) -> Iterator[None]:
    """Set the build flag (``<var>=true``) for the duration of a batch."""
    previous = os.environ.get(var)
    os.environ[var] = "true"
    try:
        yield
    finally:
        if previous is None:
            os.environ.pop(var, None)
        else:
            os.environ[var] = previous


__all__ = [
    "DEFAULT_COMPONENT_ATTRIBUTES",
    "build_mode",
    "load_component_module",
    "pascal_case",
    "select_component",
]
