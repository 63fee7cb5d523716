"""Path expressions over nested data.

A path such as ``order.items[0].name``, ``order.items.0.name`` or
``order.items.[0].name`` is split on ``.``, ``[`` and ``]`` (empty segments
dropped) and applied left to right. Purely numeric segments become integers so
they can index sequences; mappings are tried with both the integer and its
string form.

Resolution stops at the first ``None`` or missing step and returns ``ABSENT``.
The evaluator, the marker generator and the configuration lookup all share this
single notion of what a path means.
"""
from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any, List, Tuple, Union

Segment = Union[str, int]

_SEGMENT_SPLIT = re.compile(r"[.\[\]]")


class _Absent:
    """Sentinel for "no value at this path" (distinct from ``None``)."""

    _instance: "_Absent | None" = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT: Any = _Absent()


def is_absent(value: Any) -> bool:
    return value is ABSENT


def parse_path(path: str) -> Tuple[Segment, ...]:
    """Split a path string into segments.

    >>> parse_path("items[0].name")
    ('items', 0, 'name')
    >>> parse_path("items.[0]")
    ('items', 0)
    """
    segments: List[Segment] = []
    for raw in _SEGMENT_SPLIT.split(path):
        if not raw:
            continue
        segments.append(int(raw) if raw.isdecimal() else raw)
    return tuple(segments)


def _step(current: Any, segment: Segment) -> Any:
    if isinstance(current, Mapping):
        if segment in current:
            return current[segment]
        alternate = str(segment) if isinstance(segment, int) else None
        if alternate is not None and alternate in current:
            return current[alternate]
        return ABSENT
    if isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
        if isinstance(segment, int) and segment < len(current):
            return current[segment]
        return ABSENT
    if isinstance(segment, str) and not isinstance(current, (str, bytes, int, float, bool)):
        # Plain objects (dataclasses, namespaces) expose data as attributes.
        return getattr(current, segment, ABSENT)
    return ABSENT


def resolve(path: Union[str, Sequence[Segment]], data: Any) -> Any:
    """Resolve ``path`` against ``data``.

    Returns the nested value, or ``ABSENT`` when an intermediate value is
    ``None``/missing or the final step does not exist. An empty path resolves
    to ``data`` itself.
    """
    segments = parse_path(path) if isinstance(path, str) else tuple(path)
    current = data
    for segment in segments:
        if current is None or current is ABSENT:
            return ABSENT
        current = _step(current, segment)
        if current is ABSENT:
            return ABSENT
    return current


__all__ = ["ABSENT", "Segment", "is_absent", "parse_path", "resolve"]
