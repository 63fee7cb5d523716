"""Mapping merge used by the layered configuration loader.

Project files and environment overrides are merged onto bundled defaults:
- Mappings merge recursively
- Lists are replaced, unless the override list starts with "+" (append)
- Everything else is replaced
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any] | None) -> Dict[str, Any]:
    """Recursively merge ``override`` onto ``base`` without mutating either.

    Example:
        >>> deep_merge({"build": {"output_suffix": ".hbs", "exclude": ["a"]}},
        ...            {"build": {"exclude": ["+", "b"]}})
        {'build': {'output_suffix': '.hbs', 'exclude': ['a', 'b']}}
    """
    result: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(current, value)
        elif isinstance(current, list) and isinstance(value, list):
            result[key] = merge_arrays(current, value)
        else:
            result[key] = value
    return result


def merge_arrays(base: List[Any], override: List[Any]) -> List[Any]:
    """Merge two lists; a leading "+" in ``override`` appends instead of replacing.

    >>> merge_arrays([".py"], [".pyw"])
    ['.pyw']
    >>> merge_arrays([".py"], ["+", ".pyw"])
    ['.py', '.pyw']
    """
    if override and override[0] == "+":
        return [*base, *override[1:]]
    return list(override)


__all__ = ["deep_merge", "merge_arrays"]
