"""Template helper constructs used inside component trees.

These are the building blocks that render differently per mode: evaluated
against data for previews, emitted as pseudo-tags for template compilation.

Example:
    Provider(props,
        If("user.vip && !user.banned",
            h("p", None, "Welcome back, ", Val("user.name", props["user"]["name"])),
            Else(h("p", None, "Hello guest")),
        ),
        h("ul", None, Each("items", lambda item, i: h("li", None, Val("sku")))),
    )
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from ..markup.elements import Element


class HelperKind(str, Enum):
    IF = "if"
    ELSE = "else"
    EACH = "each"
    VAL = "val"
    PROVIDER = "provider"


def If(condition: Any, *children: Any) -> Element:
    """Conditional block. An :func:`Else` child marks the else-region."""
    return Element(HelperKind.IF, {"condition": condition}, children)


def Else(*children: Any) -> Element:
    return Element(HelperKind.ELSE, {}, children)


def Each(array: str, *children: Any, item_var: Optional[str] = None) -> Element:
    """Iteration block over the array at path ``array``.

    A single callable child is treated as a render prop and called with
    ``(item, index)``.
    """
    return Element(HelperKind.EACH, {"array": array, "item_var": item_var}, children)


def Val(name: str, value: Any = None) -> Element:
    """Value reference: ``name`` is the data path, ``value`` the design-time fallback."""
    return Element(HelperKind.VAL, {"name": name, "value": value}, ())


def Provider(data: Any, *children: Any) -> Element:
    """Make ``data`` the data context of the subtree."""
    return Element(HelperKind.PROVIDER, {"data": data}, children)


def helper_kind(node: Any) -> Optional[HelperKind]:
    node_type = getattr(node, "type", None)
    return node_type if isinstance(node_type, HelperKind) else None


__all__ = ["Each", "Else", "HelperKind", "If", "Provider", "Val", "helper_kind"]
