"""Component tree model and static markup serialization."""
from __future__ import annotations

from .elements import (
    ELEMENT_TAG,
    Element,
    Fragment,
    RawMarkup,
    component,
    fragment,
    get_preview_props,
    h,
    is_element,
    iter_children,
    raw,
)
from .serializer import escape_attr, escape_text, render_attributes

__all__ = [
    "ELEMENT_TAG",
    "Element",
    "Fragment",
    "RawMarkup",
    "component",
    "escape_attr",
    "escape_text",
    "fragment",
    "get_preview_props",
    "h",
    "is_element",
    "iter_children",
    "raw",
    "render_attributes",
]
