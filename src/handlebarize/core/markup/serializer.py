"""Static markup serialization helpers.

Escaping and attribute conventions follow static-markup rendering as
browsers and mail clients expect it: text and attribute values escape
``& < > " '``, void elements self-close as ``<br/>``, and props that are not
markup (event handlers, ``key``, ``ref``) are dropped.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from .elements import RawMarkup

VOID_ELEMENTS = frozenset(
    {
        "area", "base", "br", "col", "embed", "hr", "img", "input",
        "link", "meta", "param", "source", "track", "wbr",
    }
)

# Props with a fixed attribute name.
ATTRIBUTE_ALIASES: Dict[str, str] = {
    "class_name": "class",
    "className": "class",
    "class_": "class",
    "html_for": "for",
    "htmlFor": "for",
    "http_equiv": "http-equiv",
    "httpEquiv": "http-equiv",
}

# Props consumed by the renderer, never emitted.
RESERVED_PROPS = frozenset({"children", "key", "ref"})

INNER_HTML_PROPS = ("dangerously_set_inner_html", "dangerouslySetInnerHTML")

_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
}
_ESCAPE_PATTERN = re.compile(r"[&<>\"']")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def escape_text(value: Any) -> str:
    text = str(value)
    if isinstance(value, RawMarkup):
        return text
    return _ESCAPE_PATTERN.sub(lambda m: _ESCAPES[m.group(0)], text)


def escape_attr(value: Any) -> str:
    return _ESCAPE_PATTERN.sub(lambda m: _ESCAPES[m.group(0)], str(value))


def attribute_name(prop: str) -> str:
    """Map a prop name to its HTML attribute name.

    >>> attribute_name("class_name"), attribute_name("data_id"), attribute_name("aria-label")
    ('class', 'data-id', 'aria-label')
    """
    if prop in ATTRIBUTE_ALIASES:
        return ATTRIBUTE_ALIASES[prop]
    return prop.rstrip("_").replace("_", "-")


def style_property(name: str) -> str:
    if name.startswith("--"):
        return name
    return _CAMEL_BOUNDARY.sub(r"-\1", name).replace("_", "-").lower()


def render_style(style: Any) -> str:
    """Render a style mapping as ``prop:value;...`` (strings pass through)."""
    if not isinstance(style, Mapping):
        return str(style)
    parts: List[str] = []
    for name, value in style.items():
        if value is None or value is False or value == "":
            continue
        parts.append(f"{style_property(str(name))}:{value}")
    return ";".join(parts)


def render_attributes(props: Mapping[str, Any]) -> str:
    """Serialize element props to an attribute string with a leading space."""
    parts: List[str] = []
    for prop, value in props.items():
        if prop in RESERVED_PROPS or prop in INNER_HTML_PROPS:
            continue
        if value is None or value is False or callable(value):
            continue
        name = attribute_name(prop)
        if name == "style":
            value = render_style(value)
            if not value:
                continue
        if value is True:
            parts.append(f' {name}=""')
        else:
            parts.append(f' {name}="{escape_attr(value)}"')
    return "".join(parts)


def inner_html(props: Mapping[str, Any]) -> Optional[str]:
    """Return ``__html`` of a dangerously-set-inner-HTML prop, if any."""
    for prop in INNER_HTML_PROPS:
        value = props.get(prop)
        if isinstance(value, Mapping) and "__html" in value:
            return str(value["__html"])
    return None


def start_tag(tag: str, props: Mapping[str, Any]) -> str:
    if tag in VOID_ELEMENTS:
        return f"<{tag}{render_attributes(props)}/>"
    return f"<{tag}{render_attributes(props)}>"


def end_tag(tag: str) -> str:
    if tag in VOID_ELEMENTS:
        return ""
    return f"</{tag}>"


__all__ = [
    "VOID_ELEMENTS",
    "attribute_name",
    "end_tag",
    "escape_attr",
    "escape_text",
    "inner_html",
    "render_attributes",
    "render_style",
    "start_tag",
]
