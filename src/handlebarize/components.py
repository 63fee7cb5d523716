"""Authoring API for component modules.

Example:
    from handlebarize.components import Each, Else, If, Provider, Val, component, h

    @component(preview_props={"user": {"name": "Ada", "vip": True}})
    def Welcome(user):
        return Provider({"user": user},
            If("user.vip", h("strong", None, "VIP"), Else("Member")),
            h("p", None, "Hi ", Val("user.name", user["name"])),
        )
"""
from __future__ import annotations

from .core.compiler.helpers import Each, Else, If, Provider, Val
from .core.compiler.renderer import RenderMode
from .core.markup.elements import Element, Fragment, component, fragment, h, raw


def is_handlebars_build() -> bool:
    """True while a template build is running (the build flag is set)."""
    return RenderMode.from_env() is RenderMode.MARKERS


__all__ = [
    "Each",
    "Element",
    "Else",
    "Fragment",
    "If",
    "Provider",
    "Val",
    "component",
    "fragment",
    "h",
    "is_handlebars_build",
    "raw",
]
