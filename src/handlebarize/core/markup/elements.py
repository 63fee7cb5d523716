"""Element model for component trees.

Components are plain callables that take props as keyword arguments and return
a node. A node is one of:

- ``None``/``True``/``False`` (renders nothing)
- ``str`` (escaped text), ``RawMarkup`` (emitted verbatim), numbers
- a list/tuple/generator of nodes
- an :class:`Element`

Example:
    @component(preview_props={"user": {"name": "Ada"}})
    def Greeting(user):
        return h("p", {"class_name": "greeting"}, "Hello ", user["name"])
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import GeneratorType
from typing import Any, Callable, ClassVar, Dict, Iterable, Iterator, Mapping, Optional, Tuple

# Opaque marker carried by every element; data containing elements is left as is.
ELEMENT_TAG = "handlebarize.element"


class RawMarkup(str):
    """Pre-rendered markup that must not be escaped."""

    __slots__ = ()


def raw(markup: str) -> RawMarkup:
    return RawMarkup(markup)


class _FragmentType:
    def __repr__(self) -> str:
        return "Fragment"


# Element type that renders only its children.
Fragment = _FragmentType()


@dataclass(frozen=True)
class Element:
    """One node of a component tree.

    ``type`` is an HTML tag name, a component callable, a helper kind or
    :data:`Fragment`.
    """

    type: Any
    props: Dict[str, Any] = field(default_factory=dict)
    children: Tuple[Any, ...] = ()

    __element__: ClassVar[str] = ELEMENT_TAG


def is_element(value: Any) -> bool:
    """True for element instances, recognised by their opaque tag."""
    if isinstance(value, type):
        return False
    return getattr(value, "__element__", None) == ELEMENT_TAG


def h(type_: Any, props: Optional[Mapping[str, Any]] = None, *children: Any) -> Element:
    """Create an element.

    ``children`` given positionally win over a ``children`` prop.
    """
    attrs = dict(props or {})
    prop_children = attrs.pop("children", None)
    if not children and prop_children is not None:
        if isinstance(prop_children, (list, tuple)):
            children = tuple(prop_children)
        else:
            children = (prop_children,)
    return Element(type_, attrs, tuple(children))


def fragment(*children: Any) -> Element:
    return Element(Fragment, {}, tuple(children))


def iter_children(children: Iterable[Any]) -> Iterator[Any]:
    """Flatten nested child lists, skipping ``None`` and booleans."""
    for child in children:
        if child is None or isinstance(child, bool):
            continue
        if isinstance(child, (list, tuple, GeneratorType)):
            yield from iter_children(child)
        else:
            yield child


def component(
    fn: Optional[Callable[..., Any]] = None,
    *,
    preview_props: Optional[Mapping[str, Any]] = None,
) -> Any:
    """Mark a callable as a component, optionally attaching sample data.

    Usable bare (``@component``) or with arguments
    (``@component(preview_props={...})``).
    """

    def decorate(func: Callable[..., Any]) -> Callable[..., Any]:
        if preview_props is not None:
            func.preview_props = dict(preview_props)  # type: ignore[attr-defined]
        func.__handlebarize_component__ = True  # type: ignore[attr-defined]
        return func

    if fn is not None:
        return decorate(fn)
    return decorate


def get_preview_props(component_fn: Any) -> Dict[str, Any]:
    """Sample data exposed by a component; an empty mapping when it has none."""
    props = getattr(component_fn, "preview_props", None)
    if props is None:
        props = getattr(component_fn, "PreviewProps", None)
    if props is None:
        return {}
    if callable(props):
        props = props()
    if not isinstance(props, Mapping):
        raise TypeError(
            f"preview_props of {getattr(component_fn, '__name__', component_fn)!r} must be a mapping, "
            f"got {type(props).__name__}"
        )
    return dict(props)


__all__ = [
    "ELEMENT_TAG",
    "Element",
    "Fragment",
    "RawMarkup",
    "component",
    "fragment",
    "get_preview_props",
    "h",
    "is_element",
    "iter_children",
    "raw",
]
