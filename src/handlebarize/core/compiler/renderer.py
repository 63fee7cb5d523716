"""Dual-mode rendering of component trees.

One component source renders two ways:

- ``RenderMode.PREVIEW``: conditions are evaluated against the data context,
  loops are expanded per array element and values are resolved, producing
  final HTML.
- ``RenderMode.MARKERS``: conditionals and loops are emitted as
  ``<hb-if>``/``<hb-else>``/``<hb-each>`` pseudo-tags around children rendered
  once, and scalar values appear as marker tokens. The result is instrumented
  markup for the template compiler.

The mode is chosen once per renderer; the two behaviours live in two strategy
classes behind the same interface. The data context is an explicit
:class:`RenderContext` passed down every call, never global state.
"""
from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from enum import Enum
from types import GeneratorType
from typing import Any, Callable, ClassVar, Dict, List, Optional, Tuple

from ..markup.elements import Element, Fragment, is_element, iter_children
from ..markup.serializer import end_tag, escape_attr, escape_text, inner_html, start_tag
from .conditions import ConditionEvaluator, is_truthy
from .helpers import HelperKind, helper_kind
from .markers import MarkerRegistry
from .paths import ABSENT, resolve
from .rewriter import EACH_TAG, ELSE_TAG, IF_TAG

logger = logging.getLogger(__name__)

MODE_ENV_VAR = "IS_HANDLEBARS_BUILD"


class RenderMode(str, Enum):
    PREVIEW = "preview"
    MARKERS = "markers"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, var: str = MODE_ENV_VAR) -> "RenderMode":
        """Read the process-wide build flag (``IS_HANDLEBARS_BUILD=true``)."""
        env = os.environ if environ is None else environ
        flag = str(env.get(var, "")).strip().lower()
        return cls.MARKERS if flag == "true" else cls.PREVIEW


@dataclass(frozen=True)
class LoopScope:
    """The innermost loop a node is rendered in.

    In marker mode ``array`` holds only the representative element and
    ``index`` is 0: children are rendered once.
    """

    path: str
    array: Any = ABSENT
    index: Optional[int] = None
    item_var: Optional[str] = None

    def current(self) -> Any:
        if self.index is None or not _is_sequence(self.array):
            return ABSENT
        if self.index >= len(self.array):
            return ABSENT
        return self.array[self.index]


@dataclass(frozen=True)
class RenderContext:
    """Explicit data context threaded through one render call."""

    data: Any = None
    loop: Optional[LoopScope] = None
    markers: Optional[MarkerRegistry] = None

    def with_data(self, data: Any) -> "RenderContext":
        return replace(self, data=data)

    def with_loop(self, loop: Optional[LoopScope]) -> "RenderContext":
        return replace(self, loop=loop)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def scoped_data(ctx: RenderContext) -> Any:
    """Data for conditions: inside a loop, ``this`` (and the item variable) name the item."""
    if ctx.loop is None or not isinstance(ctx.data, Mapping):
        return ctx.data
    item = ctx.loop.current()
    if item is ABSENT:
        return ctx.data
    scoped = dict(ctx.data)
    scoped["this"] = item
    if ctx.loop.item_var:
        scoped[ctx.loop.item_var] = item
    return scoped


def split_else(children: Any) -> Tuple[List[Any], Optional[Element], List[Any]]:
    """Split children around the first Else: (before, else_node, after)."""
    flat = list(iter_children(children))
    for index, child in enumerate(flat):
        if helper_kind(child) is HelperKind.ELSE:
            return flat[:index], child, flat[index + 1:]
    return flat, None, []


def relative_item_path(name: Optional[str], item_var: Optional[str]) -> str:
    """Path of ``name`` relative to the current loop item ('' for the item itself)."""
    path = (name or "").strip()
    for prefix in ("this", item_var):
        if not prefix:
            continue
        if path == prefix:
            return ""
        if path.startswith(prefix + "."):
            return path[len(prefix) + 1:]
    return path


def absolute_array_path(array_path: str, loop: Optional[LoopScope]) -> str:
    """Rewrite an array path relative to the enclosing loop item as a root path.

    Inside ``groups``, ``this.members`` (or ``g.members`` with item variable
    ``g``) becomes ``groups.[0].members``, the path its marker tokens are
    bound under.
    """
    if loop is None:
        return array_path
    relative = relative_item_path(array_path, loop.item_var)
    if relative == array_path.strip():
        return array_path
    item = f"{loop.path}.[0]"
    return f"{item}.{relative}" if relative else item


class RenderStrategy(ABC):
    """Mode-specific rendering of the helper constructs."""

    mode: ClassVar[RenderMode]

    def __init__(self, renderer: "DualModeRenderer") -> None:
        self.renderer = renderer

    def render_if(self, node: Element, ctx: RenderContext) -> str:
        condition = node.props.get("condition")
        before, else_node, after = split_else(node.children)
        if not isinstance(condition, str):
            # Static condition: same outcome in both modes, no pseudo-tag.
            if is_truthy(condition):
                return self.renderer.render_children(before + after, ctx)
            if else_node is None:
                return ""
            return self.renderer.render_children(else_node.children, ctx)
        return self.render_conditional(condition, node, before, else_node, after, ctx)

    @abstractmethod
    def render_conditional(
        self,
        condition: str,
        node: Element,
        before: List[Any],
        else_node: Optional[Element],
        after: List[Any],
        ctx: RenderContext,
    ) -> str:
        ...

    @abstractmethod
    def render_else(self, node: Element, ctx: RenderContext) -> str:
        ...

    @abstractmethod
    def render_each(self, node: Element, ctx: RenderContext) -> str:
        ...

    @abstractmethod
    def render_val(self, node: Element, ctx: RenderContext) -> str:
        ...


class PreviewStrategy(RenderStrategy):
    """Evaluate against data and produce final HTML."""

    mode = RenderMode.PREVIEW

    def render_conditional(self, condition, node, before, else_node, after, ctx):
        if self.renderer.evaluator.evaluate(condition, scoped_data(ctx)):
            return self.renderer.render_children(before + after, ctx)
        if else_node is None:
            return ""
        return self.renderer.render_children(else_node.children, ctx)

    def render_else(self, node, ctx):
        return self.renderer.render_children(node.children, ctx)

    def render_each(self, node, ctx):
        array_path = node.props.get("array") or ""
        item_var = node.props.get("item_var")
        data = scoped_data(ctx)
        if not self.renderer.evaluator.evaluate(array_path, data):
            return ""
        items = resolve(array_path, data)
        if not _is_sequence(items):
            if items is not ABSENT:
                logger.warning("Each(%r) resolved to %s, not a list; rendering nothing", array_path, type(items).__name__)
            return ""

        parts: List[str] = []
        for index, item in enumerate(items):
            scope = LoopScope(array_path, items, index, item_var)
            parts.append(self.renderer.render_loop_body(node.children, item, index, ctx.with_loop(scope)))
        return "".join(parts)

    def render_val(self, node, ctx):
        name = node.props.get("name")
        value = node.props.get("value")
        if ctx.loop is not None:
            item = ctx.loop.current()
            relative = relative_item_path(name, ctx.loop.item_var)
            result = resolve(relative, item) if relative else item
        elif value is not None:
            result = value
        elif name:
            result = resolve(name, ctx.data)
        else:
            result = ABSENT
        if result is ABSENT or result is None:
            return ""
        return self.renderer.render(result, ctx)


class MarkerStrategy(RenderStrategy):
    """Emit pseudo-tags and marker tokens for the template compiler."""

    mode = RenderMode.MARKERS

    def render_conditional(self, condition, node, before, else_node, after, ctx):
        body = self.renderer.render_children(before, ctx)
        if else_node is not None:
            body += f"<{ELSE_TAG}>{self.renderer.render_children(else_node.children, ctx)}</{ELSE_TAG}>"
        body += self.renderer.render_children(after, ctx)
        return f'<{IF_TAG} condition="{escape_attr(condition)}">{body}</{IF_TAG}>'

    def render_else(self, node, ctx):
        # Only an Else that is a direct child of If splits it; elsewhere it is a plain wrapper.
        return self.renderer.render_children(node.children, ctx)

    def render_each(self, node, ctx):
        array_path = node.props.get("array") or ""
        item_var = node.props.get("item_var")
        items = resolve(array_path, scoped_data(ctx))
        representative = items[0] if _is_sequence(items) and len(items) else {}

        array_path = absolute_array_path(array_path, ctx.loop)
        scope = LoopScope(array_path, [representative], 0, item_var)
        body = self.renderer.render_loop_body(node.children, representative, 0, ctx.with_loop(scope))

        attrs = f' array="{escape_attr(array_path)}"'
        if item_var:
            attrs += f' itemVar="{escape_attr(item_var)}"'
        return f"<{EACH_TAG}{attrs}>{body}</{EACH_TAG}>"

    def render_val(self, node, ctx):
        name = node.props.get("name") or ""
        value = node.props.get("value")
        if ctx.loop is not None:
            relative = relative_item_path(name, ctx.loop.item_var)
            return "{{" + (f"this.{relative}" if relative else "this") + "}}"
        if value is not None:
            return self.renderer.render(value, ctx)
        if ctx.markers is not None:
            token = ctx.markers.token_for(name)
            if token is not None:
                return token
        return "{{" + name + "}}"


class DualModeRenderer:
    """Render a component tree to markup in one :class:`RenderMode`.

    Example:
        renderer = DualModeRenderer(RenderMode.PREVIEW)
        html = renderer.render_component(Receipt, {"order": order})
    """

    STRATEGIES: ClassVar[Dict[RenderMode, type]] = {
        RenderMode.PREVIEW: PreviewStrategy,
        RenderMode.MARKERS: MarkerStrategy,
    }

    def __init__(self, mode: RenderMode = RenderMode.PREVIEW, evaluator: Optional[ConditionEvaluator] = None) -> None:
        self.mode = RenderMode(mode)
        self.evaluator = evaluator if evaluator is not None else ConditionEvaluator()
        self.strategy: RenderStrategy = self.STRATEGIES[self.mode](self)
        self._helpers: Dict[HelperKind, Callable[[Element, RenderContext], str]] = {
            HelperKind.IF: self.strategy.render_if,
            HelperKind.ELSE: self.strategy.render_else,
            HelperKind.EACH: self.strategy.render_each,
            HelperKind.VAL: self.strategy.render_val,
            HelperKind.PROVIDER: self._render_provider,
        }

    def render(self, node: Any, context: Optional[RenderContext] = None) -> str:
        """Render any node (element, text, number, list) to markup."""
        ctx = context if context is not None else RenderContext()
        if node is None or node is ABSENT or isinstance(node, bool):
            return ""
        if isinstance(node, str):
            return escape_text(node)
        if isinstance(node, (int, float)):
            return escape_text(node)
        if is_element(node):
            return self.render_element(node, ctx)
        if isinstance(node, Mapping):
            raise TypeError(f"Mappings are not valid as a child (got keys {sorted(map(str, node))!r})")
        if isinstance(node, (list, tuple, GeneratorType)):
            return self.render_children(node, ctx)
        if callable(node):
            raise TypeError(f"Callables are only valid as the render prop of Each, got {node!r}")
        return escape_text(node)

    def render_children(self, children: Any, ctx: RenderContext) -> str:
        return "".join(self.render(child, ctx) for child in iter_children(children))

    def render_element(self, node: Element, ctx: RenderContext) -> str:
        kind = helper_kind(node)
        if kind is not None:
            return self._helpers[kind](node, ctx)
        if node.type is Fragment:
            return self.render_children(node.children, ctx)
        if isinstance(node.type, str):
            return self._render_tag(node, ctx)
        if callable(node.type):
            return self.render_component(node.type, node.props, ctx, children=node.children)
        raise TypeError(f"Invalid element type: {node.type!r}")

    def render_component(
        self,
        component: Callable[..., Any],
        props: Optional[Mapping[str, Any]] = None,
        context: Optional[RenderContext] = None,
        *,
        children: Tuple[Any, ...] = (),
    ) -> str:
        """Call ``component`` with ``props`` as keyword arguments and render the result."""
        kwargs = dict(props or {})
        if children:
            kwargs["children"] = children[0] if len(children) == 1 else list(children)
        return self.render(component(**kwargs), context)

    def render_loop_body(self, children: Any, item: Any, index: int, ctx: RenderContext) -> str:
        """Render loop children; a single callable child is a render prop."""
        flat = list(iter_children(children))
        if len(flat) == 1 and callable(flat[0]) and not is_element(flat[0]):
            return self.render(flat[0](item, index), ctx)
        return self.render_children(flat, ctx)

    def _render_provider(self, node: Element, ctx: RenderContext) -> str:
        return self.render_children(node.children, ctx.with_data(node.props.get("data")))

    def _render_tag(self, node: Element, ctx: RenderContext) -> str:
        tag = node.type
        opening = start_tag(tag, node.props)
        closing = end_tag(tag)
        if not closing:
            return opening
        inner = inner_html(node.props)
        if inner is None:
            inner = self.render_children(node.children, ctx)
        return f"{opening}{inner}{closing}"


__all__ = [
    "DualModeRenderer",
    "LoopScope",
    "MODE_ENV_VAR",
    "MarkerStrategy",
    "PreviewStrategy",
    "RenderContext",
    "RenderMode",
    "RenderStrategy",
    "absolute_array_path",
    "relative_item_path",
    "scoped_data",
    "split_else",
]
