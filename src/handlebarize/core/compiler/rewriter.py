"""Structural pseudo-tag rewriting.

Marker-emission rendering wraps conditional and loop constructs in
pseudo-elements:

- <hb-if condition="a && b">...<hb-else>...</hb-else></hb-if>
- <hb-each array="items" itemVar="item">...</hb-each>

The rewriter turns them into Handlebars blocks with two fixpoint loops:
conditionals first, then loops. Each loop repeatedly rewrites the innermost
occurrences (a match may not contain another opening tag of its own kind)
until a pass changes nothing, so arbitrary nesting depth is handled and every
pass strictly reduces the number of pseudo-tags. Unrelated markup is left
byte-for-byte untouched.

Rewrite rules:
- Only an <hb-else> at the top level of the conditional body is its else
  branch; one nested inside a child element is left in place.
- Condition text is HTML-unescaped; a ``{{...}}`` wrapper (a substituted
  marker) is stripped.
- A missing, empty or malformed condition hides the block: the else-region is
  kept when present, otherwise the whole tag disappears.
- ``a && b`` becomes one nested block per conjunct; a conjunct written ``!x``
  becomes an ``unless`` block. The else-region is repeated at every level so
  it shows whenever any conjunct is false.
- ``<hb-each array="p">`` becomes ``{{#each p}}`` (or ``{{#each p as |v|}}``)
  and every ``p.[0]`` inside it becomes ``this`` (or ``v``).
"""
from __future__ import annotations

import html
import logging
import re
from typing import Callable, Dict, List, Optional, Tuple

from ..exceptions import MalformedConditionError
from ..markup.serializer import VOID_ELEMENTS
from .base import ContentTransformer, TransformContext
from .conditions import NOT, OR, split_conjuncts, validate_condition

logger = logging.getLogger(__name__)

IF_TAG = "hb-if"
ELSE_TAG = "hb-else"
EACH_TAG = "hb-each"

# Innermost <hb-if>: content may not contain another <hb-if.
IF_PATTERN = re.compile(
    r'<hb-if(?:\s+condition="([^"]*)")?[^>]*>((?:(?!<hb-if)[\s\S])*?)</hb-if>'
)

ELSE_PATTERN = re.compile(r"<hb-else>([\s\S]*?)</hb-else>")

_TAG_PATTERN = re.compile(r"<(/?)([A-Za-z][\w:.-]*)[^>]*?(/?)>")

# Innermost <hb-each>: content may not contain another <hb-each.
EACH_PATTERN = re.compile(
    r'<hb-each\s+array="([^"]+)"(?:\s+itemVar="([^"]+)")?[^>]*>((?:(?!<hb-each)[\s\S])*?)</hb-each>'
)

_LEFTOVER_PATTERN = re.compile(r"</?(hb-if|hb-else|hb-each)\b")


def decode_condition(raw: Optional[str]) -> str:
    """Unescape an attribute value and strip a ``{{...}}`` wrapper."""
    if raw is None:
        return ""
    text = html.unescape(raw)
    if text.startswith("{{") and text.endswith("}}"):
        text = text[2:-2].strip()
    return text


def lower_conjunct(conjunct: str) -> Tuple[str, str]:
    """Return the (open, close) block pair for one conjunct."""
    if OR in conjunct:
        return "{{#if " + conjunct + "}}", "{{/if}}"
    name = conjunct.lstrip(NOT)
    negations = len(conjunct) - len(name)
    helper = "unless" if negations % 2 else "if"
    return "{{#" + helper + " " + name.strip() + "}}", "{{/" + helper + "}}"


def find_top_level_else(content: str) -> Optional[re.Match[str]]:
    """Find the <hb-else> region that sits directly in ``content``.

    An <hb-else> inside a child element belongs to that element, not to the
    enclosing conditional, and is not returned.
    """
    depth = 0
    for tag in _TAG_PATTERN.finditer(content):
        closing, name, self_closing = tag.groups()
        name = name.lower()
        if name == ELSE_TAG and not closing and depth == 0:
            return ELSE_PATTERN.match(content, tag.start())
        if self_closing or name in VOID_ELEMENTS:
            continue
        depth = max(depth - 1, 0) if closing else depth + 1
    return None


def representative_pattern(array: str) -> re.Pattern[str]:
    """Match `<array>.[0]` where it starts a path (not inside `x.<array>.[0]`)."""
    return re.compile(r"(?<![\w.\]])" + re.escape(f"{array}.[0]"))


class TagRewriter(ContentTransformer):
    """Rewrite <hb-if>/<hb-else>/<hb-each> pseudo-tags into Handlebars blocks."""

    def rewrite(self, markup: str, context: Optional[TransformContext] = None) -> str:
        """Rewrite all well-formed pseudo-tags in ``markup``.

        Pseudo-tags without a matching close are left in place; use
        :meth:`find_unbalanced` (or :class:`PseudoTagValidator`) to detect them.
        Running ``rewrite`` on its own output is a no-op.
        """
        ctx = context if context is not None else TransformContext()
        result = self._fixpoint(IF_TAG, IF_PATTERN, markup, lambda m: self._rewrite_conditional(m, ctx))
        result = self._fixpoint(EACH_TAG, EACH_PATTERN, result, lambda m: self._rewrite_loop(m, ctx))
        return result

    def transform(self, content: str, context: TransformContext) -> str:
        return self.rewrite(content, context)

    @staticmethod
    def _fixpoint(label: str, pattern: re.Pattern[str], text: str, replace: Callable[[re.Match[str]], str]) -> str:
        passes = 0
        while True:
            text, count = pattern.subn(replace, text)
            if count == 0:
                break
            passes += 1
        logger.debug("<%s> rewriting converged after %d pass(es)", label, passes)
        return text

    def _rewrite_conditional(self, match: re.Match[str], context: TransformContext) -> str:
        raw_condition, content = match.group(1), match.group(2)
        else_match = find_top_level_else(content)

        condition = decode_condition(raw_condition)
        try:
            condition = validate_condition(condition)
        except MalformedConditionError as exc:
            if condition:
                context.warn(f"Hiding conditional block: {exc}")
            context.record_conditional(hidden=True)
            return else_match.group(1) if else_match else ""

        if OR in condition:
            context.warn(f"Condition {condition!r} uses '||', which Handlebars cannot evaluate natively")

        blocks = [lower_conjunct(conjunct) for conjunct in split_conjuncts(condition)]
        context.record_conditional()

        if else_match is None:
            opens = "".join(open_ for open_, _ in blocks)
            closes = "".join(close for _, close in reversed(blocks))
            return f"{opens}{content}{closes}"

        true_part = content[: else_match.start()] + content[else_match.end():]
        else_part = else_match.group(1)
        result = true_part
        for open_, close in reversed(blocks):
            result = f"{open_}{result}{{{{else}}}}{else_part}{close}"
        return result

    def _rewrite_loop(self, match: re.Match[str], context: TransformContext) -> str:
        array = html.unescape(match.group(1))
        item_var = html.unescape(match.group(2)) if match.group(2) else None
        content = match.group(3)

        if item_var:
            opening = "{{#each " + array + " as |" + item_var + "|}}"
        else:
            opening = "{{#each " + array + "}}"
        current = item_var or "this"

        context.record_loop()
        return f"{opening}{representative_pattern(array).sub(lambda _: current, content)}{{{{/each}}}}"

    @staticmethod
    def find_unbalanced(markup: str) -> Dict[str, int]:
        """Count pseudo-tags (opening and closing) still present in ``markup``."""
        counts: Dict[str, int] = {}
        for match in _LEFTOVER_PATTERN.finditer(markup):
            counts[match.group(1)] = counts.get(match.group(1), 0) + 1
        return counts


def count_blocks(template: str) -> Tuple[int, int]:
    """Count opening and closing ``if``/``unless``/``each`` blocks in ``template``."""
    opens: List[str] = re.findall(r"\{\{#(?:if|unless|each)\b", template)
    closes: List[str] = re.findall(r"\{\{/(?:if|unless|each)\}\}", template)
    return len(opens), len(closes)


__all__ = [
    "EACH_PATTERN",
    "ELSE_PATTERN",
    "IF_PATTERN",
    "TagRewriter",
    "count_blocks",
    "decode_condition",
    "find_top_level_else",
    "lower_conjunct",
    "representative_pattern",
]
