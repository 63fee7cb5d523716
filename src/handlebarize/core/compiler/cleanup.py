"""Markup cleanup and final validation transformers."""
from __future__ import annotations

import re
from typing import Iterable, List

from ..exceptions import UnbalancedPseudoTagsError
from .base import ContentTransformer, TransformContext
from .rewriter import TagRewriter


class CommentStripper(ContentTransformer):
    """Remove ordinary HTML comments.

    Vendor conditional comments (``<!--[if mso]>...<![endif]-->``) carry
    meaning for legacy mail clients and are preserved.
    """

    PATTERN = re.compile(r"<!--(?!\[)[\s\S]*?-->")

    def transform(self, content: str, context: TransformContext) -> str:
        return self.PATTERN.sub("", content)


class AttributeStripper(ContentTransformer):
    """Remove host-only attributes (``data-id="..."`` by default)."""

    def __init__(self, attributes: Iterable[str] = ("data-id",)) -> None:
        self.attributes: List[str] = list(attributes)
        names = "|".join(re.escape(name) for name in self.attributes)
        self._pattern = re.compile(rf'\s+(?:{names})="[^"]*"') if names else None

    def transform(self, content: str, context: TransformContext) -> str:
        if self._pattern is None:
            return content
        return self._pattern.sub("", content)


class PseudoTagValidator(ContentTransformer):
    """Final step: fail when pseudo-tags survived rewriting.

    Leftovers mean an opening tag without a matching close (or a stray
    <hb-else>); the artifact cannot be turned into a balanced template.
    """

    def transform(self, content: str, context: TransformContext) -> str:
        remaining = TagRewriter.find_unbalanced(content)
        if remaining:
            where = f" in {context.source}" if context.source is not None else ""
            detail = ", ".join(f"{tag} x{count}" for tag, count in sorted(remaining.items()))
            raise UnbalancedPseudoTagsError(
                f"Unbalanced pseudo-tags{where}: {detail}",
                remaining=remaining,
                context={"source": str(context.source) if context.source else None},
            )
        return content


__all__ = ["AttributeStripper", "CommentStripper", "PseudoTagValidator"]
