"""Marker substitution: scalar tokens -> template value references.

Tokens are replaced longest first, so a token that is a prefix of another
(``__PROP_a__`` and ``__PROP_a__b__``) never eats part of the longer one.
"""
from __future__ import annotations

import logging
import re
from typing import Mapping, Optional

from ..exceptions import UnresolvedMarkerError
from .base import ContentTransformer, TransformContext
from .markers import DEFAULT_PREFIX, DEFAULT_SUFFIX

logger = logging.getLogger(__name__)


def value_reference(path: str) -> str:
    """Template reference for a data path."""
    return "{{" + path + "}}"


class MarkerSubstitutor(ContentTransformer):
    """Replace marker tokens with ``{{path}}`` references.

    A token whose bound path is missing is an invariant violation (tokens are
    only ever produced together with their binding). It is replaced by empty
    text and logged, or raised when ``strict`` is set. Token-shaped text left
    in the markup after substitution (a token from another pass) is treated
    the same way.
    """

    def __init__(
        self,
        *,
        prefix: str = DEFAULT_PREFIX,
        suffix: str = DEFAULT_SUFFIX,
        strict: bool = False,
    ) -> None:
        self.prefix = prefix
        self.suffix = suffix
        self.strict = strict
        self._leftover = re.compile(re.escape(prefix) + r"[0-9A-Za-z_]*" + re.escape(suffix))

    def substitute(
        self,
        markup: str,
        token_to_path: Mapping[str, Optional[str]],
        context: Optional[TransformContext] = None,
    ) -> str:
        """Replace every token in ``markup`` by the reference of its path.

        Args:
            markup: Rendered markup containing tokens
            token_to_path: Token -> bound path (None marks a missing binding)
            context: Optional context for tracking

        Returns:
            Markup with all tokens replaced

        Raises:
            UnresolvedMarkerError: In strict mode, for a token without a path
        """
        result = markup
        for token in sorted(token_to_path, key=len, reverse=True):
            if token not in result:
                continue
            path = token_to_path[token]
            if path is None:
                result = result.replace(token, self._unresolved(token, context))
                continue
            result = result.replace(token, value_reference(path))
            if context is not None:
                context.record_marker(token, resolved=True)

        return self._leftover.sub(lambda m: self._unresolved(m.group(0), context), result)

    def _unresolved(self, token: str, context: Optional[TransformContext]) -> str:
        if self.strict:
            raise UnresolvedMarkerError(token)
        logger.error("Marker token has no bound path, substituting empty text: %s", token)
        if context is not None:
            context.record_marker(token, resolved=False)
        return ""

    def transform(self, content: str, context: TransformContext) -> str:
        return self.substitute(content, context.markers.as_dict(), context)


__all__ = ["MarkerSubstitutor", "value_reference"]
