"""Marker tokens: scalar placeholders that carry a data path through rendering.

In marker-emission mode a component is rendered against a copy of its sample
data where every scalar leaf is replaced by a token such as
``__PROP_order_items_0_name__``. After rendering, each token found in the
markup is swapped for the template reference of the path it was bound to.

Arrays are reduced to a single representative element tagged with a synthetic
``[0]`` segment (``order.items.[0].name``); the iteration rewriter later turns
that representative into the loop's current item.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional, Tuple

from ..exceptions import MarkerCollisionError
from ..markup.elements import is_element

DEFAULT_PREFIX = "__PROP_"
DEFAULT_SUFFIX = "__"

# Characters that may not appear in a token body.
_UNSAFE = re.compile(r"[^0-9A-Za-z]")


def make_token(path: str, prefix: str = DEFAULT_PREFIX, suffix: str = DEFAULT_SUFFIX) -> str:
    """Derive the marker token for ``path``.

    >>> make_token("items.[0].name")
    '__PROP_items__0__name__'
    """
    return f"{prefix}{_UNSAFE.sub('_', path)}{suffix}"


def join_path(base: str, key: Any) -> str:
    return f"{base}.{key}" if base else str(key)


def item_path(base: str) -> str:
    """Path of the representative element of the array at ``base``."""
    return f"{base}.[0]" if base else "[0]"


class MarkerRegistry:
    """Token-to-path mapping accumulated during one rendering pass.

    Tokens are derived deterministically from paths, so binding is idempotent
    for the same path. Two different paths that normalize to the same token
    would be substituted with the wrong reference, so that is an error.
    """

    def __init__(self) -> None:
        self._paths: Dict[str, str] = {}
        self._tokens: Dict[str, str] = {}

    def bind(self, token: str, path: str) -> None:
        existing = self._paths.get(token)
        if existing is not None and existing != path:
            raise MarkerCollisionError(token, existing, path)
        self._paths[token] = path
        self._tokens[path] = token

    def path_for(self, token: str) -> Optional[str]:
        return self._paths.get(token)

    def token_for(self, path: str) -> Optional[str]:
        return self._tokens.get(path)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._paths)

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(self._paths.items())

    def __contains__(self, token: object) -> bool:
        return token in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def __repr__(self) -> str:
        return f"MarkerRegistry({len(self._paths)} tokens)"


class MarkerDataGenerator:
    """Replace every scalar leaf of sample data by a path-bound marker token.

    Example:
        registry = MarkerRegistry()
        generator = MarkerDataGenerator(registry)
        generator.generate({"user": {"name": "Ada"}, "items": [{"sku": 1}, {"sku": 2}]})
        # {"user": {"name": "__PROP_user_name__"},
        #  "items": [{"sku": "__PROP_items__0__sku__"}]}
    """

    def __init__(
        self,
        registry: Optional[MarkerRegistry] = None,
        *,
        prefix: str = DEFAULT_PREFIX,
        suffix: str = DEFAULT_SUFFIX,
    ) -> None:
        self.registry = registry if registry is not None else MarkerRegistry()
        self.prefix = prefix
        self.suffix = suffix

    def generate(self, sample: Any, base_path: str = "") -> Any:
        """Return a structural copy of ``sample`` with tokens at the leaves.

        Args:
            sample: Sample data (mappings, lists/tuples, scalars, elements)
            base_path: Path of ``sample`` inside the root data

        Returns:
            Marker-ized copy; elements are passed through unchanged
        """
        if is_element(sample):
            return sample
        if isinstance(sample, (list, tuple)):
            first = sample[0] if len(sample) else {}
            return [self.generate(first, item_path(base_path))]
        if isinstance(sample, Mapping):
            return {key: self.generate(value, join_path(base_path, key)) for key, value in sample.items()}

        token = make_token(base_path, self.prefix, self.suffix)
        self.registry.bind(token, base_path)
        return token


__all__ = [
    "DEFAULT_PREFIX",
    "DEFAULT_SUFFIX",
    "MarkerDataGenerator",
    "MarkerRegistry",
    "item_path",
    "join_path",
    "make_token",
]
