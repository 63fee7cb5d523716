"""Base class for markup transformers in the template compiler.

The compiler runs rendered, instrumented markup through a pipeline of
transformers. Each transformer handles one category of rewriting.

Transformation Order (5 steps):
1. COMMENTS    - strip ordinary HTML comments, keep <!--[if ...]> ones
2. ATTRIBUTES  - strip host-only attributes (data-id)
3. MARKERS     - __PROP_path__ tokens -> {{path}}
4. PSEUDO-TAGS - <hb-if>/<hb-else>/<hb-each> -> {{#if}}/{{else}}/{{#each}}
5. VALIDATION  - fail on pseudo-tags that could not be rewritten
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from .markers import MarkerRegistry

logger = logging.getLogger(__name__)


@dataclass
class TransformContext:
    """Context provided to transformers while compiling one artifact.

    Owns the token-to-path registry of the rendering pass and tracks what
    each step did for reporting. One context per artifact; never shared.
    """

    markers: MarkerRegistry = field(default_factory=MarkerRegistry)
    source: Optional[Path] = None

    # Tracking for reports
    markers_substituted: int = 0
    markers_unresolved: Set[str] = field(default_factory=set)
    conditionals_rewritten: int = 0
    conditionals_hidden: int = 0
    loops_rewritten: int = 0
    warnings: List[str] = field(default_factory=list)

    def record_marker(self, token: str, resolved: bool) -> None:
        """Record a marker substitution result."""
        if resolved:
            self.markers_substituted += 1
        else:
            self.markers_unresolved.add(token)

    def record_conditional(self, hidden: bool = False) -> None:
        """Record that a conditional pseudo-tag was rewritten."""
        self.conditionals_rewritten += 1
        if hidden:
            self.conditionals_hidden += 1

    def record_loop(self) -> None:
        """Record that an iteration pseudo-tag was rewritten."""
        self.loops_rewritten += 1

    def warn(self, message: str) -> None:
        """Record a non-fatal problem and log it."""
        self.warnings.append(message)
        if self.source is not None:
            logger.warning("%s: %s", self.source, message)
        else:
            logger.warning("%s", message)

    def summary(self) -> Dict[str, Any]:
        """Return the tracked counters as a JSON-friendly mapping."""
        return {
            "markers": len(self.markers),
            "markers_substituted": self.markers_substituted,
            "markers_unresolved": sorted(self.markers_unresolved),
            "conditionals_rewritten": self.conditionals_rewritten,
            "conditionals_hidden": self.conditionals_hidden,
            "loops_rewritten": self.loops_rewritten,
            "warnings": list(self.warnings),
        }


class ContentTransformer(ABC):
    """Abstract base class for markup transformers.

    Transformers are stateless with respect to artifacts and receive per-artifact
    state through the transform() method.

    Example:
        class CommentStripper(ContentTransformer):
            def transform(self, content: str, context: TransformContext) -> str:
                return self.PATTERN.sub("", content)
    """

    @abstractmethod
    def transform(self, content: str, context: TransformContext) -> str:
        """Transform content using this transformer's rules.

        Args:
            content: Input markup
            context: TransformContext for the artifact

        Returns:
            Transformed markup
        """
        ...

    def get_name(self) -> str:
        """Get transformer name for logging/debugging."""
        return self.__class__.__name__


class TransformerPipeline:
    """Execute a sequence of transformers on markup.

    Example:
        pipeline = TransformerPipeline([
            MarkerSubstitutor(),
            TagRewriter(),
            PseudoTagValidator(),
        ])
        result = pipeline.execute(markup, context)
    """

    def __init__(self, transformers: List[ContentTransformer]) -> None:
        self.transformers = transformers

    def execute(self, content: str, context: TransformContext) -> str:
        """Execute all transformers in sequence."""
        result = content
        for transformer in self.transformers:
            logger.debug("Running %s (%d chars)", transformer.get_name(), len(result))
            result = transformer.transform(result, context)
        return result


__all__ = ["ContentTransformer", "TransformContext", "TransformerPipeline"]
