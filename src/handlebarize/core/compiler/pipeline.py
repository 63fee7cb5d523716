"""Template compilation pipeline.

``TemplateCompiler`` ties the stages together for one component:

    sample data --MarkerDataGenerator--> marker props
    marker props --DualModeRenderer(MARKERS)--> instrumented markup
    instrumented markup --TransformerPipeline--> Handlebars template

and renders previews with ``DualModeRenderer(PREVIEW)``. Every compile call
owns a fresh :class:`TransformContext` (and so a fresh marker registry); no
state is shared between artifacts.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional

from ..markup.elements import get_preview_props
from .base import TransformContext, TransformerPipeline
from .cleanup import AttributeStripper, CommentStripper, PseudoTagValidator
from .markers import DEFAULT_PREFIX, DEFAULT_SUFFIX, MarkerDataGenerator, MarkerRegistry
from .renderer import DualModeRenderer, RenderContext, RenderMode
from .rewriter import TagRewriter
from .substitution import MarkerSubstitutor

logger = logging.getLogger(__name__)


@dataclass
class CompiledTemplate:
    """Result of compiling one component."""

    text: str
    markers: Dict[str, str] = field(default_factory=dict)
    summary: Dict[str, Any] = field(default_factory=dict)
    source: Optional[Path] = None


class TemplateCompiler:
    """Compile components into Handlebars templates and render previews."""

    def __init__(
        self,
        *,
        prefix: str = DEFAULT_PREFIX,
        suffix: str = DEFAULT_SUFFIX,
        strict: bool = False,
        strip_comments: bool = True,
        strip_attributes: Iterable[str] = ("data-id",),
    ) -> None:
        self.prefix = prefix
        self.suffix = suffix
        self.strict = strict
        self.strip_comments = strip_comments
        self.strip_attributes = list(strip_attributes)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "TemplateCompiler":
        """Build a compiler from the ``markers`` and ``cleanup`` config sections."""
        markers = config.get("markers") or {}
        cleanup = config.get("cleanup") or {}
        return cls(
            prefix=markers.get("prefix", DEFAULT_PREFIX),
            suffix=markers.get("suffix", DEFAULT_SUFFIX),
            strict=bool(markers.get("strict", False)),
            strip_comments=bool(cleanup.get("strip_comments", True)),
            strip_attributes=cleanup.get("strip_attributes") or [],
        )

    def build_pipeline(self) -> TransformerPipeline:
        """Transformers applied to instrumented markup, in order."""
        transformers = []
        if self.strip_comments:
            transformers.append(CommentStripper())
        if self.strip_attributes:
            transformers.append(AttributeStripper(self.strip_attributes))
        transformers.extend(
            [
                MarkerSubstitutor(prefix=self.prefix, suffix=self.suffix, strict=self.strict),
                TagRewriter(),
                PseudoTagValidator(),
            ]
        )
        return TransformerPipeline(transformers)

    def render_markers(
        self,
        component: Callable[..., Any],
        sample: Optional[Mapping[str, Any]],
        context: TransformContext,
    ) -> str:
        """Render ``component`` in marker mode, binding tokens into ``context.markers``."""
        generator = MarkerDataGenerator(context.markers, prefix=self.prefix, suffix=self.suffix)
        props = generator.generate(dict(sample or {}))
        renderer = DualModeRenderer(RenderMode.MARKERS)
        return renderer.render_component(component, props, RenderContext(markers=context.markers))

    def compile_markup(self, markup: str, context: Optional[TransformContext] = None) -> str:
        """Run the transformer pipeline on already-rendered instrumented markup."""
        ctx = context if context is not None else TransformContext()
        return self.build_pipeline().execute(markup, ctx)

    def compile(
        self,
        component: Callable[..., Any],
        sample: Optional[Mapping[str, Any]] = None,
        *,
        source: Optional[Path] = None,
    ) -> CompiledTemplate:
        """Compile one component into template text.

        Args:
            component: Component callable
            sample: Sample data; defaults to the component's ``preview_props``
            source: Source file, used in log messages and errors

        Raises:
            UnbalancedPseudoTagsError: If pseudo-tags could not all be rewritten
            MarkerCollisionError: If two data paths map to the same token
        """
        context = TransformContext(markers=MarkerRegistry(), source=source)
        if sample is None:
            sample = get_preview_props(component)
        markup = self.render_markers(component, sample, context)
        logger.debug("Rendered %d chars of instrumented markup with %d markers", len(markup), len(context.markers))
        text = self.compile_markup(markup, context)
        return CompiledTemplate(text=text, markers=context.markers.as_dict(), summary=context.summary(), source=source)

    def preview(self, component: Callable[..., Any], data: Optional[Mapping[str, Any]] = None) -> str:
        """Render ``component`` as final HTML against ``data`` (default: its preview_props)."""
        props = dict(data) if data is not None else get_preview_props(component)
        renderer = DualModeRenderer(RenderMode.PREVIEW)
        return renderer.render_component(component, props, RenderContext())


__all__ = ["CompiledTemplate", "TemplateCompiler"]
