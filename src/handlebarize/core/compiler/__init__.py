"""Template compiler: dual-mode rendering and pseudo-tag rewriting.

Key components:
- paths.resolve: path expressions over nested data
- ConditionEvaluator: restricted boolean conditions for previews
- MarkerDataGenerator: sample data -> path-bound marker tokens
- DualModeRenderer: PREVIEW or MARKERS rendering of component trees
- MarkerSubstitutor / TagRewriter: instrumented markup -> Handlebars
- TemplateCompiler: the whole pipeline for one component
"""
from __future__ import annotations

from .base import ContentTransformer, TransformContext, TransformerPipeline
from .cleanup import AttributeStripper, CommentStripper, PseudoTagValidator
from .conditions import ConditionEvaluator, evaluate_condition, is_truthy, validate_condition
from .helpers import Each, Else, HelperKind, If, Provider, Val
from .markers import MarkerDataGenerator, MarkerRegistry, make_token
from .paths import ABSENT, is_absent, parse_path, resolve
from .pipeline import CompiledTemplate, TemplateCompiler
from .renderer import DualModeRenderer, LoopScope, RenderContext, RenderMode
from .rewriter import TagRewriter, count_blocks
from .substitution import MarkerSubstitutor

__all__ = [
    "ABSENT",
    "AttributeStripper",
    "CommentStripper",
    "CompiledTemplate",
    "ConditionEvaluator",
    "ContentTransformer",
    "DualModeRenderer",
    "Each",
    "Else",
    "HelperKind",
    "If",
    "LoopScope",
    "MarkerDataGenerator",
    "MarkerRegistry",
    "MarkerSubstitutor",
    "Provider",
    "PseudoTagValidator",
    "RenderContext",
    "RenderMode",
    "TagRewriter",
    "TemplateCompiler",
    "TransformContext",
    "TransformerPipeline",
    "Val",
    "count_blocks",
    "evaluate_condition",
    "is_absent",
    "is_truthy",
    "make_token",
    "parse_path",
    "resolve",
    "validate_condition",
]
