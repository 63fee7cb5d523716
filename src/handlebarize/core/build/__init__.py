"""Build driver: discover component modules, compile templates, render previews."""
from __future__ import annotations

from .builder import TemplateBuilder
from .discovery import find_component_files
from .loader import build_mode, load_component_module, select_component
from .preview import PreviewBuilder
from .report import ArtifactResult, BuildReport

__all__ = [
    "ArtifactResult",
    "BuildReport",
    "PreviewBuilder",
    "TemplateBuilder",
    "build_mode",
    "find_component_files",
    "load_component_module",
    "select_component",
]
