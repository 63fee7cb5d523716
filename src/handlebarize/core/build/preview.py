"""Batch preview build: component modules -> static .html files."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from ..compiler.pipeline import TemplateCompiler
from ..exceptions import HandlebarizeError
from ..markup.elements import get_preview_props
from ..utils.io import read_json, write_text
from .builder import error_payload
from .discovery import DEFAULT_SKIP_PREFIXES, DEFAULT_SUFFIXES, find_component_files
from .loader import DEFAULT_COMPONENT_ATTRIBUTES, load_component_module, select_component
from .report import BUILT, FAILED, SKIPPED, ArtifactResult, BuildReport

logger = logging.getLogger(__name__)


class PreviewBuilder:
    """Render every component under a directory as preview HTML.

    Data for ``welcome.py`` comes from a sibling ``welcome.json`` when present,
    otherwise from the component's ``preview_props`` (empty when it has none).
    """

    def __init__(self, config: Optional[Mapping[str, Any]] = None, compiler: Optional[TemplateCompiler] = None) -> None:
        config = config or {}
        build_cfg = config.get("build") or {}
        preview_cfg = config.get("preview") or {}
        self.compiler = compiler if compiler is not None else TemplateCompiler.from_config(config)
        self.suffixes = tuple(build_cfg.get("source_suffixes") or DEFAULT_SUFFIXES)
        self.skip_prefixes = tuple(build_cfg.get("skip_prefixes", DEFAULT_SKIP_PREFIXES))
        self.component_attributes = tuple(build_cfg.get("component_attributes") or DEFAULT_COMPONENT_ATTRIBUTES)
        self.output_suffix = preview_cfg.get("output_suffix", ".html")
        self.data_suffix = preview_cfg.get("data_suffix", ".json")

    def load_data(self, path: Path, component: Any) -> Mapping[str, Any]:
        data_file = Path(path).with_suffix(self.data_suffix)
        if data_file.is_file():
            data = read_json(data_file)
            if not isinstance(data, Mapping):
                raise HandlebarizeError(
                    f"Preview data in {data_file} must be a JSON object",
                    context={"path": str(data_file)},
                )
            logger.debug("Using preview data from %s", data_file)
            return data
        return get_preview_props(component)

    def build(self, source_dir: Path, output_dir: Path) -> BuildReport:
        """Render all components under ``source_dir`` into ``output_dir``."""
        source_dir = Path(source_dir)
        output_dir = Path(output_dir)
        report = BuildReport()
        files = find_component_files(source_dir, self.suffixes, self.skip_prefixes)
        logger.info("Rendering %d preview(s) from %s into %s", len(files), source_dir, output_dir)
        for path in files:
            report.add(self.build_one(path, source_dir, output_dir))
        return report

    def build_one(self, path: Path, source_dir: Path, output_dir: Path) -> ArtifactResult:
        try:
            module = load_component_module(path)
            component = select_component(module, path, self.component_attributes)
            if component is None:
                logger.warning("%s exposes no component; skipped", path)
                return ArtifactResult(source=path, status=SKIPPED)

            html = self.compiler.preview(component, self.load_data(path, component))
            target = output_dir / Path(path).relative_to(source_dir).with_suffix(self.output_suffix)
            write_text(target, html)
            logger.info("Generated %s", target)
            return ArtifactResult(source=path, status=BUILT, output=target)
        except Exception as exc:
            logger.error("Error rendering preview for %s: %s", path, exc, exc_info=not isinstance(exc, HandlebarizeError))
            return ArtifactResult(source=path, status=FAILED, error=error_payload(exc))


__all__ = ["PreviewBuilder"]
