"""Batch template build: component modules -> .handlebars files."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from ..compiler.pipeline import TemplateCompiler
from ..compiler.renderer import MODE_ENV_VAR
from ..exceptions import HandlebarizeError
from ..utils.io import write_text
from .discovery import DEFAULT_SKIP_PREFIXES, DEFAULT_SUFFIXES, find_component_files
from .loader import DEFAULT_COMPONENT_ATTRIBUTES, build_mode, load_component_module, select_component
from .report import BUILT, FAILED, SKIPPED, ArtifactResult, BuildReport

logger = logging.getLogger(__name__)


def error_payload(exc: BaseException) -> dict:
    if isinstance(exc, HandlebarizeError):
        return exc.to_json_error()
    return {"message": str(exc), "code": exc.__class__.__name__, "context": {}}


class TemplateBuilder:
    """Compile every component under a directory.

    Example:
        builder = TemplateBuilder(config)
        report = builder.build(Path("emails"))
        for result in report.failed:
            print(result.source, result.error["message"])
    """

    def __init__(self, config: Optional[Mapping[str, Any]] = None, compiler: Optional[TemplateCompiler] = None) -> None:
        config = config or {}
        build_cfg = config.get("build") or {}
        self.compiler = compiler if compiler is not None else TemplateCompiler.from_config(config)
        self.suffixes = tuple(build_cfg.get("source_suffixes") or DEFAULT_SUFFIXES)
        self.skip_prefixes = tuple(build_cfg.get("skip_prefixes", DEFAULT_SKIP_PREFIXES))
        self.output_suffix = build_cfg.get("output_suffix", ".handlebars")
        self.component_attributes = tuple(build_cfg.get("component_attributes") or DEFAULT_COMPONENT_ATTRIBUTES)

    def output_path(self, source: Path, source_dir: Path, output_dir: Optional[Path] = None) -> Path:
        relative = Path(source).relative_to(source_dir)
        return Path(output_dir or source_dir) / relative.with_suffix(self.output_suffix)

    def build(self, source_dir: Path, output_dir: Optional[Path] = None, *, dry_run: bool = False) -> BuildReport:
        """Build all components under ``source_dir``.

        Templates are written next to their sources, or mirrored under
        ``output_dir`` when given. The build flag is set for the whole batch.
        """
        source_dir = Path(source_dir)
        report = BuildReport(dry_run=dry_run)
        files = find_component_files(source_dir, self.suffixes, self.skip_prefixes)
        logger.info("Building %d component file(s) under %s", len(files), source_dir)

        with build_mode(MODE_ENV_VAR):
            for path in files:
                report.add(self.build_one(path, source_dir, output_dir, dry_run=dry_run))
        return report

    def build_one(
        self,
        path: Path,
        source_dir: Path,
        output_dir: Optional[Path] = None,
        *,
        dry_run: bool = False,
    ) -> ArtifactResult:
        """Build one file; any error is recorded in the result, not raised."""
        try:
            module = load_component_module(path)
            component = select_component(module, path, self.component_attributes)
            if component is None:
                logger.warning("%s exposes no component; skipped", path)
                return ArtifactResult(source=path, status=SKIPPED)

            compiled = self.compiler.compile(component, source=path)
            target = self.output_path(path, source_dir, output_dir)
            if not dry_run:
                write_text(target, compiled.text)
            logger.info("Built %s -> %s", path, target)
            return ArtifactResult(source=path, status=BUILT, output=target, summary=compiled.summary)
        except Exception as exc:
            logger.error("Error building %s: %s", path, exc, exc_info=not isinstance(exc, HandlebarizeError))
            return ArtifactResult(source=path, status=FAILED, error=error_payload(exc))


__all__ = ["TemplateBuilder", "error_payload"]
