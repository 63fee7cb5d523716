"""Batch build results."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

BUILT = "built"
FAILED = "failed"
SKIPPED = "skipped"


@dataclass
class ArtifactResult:
    """Outcome for one source file."""

    source: Path
    status: str
    output: Optional[Path] = None
    error: Optional[Dict[str, Any]] = None
    summary: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"source": str(self.source), "status": self.status}
        if self.output is not None:
            data["output"] = str(self.output)
        if self.error is not None:
            data["error"] = self.error
        if self.summary:
            data["summary"] = self.summary
        return data


@dataclass
class BuildReport:
    """Results of one batch; a failed artifact never stops the batch."""

    results: List[ArtifactResult] = field(default_factory=list)
    dry_run: bool = False

    def add(self, result: ArtifactResult) -> None:
        self.results.append(result)

    def _with_status(self, status: str) -> List[ArtifactResult]:
        return [r for r in self.results if r.status == status]

    @property
    def built(self) -> List[ArtifactResult]:
        return self._with_status(BUILT)

    @property
    def failed(self) -> List[ArtifactResult]:
        return self._with_status(FAILED)

    @property
    def skipped(self) -> List[ArtifactResult]:
        return self._with_status(SKIPPED)

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dry_run": self.dry_run,
            "built": len(self.built),
            "failed": len(self.failed),
            "skipped": len(self.skipped),
            "artifacts": [r.to_dict() for r in self.results],
        }


__all__ = ["ArtifactResult", "BUILT", "BuildReport", "FAILED", "SKIPPED"]
