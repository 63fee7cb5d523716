"""Text/JSON output for CLI commands.

With ``--json`` a command prints exactly one JSON document on stdout (errors
go to stderr as JSON too); otherwise it prints human-readable lines.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, TextIO, Union

from ..core.exceptions import HandlebarizeError


class OutputFormatter:
    """Print command results in text or JSON mode."""

    def __init__(self, json_mode: bool = False, indent: int = 2) -> None:
        self.json_mode = json_mode
        self.indent = indent

    def _dump(self, payload: Any, stream: TextIO) -> None:
        print(json.dumps(payload, indent=self.indent, default=str), file=stream)

    def json_output(self, data: Any) -> None:
        self._dump(data, sys.stdout)

    def text(self, line: str) -> None:
        """Print ``line`` in text mode; a no-op in JSON mode."""
        if not self.json_mode:
            print(line)

    def error(self, error: Union[Exception, str], *, error_code: str = "error") -> None:
        """Report a failure on stderr.

        In JSON mode the payload is ``{"error": code, "message": ...}`` plus
        the ``context`` of a HandlebarizeError.
        """
        message = str(error)
        if not self.json_mode:
            print(f"Error: {message}", file=sys.stderr)
            return
        payload: Dict[str, Any] = {"error": error_code, "message": message}
        if isinstance(error, HandlebarizeError) and error.context:
            payload["context"] = error.context
        self._dump(payload, sys.stderr)


__all__ = ["OutputFormatter"]
