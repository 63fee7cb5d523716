"""
handlebarize rewrite command.

SUMMARY: Rewrite instrumented markup into a Handlebars template

Reads markup containing marker tokens and <hb-if>/<hb-else>/<hb-each>
pseudo-tags (from a file or stdin) and prints the compiled template. Marker
bindings (token -> data path) can be supplied as a JSON object with --markers.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from handlebarize.cli import OutputFormatter, add_json_flag, add_repo_root_flag, load_config, setup_logging
from handlebarize.core.compiler import MarkerRegistry, TemplateCompiler, TransformContext
from handlebarize.core.exceptions import HandlebarizeError
from handlebarize.core.utils.io import read_json, read_text

logger = logging.getLogger(__name__)

SUMMARY = "Rewrite instrumented markup into a Handlebars template"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument("file", nargs="?", help="Markup file (default: read stdin)")
    parser.add_argument("--markers", help="JSON file mapping marker tokens to data paths")
    add_json_flag(parser)
    add_repo_root_flag(parser)


def _load_registry(path: str | None) -> MarkerRegistry:
    registry = MarkerRegistry()
    if not path:
        return registry
    bindings = read_json(Path(path))
    if not isinstance(bindings, dict):
        raise HandlebarizeError(f"Marker file {path} must contain a JSON object", context={"path": path})
    for token, bound_path in bindings.items():
        if bound_path is None:
            # Left unbound: the token is substituted with empty text.
            logger.debug("Marker %s has no data path", token)
            continue
        registry.bind(str(token), str(bound_path))
    return registry


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        config = load_config(args)
        setup_logging(args, config)

        markup = read_text(Path(args.file)) if args.file else sys.stdin.read()
        context = TransformContext(markers=_load_registry(args.markers), source=Path(args.file) if args.file else None)
        template = TemplateCompiler.from_config(config).compile_markup(markup, context)
    except (HandlebarizeError, OSError, ValueError) as e:
        formatter.error(e, error_code="rewrite_error")
        return 1

    if formatter.json_mode:
        formatter.json_output({"template": template, "summary": context.summary()})
    else:
        sys.stdout.write(template)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
