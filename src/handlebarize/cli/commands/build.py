"""
handlebarize build command.

SUMMARY: Compile component modules into Handlebars templates

Each component is rendered once in marker mode against its sample data, then
markers and pseudo-tags are rewritten into Handlebars syntax. Templates are
written next to their sources unless --output is given. A failing component
is reported and the remaining ones are still built.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from handlebarize.cli import (
    OutputFormatter,
    add_dry_run_flag,
    add_json_flag,
    add_repo_root_flag,
    load_config,
    setup_logging,
)
from handlebarize.core.build import TemplateBuilder
from handlebarize.core.exceptions import HandlebarizeError

SUMMARY = "Compile component modules into Handlebars templates"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument("directory", help="Directory containing component modules")
    parser.add_argument(
        "--output",
        "-o",
        help="Write templates under this directory (mirroring the source layout)",
    )
    add_dry_run_flag(parser)
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    """Build templates - delegates to TemplateBuilder."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        config = load_config(args)
        setup_logging(args, config)

        source_dir = Path(args.directory).resolve()
        output_dir = Path(args.output).resolve() if args.output else None
        report = TemplateBuilder(config).build(source_dir, output_dir, dry_run=args.dry_run)
    except (HandlebarizeError, OSError) as e:
        formatter.error(e, error_code="build_error")
        return 1

    if formatter.json_mode:
        formatter.json_output(report.to_dict())
    else:
        verb = "Would build" if report.dry_run else "Built"
        for result in report.results:
            rel = result.source.relative_to(source_dir)
            if result.status == "built":
                formatter.text(f"✓ {verb}: {rel} → {result.output}")
            elif result.status == "failed":
                formatter.text(f"✗ Error building {rel}: {result.error['message']}")
            else:
                formatter.text(f"- Skipped: {rel} (no component)")
        formatter.text(
            f"\n{len(report.built)} built, {len(report.failed)} failed, {len(report.skipped)} skipped"
        )

    return 0 if report.ok else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
