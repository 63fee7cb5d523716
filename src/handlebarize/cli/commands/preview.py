"""
handlebarize preview command.

SUMMARY: Render component modules as static HTML previews

Data for each component comes from a sibling .json file when present,
otherwise from the component's preview_props.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from handlebarize.cli import OutputFormatter, add_json_flag, add_repo_root_flag, load_config, setup_logging
from handlebarize.core.build import PreviewBuilder
from handlebarize.core.exceptions import HandlebarizeError

SUMMARY = "Render component modules as static HTML previews"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument("directory", help="Directory containing component modules")
    parser.add_argument(
        "output_dir",
        nargs="?",
        help="Directory for generated .html files (default: preview.output_dir, relative to cwd)",
    )
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        config = load_config(args)
        setup_logging(args, config)

        source_dir = Path(args.directory).resolve()
        output_dir = Path(args.output_dir or config["preview"]["output_dir"]).resolve()
        report = PreviewBuilder(config).build(source_dir, output_dir)
    except (HandlebarizeError, OSError) as e:
        formatter.error(e, error_code="preview_error")
        return 1

    if formatter.json_mode:
        formatter.json_output(report.to_dict())
    else:
        for result in report.results:
            rel = result.source.relative_to(source_dir)
            if result.status == "built":
                formatter.text(f"✓ Generated: {result.output}")
            elif result.status == "failed":
                formatter.text(f"✗ Error processing {rel}: {result.error['message']}")
        formatter.text(f"\nGenerated {len(report.built)} preview file(s) in {output_dir}")

    return 0 if report.ok else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
