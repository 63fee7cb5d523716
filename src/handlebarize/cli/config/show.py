"""
handlebarize config show command.

SUMMARY: Show the effective configuration

Prints the configuration after merging bundled defaults, the project's
handlebarize.yaml and HANDLEBARIZE_* environment overrides, optionally
narrowed to one dotted key.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, List

import yaml

from handlebarize.cli import OutputFormatter, add_json_flag, add_repo_root_flag, get_repo_root
from handlebarize.core.config import ConfigManager
from handlebarize.core.exceptions import HandlebarizeError

SUMMARY = "Show the effective configuration"

_NOT_FOUND = object()


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument("key", nargs="?", help="Dotted key to show (e.g. 'build.output_suffix')")
    parser.add_argument(
        "--format",
        choices=["table", "yaml", "json"],
        default="table",
        help="Output format (default: table)",
    )
    add_json_flag(parser)
    add_repo_root_flag(parser)


def _nested(key: str, value: Any) -> Any:
    """``("a.b", 1)`` -> ``{"a": {"b": 1}}``."""
    for part in reversed([p for p in key.split(".") if p]):
        value = {part: value}
    return value


def _table_lines(value: Any, depth: int) -> List[str]:
    pad = "  " * depth
    if not isinstance(value, dict):
        return [f"{pad}{_scalar(value)}"]
    lines: List[str] = []
    for name, item in value.items():
        if isinstance(item, dict):
            lines.append(f"{pad}{name}:")
            lines.extend(_table_lines(item, depth + 1))
        else:
            lines.append(f"{pad}{name}: {_scalar(item)}")
    return lines


def _scalar(value: Any) -> str:
    if isinstance(value, list):
        return "[" + ", ".join(str(v) for v in value) + "]"
    return str(value)


def main(args: argparse.Namespace) -> int:
    json_mode = bool(getattr(args, "json", False))
    formatter = OutputFormatter(json_mode=json_mode)
    fmt = "json" if json_mode else args.format

    try:
        manager = ConfigManager(get_repo_root(args))
        config = manager.load_config(validate=True)
    except HandlebarizeError as e:
        formatter.error(e, error_code="config_show_error")
        return 1

    if args.key:
        value = manager.get(args.key, _NOT_FOUND)
        if value is _NOT_FOUND:
            formatter.error(f"Key not found: {args.key}", error_code="key_not_found")
            return 1
        flat: Any = {args.key: value}
        tree: Any = _nested(args.key, value)
    else:
        flat = tree = config

    if fmt == "json":
        formatter.json_output(flat)
    elif fmt == "yaml":
        print(yaml.safe_dump(tree, default_flow_style=False, sort_keys=True, allow_unicode=True).rstrip())
    elif args.key:
        print(f"{args.key}:")
        print("\n".join(_table_lines(value, 1)))
    else:
        for section in sorted(config):
            print(f"[{section}]")
            print("\n".join(_table_lines(config[section], 1)))
            print()
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
