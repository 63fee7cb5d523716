"""
Command-line entry point for handlebarize.

Commands are discovered, not listed: every public module in ``commands/``
becomes a top-level command (``handlebarize build``) and every public module
in a sibling package such as ``config/`` becomes a grouped command
(``handlebarize config show``). A command module provides:

- ``SUMMARY``: one-line help text
- ``register_args(parser)``: adds its arguments
- ``main(args) -> int``: runs it and returns the exit code
"""

from __future__ import annotations

import argparse
import importlib
import sys
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import ModuleType
from typing import Callable, Dict, Optional

from ._args import add_verbose_flag

PACKAGE = "handlebarize.cli"
CLI_DIR = Path(__file__).parent
ROOT_COMMANDS = "commands"


@dataclass(frozen=True)
class Command:
    name: str
    summary: str
    register_args: Optional[Callable[[argparse.ArgumentParser], None]]
    run: Optional[Callable[[argparse.Namespace], int]]

    @classmethod
    def from_module(cls, name: str, module: ModuleType) -> "Command":
        return cls(
            name=name,
            summary=getattr(module, "SUMMARY", name),
            register_args=getattr(module, "register_args", None),
            run=getattr(module, "main", None),
        )


def _is_public(path: Path) -> bool:
    return not path.name.startswith(("_", "."))


def _load_commands(directory: Path, package: str) -> Dict[str, Command]:
    commands: Dict[str, Command] = {}
    for path in sorted(directory.glob("*.py")):
        if not _is_public(path):
            continue
        try:
            module = importlib.import_module(f"{package}.{path.stem}")
        except ImportError as exc:
            print(f"Warning: skipping command {path.stem!r}: {exc}", file=sys.stderr)
            continue
        commands[path.stem] = Command.from_module(path.stem, module)
    return commands


@lru_cache(maxsize=1)
def discover_root_commands() -> Dict[str, Command]:
    """Top-level commands from ``cli/commands/``."""
    return _load_commands(CLI_DIR / ROOT_COMMANDS, f"{PACKAGE}.{ROOT_COMMANDS}")


@lru_cache(maxsize=1)
def discover_groups() -> Dict[str, Dict[str, Command]]:
    """Grouped commands, keyed by group package name (e.g. ``config``)."""
    groups: Dict[str, Dict[str, Command]] = {}
    for directory in sorted(CLI_DIR.iterdir()):
        if not directory.is_dir() or directory.name == ROOT_COMMANDS or not _is_public(directory):
            continue
        commands = _load_commands(directory, f"{PACKAGE}.{directory.name}")
        if commands:
            groups[directory.name] = commands
    return groups


def _add_command(subparsers: argparse._SubParsersAction, command: Command) -> argparse.ArgumentParser:
    name = command.name.replace("_", "-")
    aliases = [command.name] if name != command.name else []
    parser = subparsers.add_parser(name, aliases=aliases, help=command.summary)
    if command.register_args is not None:
        command.register_args(parser)
    if command.run is not None:
        parser.set_defaults(_run=command.run)
    return parser


def _group_help(group: str) -> str:
    doc = importlib.import_module(f"{PACKAGE}.{group}").__doc__ or ""
    lines = doc.strip().splitlines()
    return lines[0] if lines else f"{group.title()} commands"


def build_parser() -> argparse.ArgumentParser:
    """Assemble the parser from discovered commands."""
    from handlebarize import __version__

    parser = argparse.ArgumentParser(
        prog="handlebarize",
        description="Render component trees as HTML previews or compile them into Handlebars templates",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    add_verbose_flag(parser)

    subparsers = parser.add_subparsers(dest="command", title="commands", metavar="<command>")
    for command in discover_root_commands().values():
        _add_command(subparsers, command)

    for group, commands in discover_groups().items():
        group_parser = subparsers.add_parser(group, help=_group_help(group))
        group_parser.set_defaults(_group_parser=group_parser)
        group_subparsers = group_parser.add_subparsers(dest="subcommand", title=f"{group} commands", metavar="<command>")
        for command in commands.values():
            _add_command(group_subparsers, command)

    return parser


def main(argv: Optional[list] = None) -> int:
    """Run the CLI and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    if not args.command:
        parser.print_help()
        return 0

    run = getattr(args, "_run", None)
    if run is None:
        # A group was named without one of its commands.
        args._group_parser.print_help()
        return 1

    try:
        return int(run(args) or 0)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
