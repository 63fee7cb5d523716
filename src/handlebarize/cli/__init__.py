"""
handlebarize command-line interface.

Commands live in ``commands/`` (top level) and in group packages such as
``config/``; ``_dispatcher`` finds and registers them. Shared pieces:
- _output: text/JSON output
- _args: common flags
- _utils: repo root, config loading, logging setup
"""
from ._args import add_dry_run_flag, add_json_flag, add_repo_root_flag, add_verbose_flag
from ._output import OutputFormatter
from ._utils import get_repo_root, load_config, setup_logging

__all__ = [
    "OutputFormatter",
    "add_dry_run_flag",
    "add_json_flag",
    "add_repo_root_flag",
    "add_verbose_flag",
    "get_repo_root",
    "load_config",
    "setup_logging",
]
