import os
import sys
from pathlib import Path
from typing import Callable

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'handlebarize'
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from handlebarize.core.stdlib_logging import reset_logging_for_tests  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch):
    """Clear the build flag and config overrides so tests start from defaults."""
    for key in list(os.environ):
        if key.startswith("HANDLEBARIZE_") or key == "IS_HANDLEBARS_BUILD":
            monkeypatch.delenv(key, raising=False)
    yield
    reset_logging_for_tests()


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a UTF-8 file relative to tmp_path, creating parent directories."""

    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


WELCOME_COMPONENT = '''\
from handlebarize.components import Else, If, Provider, Val, component, h


@component(preview_props={"user": {"name": "Ada", "vip": True}})
def Welcome(user):
    return Provider(
        {"user": user},
        If("user.vip", h("b", None, "VIP"), Else("Member")),
        h("p", None, Val("user.name", user["name"])),
    )
'''


@pytest.fixture
def welcome_source() -> str:
    """Source of a small component module used by driver and CLI tests."""
    return WELCOME_COMPONENT
