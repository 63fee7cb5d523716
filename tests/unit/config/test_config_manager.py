"""Tests for ConfigManager: bundled defaults, project file, env overrides, schema."""
from __future__ import annotations

from pathlib import Path

import pytest

from handlebarize.core.config import ConfigManager
from handlebarize.core.exceptions import ConfigError


@pytest.fixture
def project(tmp_path: Path) -> Path:
    return tmp_path


def manager(root: Path, **environ: str) -> ConfigManager:
    return ConfigManager(repo_root=root, environ=environ)


# =============================================================================
# Layering
# =============================================================================


class TestLayers:
    """Defaults, then the project file, then environment overrides."""

    def test_defaults(self, project: Path) -> None:
        cfg = manager(project).load_config()
        assert cfg["build"]["output_suffix"] == ".handlebars"
        assert cfg["markers"] == {"prefix": "__PROP_", "suffix": "__", "strict": False}
        assert cfg["preview"]["output_dir"] == "previews"

    def test_project_file_overrides_defaults(self, project: Path, write_file) -> None:
        write_file("handlebarize.yaml", "build:\n  output_suffix: .hbs\n")
        cfg = manager(project).load_config()
        assert cfg["build"]["output_suffix"] == ".hbs"
        assert cfg["build"]["source_suffixes"] == [".py"]

    def test_dot_directory_config(self, project: Path, write_file) -> None:
        write_file(".handlebarize/config.yaml", "preview:\n  output_dir: out\n")
        assert manager(project).get("preview.output_dir") == "out"

    def test_list_append_marker(self, project: Path, write_file) -> None:
        write_file("handlebarize.yaml", "cleanup:\n  strip_attributes: ['+', data-test]\n")
        assert manager(project).get("cleanup.strip_attributes") == ["data-id", "data-test"]

    def test_env_overrides_win(self, project: Path, write_file) -> None:
        write_file("handlebarize.yaml", "markers:\n  strict: false\n")
        mgr = manager(project, HANDLEBARIZE_MARKERS__STRICT="true", HANDLEBARIZE_LOGGING__LEVEL="DEBUG")
        cfg = mgr.load_config()
        assert cfg["markers"]["strict"] is True
        assert cfg["logging"]["level"] == "DEBUG"

    def test_project_root_env_is_not_an_override(self, project: Path) -> None:
        cfg = manager(project, HANDLEBARIZE_PROJECT_ROOT=str(project)).load_config()
        assert "project_root" not in cfg

    def test_get_with_default(self, project: Path) -> None:
        mgr = manager(project)
        assert mgr.get("build.output_suffix") == ".handlebars"
        assert mgr.get("nope.missing", "fallback") == "fallback"


class TestEnvCoercion:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("true", True),
            ("False", False),
            ("42", 42),
            ("-1", -1),
            ("1.5", 1.5),
            ('["a", "b"]', ["a", "b"]),
            ('{"k": 1}', {"k": 1}),
            (" text ", "text"),
            ("[not json", "[not json"),
        ],
    )
    def test_coerce(self, project: Path, raw: str, expected) -> None:
        assert manager(project)._coerce_type(raw) == expected

    def test_malformed_key(self, project: Path) -> None:
        with pytest.raises(ConfigError, match="Malformed"):
            manager(project, HANDLEBARIZE_BUILD____X="1").load_config()


# =============================================================================
# Validation
# =============================================================================


class TestValidation:
    def test_unknown_key_rejected(self, project: Path, write_file) -> None:
        write_file("handlebarize.yaml", "build:\n  typo: 1\n")
        with pytest.raises(ConfigError) as excinfo:
            manager(project).load_config()
        assert "build" in str(excinfo.value)
        assert excinfo.value.context["errors"]

    def test_wrong_type_rejected(self, project: Path) -> None:
        with pytest.raises(ConfigError, match="markers.strict"):
            manager(project, HANDLEBARIZE_MARKERS__STRICT="maybe").load_config()

    def test_unvalidated_load(self, project: Path, write_file) -> None:
        write_file("handlebarize.yaml", "build:\n  typo: 1\n")
        assert manager(project).get_all()["build"]["typo"] == 1

    def test_non_mapping_file(self, project: Path, write_file) -> None:
        write_file("handlebarize.yaml", "- a\n- b\n")
        with pytest.raises(ConfigError, match="must contain a mapping"):
            manager(project).load_config()

    def test_invalid_yaml(self, project: Path, write_file) -> None:
        write_file("handlebarize.yaml", "build: [unclosed\n")
        with pytest.raises(ConfigError, match="Cannot read config file"):
            manager(project).load_config()
