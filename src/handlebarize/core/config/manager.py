"""
handlebarize configuration management (YAML layers + env overrides + schema).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import jsonschema
from jsonschema import Draft202012Validator

from ..compiler.paths import ABSENT, resolve
from ..exceptions import ConfigError
from ..utils.io import read_yaml
from ..utils.merge import deep_merge
from ..utils.paths import resolve_project_root
from ...data import get_data_path, read_yaml as read_data_yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "HANDLEBARIZE_"

# Env vars with this prefix that are not config overrides.
RESERVED_ENV_KEYS = frozenset({"PROJECT_ROOT"})

PROJECT_CONFIG_FILES = ("handlebarize.yaml", "handlebarize.yml", ".handlebarize/config.yaml")

SCHEMA_NAME = "config.schema.yaml"


class ConfigManager:
    """Load, merge, and validate handlebarize configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: HANDLEBARIZE_<SECTION>__<KEY>
    2. Project config: handlebarize.yaml (or .handlebarize/config.yaml) at the project root
    3. Bundled defaults: handlebarize.data/config/*.yaml (alphabetical order)
    """

    def __init__(self, repo_root: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> None:
        self.repo_root = Path(repo_root) if repo_root is not None else resolve_project_root()
        self.environ: Mapping[str, str] = os.environ if environ is None else environ
        self.core_config_dir = get_data_path("config")
        self._cache: Optional[Dict[str, Any]] = None

    # ========== Loading ==========

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        try:
            data = read_yaml(path, default={}, strict=True)
        except Exception as exc:
            raise ConfigError(f"Cannot read config file {path}: {exc}", context={"path": str(path)}) from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping", context={"path": str(path)})
        return data

    def _load_defaults(self) -> Dict[str, Any]:
        cfg: Dict[str, Any] = {}
        for path in sorted(self.core_config_dir.glob("*.yaml")):
            cfg = deep_merge(cfg, self.load_yaml(path))
        return cfg

    def project_config_path(self) -> Optional[Path]:
        """First project config file present under the repo root."""
        for name in PROJECT_CONFIG_FILES:
            candidate = self.repo_root / name
            if candidate.is_file():
                return candidate
        return None

    # ========== Environment Overrides ==========

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except ValueError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(self.environ):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            if raw in RESERVED_ENV_KEYS:
                continue
            segments = raw.split("__")
            if not raw or any(seg == "" for seg in segments):
                raise ConfigError(f"Malformed {ENV_PREFIX}* key: {key}", context={"key": key})
            yield [seg.lower() for seg in segments], self._coerce_type(self.environ[key])

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> Dict[str, Any]:
        """Apply HANDLEBARIZE_SECTION__KEY overrides onto ``cfg`` (in place)."""
        for path, value in self._iter_env_overrides():
            current = cfg
            for part in path[:-1]:
                nxt = current.get(part)
                if not isinstance(nxt, dict):
                    nxt = {}
                    current[part] = nxt
                current = nxt
            current[path[-1]] = value
            logger.debug("Config override from environment: %s = %r", ".".join(path), value)
        return cfg

    # ========== Validation ==========

    def validate_schema(self, config: Mapping[str, Any]) -> None:
        """Validate ``config`` against the bundled JSON schema.

        Raises:
            ConfigError: Listing every violation with its key path
        """
        schema = read_data_yaml("schemas", SCHEMA_NAME)
        validator = Draft202012Validator(schema)
        errors = sorted(validator.iter_errors(dict(config)), key=lambda e: list(e.path))
        if errors:
            details = [f"{'.'.join(str(p) for p in err.path) or '<root>'}: {err.message}" for err in errors]
            raise ConfigError(
                "Invalid configuration:\n  " + "\n  ".join(details),
                context={"errors": details},
            )

    # ========== Public API ==========

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load the merged configuration (cached per manager).

        Raises:
            ConfigError: If a file is unreadable, an env key is malformed, or
                validation fails
        """
        if self._cache is None:
            cfg = self._load_defaults()
            project_file = self.project_config_path()
            if project_file is not None:
                logger.debug("Loading project config from %s", project_file)
                cfg = deep_merge(cfg, self.load_yaml(project_file))
            self._cache = self.apply_env_overrides(cfg)
        if validate:
            try:
                self.validate_schema(self._cache)
            except jsonschema.exceptions.SchemaError as exc:
                raise ConfigError(f"Bundled config schema is invalid: {exc.message}") from exc
        return self._cache

    def get_all(self) -> Dict[str, Any]:
        return self.load_config(validate=False)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-notation key.

        Example:
            >>> manager.get("preview.output_dir")
            'previews'
            >>> manager.get("nonexistent.key", "fallback")
            'fallback'
        """
        value = resolve(key, self.load_config(validate=False))
        return default if value is ABSENT else value


__all__ = ["ConfigManager", "ENV_PREFIX", "PROJECT_CONFIG_FILES"]
