"""
overlaykit configuration management (YAML-only).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import yaml

from overlaykit.core.exceptions import ConfigError
from overlaykit.core.utils.io import iter_yaml_files, read_yaml
from overlaykit.core.utils.merge import deep_merge
from overlaykit.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "OVERLAYKIT_"


class ConfigManager:
    """Load, merge, and validate overlaykit configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: OVERLAYKIT_<section>__<key>[__<key>...]
    2. Project config: <repo>/.overlaykit/config/*.yaml (alphabetical order)
    3. User config: ~/.overlaykit/config/*.yaml (alphabetical order)
    4. Bundled defaults: overlaykit.data/config/*.yaml (alphabetical order)

    Only environment keys containing ``__`` are treated as overrides, so
    plain variables such as ``OVERLAYKIT_PROJECT_ROOT`` never leak into the
    merged configuration.
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        from overlaykit.core.utils.paths import (
            get_project_config_dir,
            get_user_config_dir,
            resolve_project_root,
        )

        self.repo_root = Path(repo_root) if repo_root is not None else resolve_project_root()
        self.core_config_dir = get_data_path("config")
        self.user_config_dir = get_user_config_dir() / "config"
        self.project_config_dir = get_project_config_dir(self.repo_root) / "config"

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}", context={"path": str(path)}) from exc
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file must contain a mapping: {path}",
                context={"path": str(path)},
            )
        return data

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path in iter_yaml_files(directory):
            cfg = deep_merge(cfg, self.load_yaml(path))
        return cfg

    # ---- environment overrides -------------------------------------------

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
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        if value.strip().lower() in {"null", "none"}:
            return None
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            if "__" not in raw:
                continue
            segs = raw.split("__")
            if any(seg == "" for seg in segs):
                logger.warning("Ignoring malformed %s* key: %s", ENV_PREFIX, key)
                continue
            yield [seg.lower() for seg in segs], self._coerce_type(os.environ[key])

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path, value in self._iter_env_overrides():
            cur = cfg
            for part in path[:-1]:
                nxt = cur.get(part)
                if not isinstance(nxt, dict):
                    nxt = {}
                    cur[part] = nxt
                cur = nxt
            cur[path[-1]] = value
        return cfg

    # ---- loading ----------------------------------------------------------

    def _load_config_uncached(self, validate: bool = True) -> Dict[str, Any]:
        cfg: Dict[str, Any] = {}
        for directory in (self.core_config_dir, self.user_config_dir, self.project_config_dir):
            cfg = self._load_directory(directory, cfg)
        cfg = self.apply_env_overrides(cfg)
        if validate:
            self.validate_schema(cfg)
        return cfg

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Return the merged configuration for ``repo_root``."""
        return self._load_config_uncached(validate=validate)

    def validate_schema(self, config: Dict[str, Any]) -> None:
        from overlaykit.core.schemas import SchemaValidationError, validate_payload

        try:
            validate_payload(config, "config")
        except SchemaValidationError as exc:
            raise ConfigError(str(exc), context={"errors": exc.errors}) from exc


def get_config_value(config: Dict[str, Any], dotted_key: str, default: Any = None) -> Any:
    """Look up ``section.key.sub`` in a merged config dict."""
    cur: Any = config
    for part in [p for p in dotted_key.split(".") if p]:
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


__all__ = ["ConfigManager", "ENV_PREFIX", "get_config_value"]
