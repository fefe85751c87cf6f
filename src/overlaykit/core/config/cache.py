"""Centralized configuration caching.

Provides a single source of truth for loaded configuration across all domain
configs. The cache key includes the resolved repo root and a fingerprint of
``OVERLAYKIT_*`` environment variables so env changes are never served stale.
"""
from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any, Dict, Optional

_config_cache: Dict[str, Dict[str, Any]] = {}


def _normalize_repo_root(repo_root: Optional[Path]) -> Path:
    if repo_root is None:
        from overlaykit.core.utils.paths import resolve_project_root

        return resolve_project_root()
    return Path(repo_root).expanduser().resolve()


def _cache_key(repo_root: Path) -> str:
    env_items = sorted(
        (k, os.environ.get(k, ""))
        for k in os.environ.keys()
        if k.startswith("OVERLAYKIT_")
    )
    env_fp = hashlib.sha256(repr(env_items).encode("utf-8")).hexdigest()[:12]
    return f"{repo_root}:env={env_fp}"


def get_cached_config(repo_root: Optional[Path] = None, validate: bool = True) -> Dict[str, Any]:
    """Get configuration with caching.

    Returns the same config dict instance for the same repo_root and
    environment; treat it as immutable.
    """
    normalized_root = _normalize_repo_root(repo_root)
    key = _cache_key(normalized_root)

    if key not in _config_cache:
        from .manager import ConfigManager

        manager = ConfigManager(repo_root=normalized_root)
        _config_cache[key] = manager._load_config_uncached(validate=validate)
    return _config_cache[key]


def clear_all_caches() -> None:
    """Drop every cached configuration."""
    _config_cache.clear()


__all__ = ["get_cached_config", "clear_all_caches"]
