"""Layered YAML configuration for overlaykit."""
from __future__ import annotations

from .base import BaseDomainConfig
from .cache import clear_all_caches, get_cached_config
from .manager import ConfigManager, get_config_value

__all__ = [
    "BaseDomainConfig",
    "ConfigManager",
    "clear_all_caches",
    "get_cached_config",
    "get_config_value",
]
