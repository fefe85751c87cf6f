"""Persisted user preferences consulted by the overlay pipeline.

The pipeline only needs boolean lookups (``force_new_compiler``), so the
contract is a single ``get_boolean`` method. ``ConfigPreferences`` reads the
``preferences`` config section; ``DictPreferences`` is an in-memory store.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from overlaykit.core.config.base import BaseDomainConfig

FORCE_NEW_COMPILER = "force_new_compiler"

_TRUTHY = {"1", "true", "yes", "on"}


def _to_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


class Preferences(Protocol):
    def get_boolean(self, key: str, default: bool = False) -> bool:
        ...


class ConfigPreferences(BaseDomainConfig):
    """Preferences backed by the ``preferences`` section of the layered config."""

    def _config_section(self) -> str:
        return "preferences"

    def get_boolean(self, key: str, default: bool = False) -> bool:
        return _to_bool(self.section.get(key), default)


class DictPreferences:
    def __init__(self, values: Optional[Mapping[str, Any]] = None) -> None:
        self._values = dict(values or {})

    def get_boolean(self, key: str, default: bool = False) -> bool:
        return _to_bool(self._values.get(key), default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value


__all__ = [
    "FORCE_NEW_COMPILER",
    "Preferences",
    "ConfigPreferences",
    "DictPreferences",
]
