"""Runtime signals the backend resolver decides on.

``Environment`` is built once at startup and handed to the resolver, so
every signal is an explicit field and tests can substitute any of them.
"""
from __future__ import annotations

import functools
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from overlaykit.core.overlay.platform import PlatformProfile

logger = logging.getLogger(__name__)

DEFAULT_COMPANION_PERMISSION = "projekt.andromeda.permission.ACCESS"


def is_root_available(path_value: Optional[str] = None) -> bool:
    """Return True if an executable ``su`` exists in any ``PATH`` directory."""
    if path_value is None:
        path_value = os.environ.get("PATH", "")
    if not path_value:
        return False
    for directory in path_value.split(":"):
        if not directory:
            continue
        candidate = Path(directory) / "su"
        if candidate.is_file() and os.access(candidate, os.X_OK):
            logger.debug("Found su at %s", candidate)
            return True
    return False


def _never() -> bool:
    return False


def _nothing_granted(permission: str) -> bool:
    return False


def _once(fn: Callable[[], bool]) -> Callable[[], bool]:
    """Evaluate ``fn`` at most once and remember the answer."""
    return functools.lru_cache(maxsize=None)(fn)


@dataclass(frozen=True)
class Environment:
    profile: PlatformProfile
    companion_reachable: Callable[[], bool] = _never
    companion_initialize: Callable[[], bool] = _never
    service_bridge_present: Callable[[], bool] = _never
    root_available: Callable[[], bool] = is_root_available
    companion_app_installed: Callable[[], bool] = _never
    permission_granted: Callable[[str], bool] = _nothing_granted
    companion_permission: str = DEFAULT_COMPANION_PERMISSION

    @property
    def is_vendor(self) -> bool:
        return self.profile.is_samsung

    @property
    def is_at_least_pie(self) -> bool:
        return self.profile.is_at_least_pie

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]] = None) -> "Environment":
        """Build an environment from the ``platform`` and ``environment`` sections.

        Companion and bridge probes are evaluated at most once per instance;
        root availability is re-checked on every call.
        """
        if config is None:
            from overlaykit.core.config import get_cached_config

            config = get_cached_config()
        section = config.get("environment") or {}
        granted = frozenset(str(p) for p in (section.get("granted_permissions") or []))
        companion = bool(section.get("companion_service", False))
        bridge = bool(section.get("service_bridge", False))
        app_installed = bool(section.get("companion_app_installed", False))

        return cls(
            profile=PlatformProfile.from_config(config),
            companion_reachable=_once(lambda: companion),
            companion_initialize=lambda: companion,
            service_bridge_present=_once(lambda: bridge),
            root_available=is_root_available,
            companion_app_installed=lambda: app_installed,
            permission_granted=granted.__contains__,
            companion_permission=str(section.get("companion_permission") or DEFAULT_COMPANION_PERMISSION),
        )


__all__ = ["DEFAULT_COMPANION_PERMISSION", "Environment", "is_root_available"]
