"""Backend capability resolution.

The resolver walks a fixed priority list of capability checks and keeps the
first backend whose check is enabled and satisfied. The chosen backend is
stored in a set-once ``BackendSlot``; later resolutions return immediately
without re-evaluating, even if the environment has changed since.

Priority (highest first):

1. ``vendor_companion``  vendor device, pre-Pie, companion service up
2. ``companion``         pre-Pie, companion service up
3. ``platform_service``  system service bridge present
4. ``root_modern``       su available, Pie or newer
5. ``root_legacy``       su available, pre-Pie
6. ``companion_app``     companion app installed
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, fields
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Union

from overlaykit.core.exceptions import BackendError

from .base import (
    Backend,
    CompanionAppBackend,
    CompanionBackend,
    ModernRootBackend,
    PlatformServiceBackend,
    RootBackend,
    VendorCompanionBackend,
)
from .environment import Environment

logger = logging.getLogger(__name__)

BackendFactory = Callable[[], Backend]

PRIORITY = (
    "vendor_companion",
    "companion",
    "platform_service",
    "root_modern",
    "root_legacy",
    "companion_app",
)

DEFAULT_FACTORIES: Dict[str, BackendFactory] = {
    "vendor_companion": VendorCompanionBackend,
    "companion": CompanionBackend,
    "platform_service": PlatformServiceBackend,
    "root_modern": ModernRootBackend,
    "root_legacy": RootBackend,
    "companion_app": CompanionAppBackend,
}


@dataclass(frozen=True)
class BackendFlags:
    """Which backends the caller supports; all disabled by default."""

    vendor_companion: bool = False
    companion: bool = False
    platform_service: bool = False
    root_modern: bool = False
    root_legacy: bool = False
    companion_app: bool = False

    @classmethod
    def of(cls, names: Iterable[str]) -> "BackendFlags":
        known = {f.name for f in fields(cls)}
        selected = set()
        for name in names:
            if name not in known:
                raise BackendError(f"Unknown backend: {name}", context={"known": sorted(known)})
            selected.add(name)
        return cls(**{name: True for name in selected})

    @classmethod
    def from_mapping(cls, values: Mapping[str, object]) -> "BackendFlags":
        return cls.of(name for name, enabled in values.items() if enabled)

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, object]] = None) -> "BackendFlags":
        if config is None:
            from overlaykit.core.config import get_cached_config

            config = get_cached_config()
        backends = config.get("backends") or {}
        enabled = backends.get("enabled") if isinstance(backends, Mapping) else None
        return cls.from_mapping(enabled or {})

    def enabled_names(self) -> List[str]:
        return [name for name in PRIORITY if getattr(self, name)]


FlagsLike = Union[BackendFlags, Mapping[str, object], Iterable[str]]


def _coerce_flags(flags: FlagsLike) -> BackendFlags:
    if isinstance(flags, BackendFlags):
        return flags
    if isinstance(flags, Mapping):
        return BackendFlags.from_mapping(flags)
    return BackendFlags.of(flags)


@dataclass(frozen=True)
class CapabilityCheck:
    name: str
    enabled: bool
    predicate: Callable[[], bool]
    factory: BackendFactory
    #: Runtime permission the backend needs; None when it needs none or
    #: elevates by itself.
    requires_permission: Optional[str] = None


class BackendSlot:
    """Set-once holder for the selected backend."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._backend: Optional[Backend] = None

    @property
    def backend(self) -> Optional[Backend]:
        return self._backend

    @property
    def is_set(self) -> bool:
        return self._backend is not None

    def select_once(self, selector: Callable[[], Optional[Backend]]) -> Optional[Backend]:
        """Run ``selector`` unless a backend is already held; keep a non-None result.

        Concurrent first-time callers are serialized, so ``selector`` (and the
        factory it calls) runs at most once successfully.
        """
        if self._backend is not None:
            return self._backend
        with self._lock:
            if self._backend is None:
                self._backend = selector()
            return self._backend

    def clear(self) -> None:
        with self._lock:
            self._backend = None


_PROCESS_SLOT = BackendSlot()


def get_backend() -> Optional[Backend]:
    """Return the backend selected for this process, if any."""
    return _PROCESS_SLOT.backend


def reset_backend_slot_for_tests() -> None:
    """Test-only: forget the process-wide backend."""
    _PROCESS_SLOT.clear()


class CapabilityResolver:
    def __init__(
        self,
        env: Environment,
        *,
        factories: Optional[Mapping[str, BackendFactory]] = None,
        slot: Optional[BackendSlot] = None,
    ) -> None:
        self.env = env
        self.factories: Dict[str, BackendFactory] = dict(DEFAULT_FACTORIES)
        if factories:
            unknown = set(factories) - set(PRIORITY)
            if unknown:
                raise BackendError(f"Unknown backend factories: {sorted(unknown)}")
            self.factories.update(factories)
        self.slot = slot if slot is not None else _PROCESS_SLOT

    @property
    def backend(self) -> Optional[Backend]:
        return self.slot.backend

    def _companion_ready(self) -> bool:
        env = self.env
        return env.companion_reachable() and env.companion_initialize()

    def checks(self, flags: FlagsLike) -> List[CapabilityCheck]:
        """Capability checks in priority order for ``flags``."""
        f = _coerce_flags(flags)
        env = self.env
        return [
            CapabilityCheck(
                "vendor_companion",
                f.vendor_companion,
                lambda: env.is_vendor and not env.is_at_least_pie and self._companion_ready(),
                self.factories["vendor_companion"],
                env.companion_permission,
            ),
            CapabilityCheck(
                "companion",
                f.companion,
                lambda: not env.is_at_least_pie and self._companion_ready(),
                self.factories["companion"],
                env.companion_permission,
            ),
            CapabilityCheck(
                "platform_service",
                f.platform_service,
                env.service_bridge_present,
                self.factories["platform_service"],
            ),
            CapabilityCheck(
                "root_modern",
                f.root_modern,
                lambda: env.root_available() and env.is_at_least_pie,
                self.factories["root_modern"],
            ),
            CapabilityCheck(
                "root_legacy",
                f.root_legacy,
                lambda: env.root_available() and not env.is_at_least_pie,
                self.factories["root_legacy"],
            ),
            CapabilityCheck(
                "companion_app",
                f.companion_app,
                env.companion_app_installed,
                self.factories["companion_app"],
            ),
        ]

    def _select(self, flags: FlagsLike, *, check_permissions: bool) -> Optional[Backend]:
        for check in self.checks(flags):
            if not check.enabled:
                continue
            # Permission is checked before the predicate so a skipped
            # candidate never initializes the companion service.
            if (
                check_permissions
                and check.requires_permission
                and not self.env.permission_granted(check.requires_permission)
            ):
                logger.debug("Skipping %s: %s not granted", check.name, check.requires_permission)
                continue
            if not check.predicate():
                logger.debug("Skipping %s: not available", check.name)
                continue
            backend = check.factory()
            logger.info("Selected %s backend", check.name)
            return backend
        logger.info("No supported backend available")
        return None

    def resolve(self, flags: FlagsLike) -> bool:
        """Select the first enabled and available backend; True if one is held."""
        return self.slot.select_once(lambda: self._select(flags, check_permissions=False)) is not None

    def resolve_with_permissions(self, flags: FlagsLike) -> bool:
        """Like ``resolve`` but skips backends whose permission is not granted.

        Never requests a permission; only already-granted state counts.
        """
        return self.slot.select_once(lambda: self._select(flags, check_permissions=True)) is not None


__all__ = [
    "PRIORITY",
    "DEFAULT_FACTORIES",
    "BackendFlags",
    "BackendFactory",
    "BackendSlot",
    "CapabilityCheck",
    "CapabilityResolver",
    "get_backend",
    "reset_backend_slot_for_tests",
]
