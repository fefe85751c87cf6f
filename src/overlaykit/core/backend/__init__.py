"""Backend capability resolution."""
from __future__ import annotations

from .base import (
    Backend,
    CompanionAppBackend,
    CompanionBackend,
    ModernRootBackend,
    PlatformServiceBackend,
    RootBackend,
    VendorCompanionBackend,
)
from .environment import Environment, is_root_available
from .resolver import (
    PRIORITY,
    BackendFlags,
    BackendSlot,
    CapabilityCheck,
    CapabilityResolver,
    get_backend,
    reset_backend_slot_for_tests,
)

__all__ = [
    "PRIORITY",
    "Backend",
    "BackendFlags",
    "BackendSlot",
    "CapabilityCheck",
    "CapabilityResolver",
    "CompanionAppBackend",
    "CompanionBackend",
    "Environment",
    "ModernRootBackend",
    "PlatformServiceBackend",
    "RootBackend",
    "VendorCompanionBackend",
    "get_backend",
    "is_root_available",
    "reset_backend_slot_for_tests",
]
