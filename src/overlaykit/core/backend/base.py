"""Backend contract and the built-in backend kinds.

A backend is the strategy that installs and manages overlays on a device.
The resolver only needs to construct one and hand it out, so the contract
here is identity plus a description; concrete install logic lives with the
integrations themselves.
"""
from __future__ import annotations

from typing import Any, ClassVar, Dict


class Backend:
    name: ClassVar[str] = "backend"
    #: Reported by describe(); the resolver's permission gate is set per
    #: capability check.
    self_elevating: ClassVar[bool] = False

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "class": type(self).__name__,
            "self_elevating": self.self_elevating,
        }

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"


class VendorCompanionBackend(Backend):
    """Companion service variant for the vendor's pre-Pie overlay framework."""

    name = "vendor_companion"


class CompanionBackend(Backend):
    """Privileged companion service on pre-Pie devices."""

    name = "companion"


class PlatformServiceBackend(Backend):
    """System service bridge shipped in the platform image."""

    name = "platform_service"


class RootBackend(Backend):
    """Root shell backend for pre-Pie devices."""

    name = "root_legacy"
    self_elevating = True


class ModernRootBackend(RootBackend):
    """Root shell backend for Pie and newer."""

    name = "root_modern"


class CompanionAppBackend(Backend):
    """Unrooted vendor channel provided by an installed companion app."""

    name = "companion_app"


__all__ = [
    "Backend",
    "VendorCompanionBackend",
    "CompanionBackend",
    "PlatformServiceBackend",
    "ModernRootBackend",
    "RootBackend",
    "CompanionAppBackend",
]
