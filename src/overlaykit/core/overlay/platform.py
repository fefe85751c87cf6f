"""Platform profile consumed by manifest generation and backend resolution."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

PIE = 28
Q = 29

VENDOR_SAMSUNG = "samsung"
VENDOR_GENERIC = "generic"


@dataclass(frozen=True)
class PlatformProfile:
    """Vendor tag plus OS API level of the device the overlay targets.

    ``synergy`` marks the vendor's unrooted overlay installation channel,
    which needs overlays to declare a target SDK from Q onwards.
    """

    vendor: str = VENDOR_GENERIC
    sdk_int: int = PIE
    synergy: bool = False

    @property
    def is_samsung(self) -> bool:
        return self.vendor.strip().lower() == VENDOR_SAMSUNG

    @property
    def is_at_least_pie(self) -> bool:
        return self.sdk_int >= PIE

    @property
    def is_at_least_q(self) -> bool:
        return self.sdk_int >= Q

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]] = None) -> "PlatformProfile":
        if config is None:
            from overlaykit.core.config import get_cached_config

            config = get_cached_config()
        section = config.get("platform") or {}
        return cls(
            vendor=str(section.get("vendor") or VENDOR_GENERIC),
            sdk_int=int(section.get("sdk_int") or PIE),
            synergy=bool(section.get("synergy", False)),
        )


__all__ = ["PIE", "Q", "VENDOR_SAMSUNG", "VENDOR_GENERIC", "PlatformProfile"]
