"""Domain-specific configuration for generated overlay manifests."""
from __future__ import annotations

from functools import cached_property
from typing import Tuple

from ..base import BaseDomainConfig

ANDROID_NAMESPACE = "http://schemas.android.com/apk/res/android"


class ManifestConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "manifest"

    @cached_property
    def android_namespace(self) -> str:
        return str(self.section.get("android_namespace") or ANDROID_NAMESPACE)

    @cached_property
    def overlay_permission(self) -> str:
        return str(self.section.get("overlay_permission") or "projekt.substratum.theme.permission.OVERLAY")

    @cached_property
    def vendor_overlay_permission(self) -> str:
        return str(
            self.section.get("vendor_overlay_permission")
            or "com.samsung.android.permission.SAMSUNG_OVERLAY_COMPONENT"
        )

    @cached_property
    def vendor_exempt_targets(self) -> Tuple[str, ...]:
        raw = self.section.get("vendor_exempt_targets")
        if raw is None:
            raw = ["com.sec.android.app.music", "com.sec.android.app.voicenote"]
        return tuple(str(t) for t in raw)

    @cached_property
    def install_timestamp_key(self) -> str:
        return str(self.section.get("install_timestamp_key") or "overlaykit.INSTALL_TIMESTAMP")


__all__ = ["ManifestConfig", "ANDROID_NAMESPACE"]
