"""AndroidManifest.xml synthesis for overlay packages.

The manifest declares the overlay target, the permissions overlay managers
use to find the package, and the metadata (including the install timestamp)
carried in the ``application`` element. Vendor-specific branches are pure
functions of the ``PlatformProfile`` handed to the generator.
"""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from overlaykit.core.config.domains import ManifestConfig
from overlaykit.core.exceptions import OverlayIOError
from overlaykit.core.utils.io import write_text

from .platform import PlatformProfile
from .spec import OverlaySpec

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "AndroidManifest.xml"

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'


class ManifestGenerator:
    def __init__(
        self,
        profile: PlatformProfile,
        manifest_config: Optional[ManifestConfig] = None,
    ) -> None:
        self.profile = profile
        self.config = manifest_config or ManifestConfig()

    def needs_vendor_permission(self, target_package: str) -> bool:
        """Whether the vendor overlay permission must be requested for ``target_package``."""
        if not self.profile.is_samsung:
            return False
        return target_package not in self.config.vendor_exempt_targets

    def needs_target_sdk(self) -> bool:
        # Unrooted vendor (synergy) overlays must target Q or newer to resolve.
        return self.profile.synergy and self.profile.is_at_least_q

    def build_tree(self, spec: OverlaySpec) -> ET.Element:
        manifest = ET.Element("manifest")
        manifest.set("xmlns:android", self.config.android_namespace)
        manifest.set("package", spec.package_name)
        if spec.version_code is not None:
            manifest.set("android:versionCode", str(spec.version_code))
        if spec.version_name is not None:
            manifest.set("android:versionName", spec.version_name)

        overlay = ET.SubElement(manifest, "overlay")
        overlay.set("android:targetPackage", spec.target_package)

        if self.needs_target_sdk():
            uses_sdk = ET.SubElement(manifest, "uses-sdk")
            uses_sdk.set("android:targetSdkVersion", str(self.profile.sdk_int))

        if self.needs_vendor_permission(spec.target_package):
            vendor_permission = ET.SubElement(manifest, "uses-permission")
            vendor_permission.set("android:name", self.config.vendor_overlay_permission)

        # Lets overlay managers list packages built by us.
        listing_permission = ET.SubElement(manifest, "uses-permission")
        listing_permission.set("android:name", self.config.overlay_permission)

        application = ET.SubElement(manifest, "application")
        application.set("android:allowBackup", "false")
        application.set("android:hasCode", "false")
        if spec.label is not None:
            application.set("android:label", spec.label)

        for name, value in spec.metadata:
            meta = ET.SubElement(application, "meta-data")
            meta.set("android:name", name)
            meta.set("android:value", value)

        timestamp = ET.SubElement(application, "meta-data")
        timestamp.set("android:name", self.config.install_timestamp_key)
        timestamp.set("android:value", str(spec.timestamp))

        return manifest

    def generate(self, spec: OverlaySpec) -> str:
        """Return the serialized manifest document for ``spec``."""
        root = self.build_tree(spec)
        ET.indent(root, space="    ")
        return XML_DECLARATION + ET.tostring(root, encoding="unicode") + "\n"

    def write(self, spec: OverlaySpec, work_dir: Path) -> Path:
        """Write the manifest into ``work_dir`` and return its path.

        Raises:
            OverlayIOError: If the manifest cannot be written.
        """
        path = Path(work_dir) / MANIFEST_FILENAME
        try:
            write_text(path, self.generate(spec))
        except OSError as exc:
            raise OverlayIOError(
                f"Failed to write overlay manifest: {exc}",
                context={"path": str(path)},
            ) from exc
        logger.debug("Wrote manifest for %s to %s", spec.package_name, path)
        return path


__all__ = ["MANIFEST_FILENAME", "ManifestGenerator"]
