"""Immutable overlay description and the builder that assembles it."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional, Tuple

from overlaykit.core.exceptions import OverlaySpecError


def current_timestamp() -> int:
    """Milliseconds since the epoch, the conventional install timestamp."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class OverlaySpec:
    """Everything one pipeline run needs to know about an overlay.

    ``metadata`` keeps insertion order; ``extra_base_packages`` may name
    files that do not exist (they are skipped at compile time).
    """

    package_name: str
    target_package: str
    timestamp: int
    out_dir: Path
    version_code: Optional[int] = None
    version_name: Optional[str] = None
    label: Optional[str] = None
    metadata: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)
    extra_base_packages: Tuple[str, ...] = field(default_factory=tuple)
    resource_dirs: Tuple[str, ...] = field(default_factory=tuple)
    asset_dir: Optional[str] = None

    @property
    def unsigned_path(self) -> Path:
        return Path(self.out_dir) / f"{self.package_name}-unsigned.apk"

    @property
    def aligned_path(self) -> Path:
        return Path(self.out_dir) / f"{self.package_name}-unsigned-aligned.apk"

    @property
    def signed_path(self) -> Path:
        return Path(self.out_dir) / f"{self.package_name}.apk"


class OverlaySpecBuilder:
    """Accumulates resource inputs before freezing them into an ``OverlaySpec``.

    ``add_extra_base_package`` and ``add_resource_dir`` append (order is
    kept); ``set_asset_dir`` replaces, since the compiler accepts a single
    asset directory.
    """

    def __init__(
        self,
        package_name: str,
        target_package: str,
        timestamp: Optional[int] = None,
        *,
        version_code: Optional[int] = None,
        version_name: Optional[str] = None,
        label: Optional[str] = None,
        metadata: Optional[Mapping[str, str]] = None,
        out_dir: Optional[Path | str] = None,
    ) -> None:
        self.package_name = package_name
        self.target_package = target_package
        self.timestamp = current_timestamp() if timestamp is None else int(timestamp)
        self.version_code = version_code
        self.version_name = version_name
        self.label = label
        self.metadata = dict(metadata or {})
        self.out_dir = Path(out_dir).expanduser() if out_dir is not None else None
        self._extra_base_packages: List[str] = []
        self._resource_dirs: List[str] = []
        self._asset_dir: Optional[str] = None

    def add_extra_base_package(self, base_package: Path | str) -> "OverlaySpecBuilder":
        """Compile against an extra base package (``-I``); may be called repeatedly."""
        self._extra_base_packages.append(str(base_package))
        return self

    def add_resource_dir(self, res_dir: Path | str) -> "OverlaySpecBuilder":
        """Add a resource directory (``-S``); may be called repeatedly."""
        self._resource_dirs.append(str(Path(res_dir).expanduser().absolute()))
        return self

    def set_asset_dir(self, asset_dir: Path | str) -> "OverlaySpecBuilder":
        """Set the asset directory (``-A``), replacing any previous one."""
        self._asset_dir = str(Path(asset_dir).expanduser().absolute())
        return self

    def build(self) -> OverlaySpec:
        if not self.package_name or not str(self.package_name).strip():
            raise OverlaySpecError("Overlay package name cannot be empty")
        if not self.target_package or not str(self.target_package).strip():
            raise OverlaySpecError(
                "Overlay target package cannot be empty",
                context={"package": self.package_name},
            )

        out_dir = self.out_dir
        if out_dir is None:
            from overlaykit.core.config.domains import PathsConfig

            out_dir = PathsConfig().overlay_output_dir

        return OverlaySpec(
            package_name=str(self.package_name).strip(),
            target_package=str(self.target_package).strip(),
            timestamp=self.timestamp,
            out_dir=Path(out_dir),
            version_code=self.version_code,
            version_name=self.version_name,
            label=self.label,
            metadata=tuple((str(k), str(v)) for k, v in self.metadata.items()),
            extra_base_packages=tuple(self._extra_base_packages),
            resource_dirs=tuple(self._resource_dirs),
            asset_dir=self._asset_dir,
        )


__all__ = ["OverlaySpec", "OverlaySpecBuilder", "current_timestamp"]
