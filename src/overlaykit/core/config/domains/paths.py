"""Domain-specific configuration for output and scratch locations."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Optional

from ..base import BaseDomainConfig


class PathsConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "paths"

    @cached_property
    def overlay_output_dir(self) -> Path:
        raw = self.section.get("overlay_output_dir") or "~/.cache/overlaykit/overlays"
        return Path(str(raw)).expanduser()

    @cached_property
    def work_root(self) -> Optional[Path]:
        raw = self.section.get("work_root")
        return Path(str(raw)).expanduser() if raw else None


__all__ = ["PathsConfig"]
