"""Domain-specific configuration for external build tools."""
from __future__ import annotations

from functools import cached_property
from typing import Optional

from ..base import BaseDomainConfig


class ToolsConfig(BaseDomainConfig):
    """Names or paths of aapt, zipalign and apksigner."""

    def _config_section(self) -> str:
        return "tools"

    @cached_property
    def build_tools_dir(self) -> Optional[str]:
        value = self.section.get("build_tools_dir")
        return str(value) if value else None

    @cached_property
    def aapt(self) -> str:
        return str(self.section.get("aapt") or "aapt")

    @cached_property
    def zipalign(self) -> str:
        return str(self.section.get("zipalign") or "zipalign")

    @cached_property
    def apksigner(self) -> str:
        return str(self.section.get("apksigner") or "apksigner")

    @cached_property
    def framework_res(self) -> str:
        return str(self.section.get("framework_res") or "/system/framework/framework-res.apk")


__all__ = ["ToolsConfig"]
