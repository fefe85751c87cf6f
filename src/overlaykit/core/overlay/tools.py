"""Locations of the external build tools used by the overlay pipeline."""
from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from overlaykit.core.config.domains import ToolsConfig


def _resolve_executable(name: str, build_tools_dir: Optional[str]) -> str:
    candidate = Path(name).expanduser()
    if candidate.is_absolute():
        return str(candidate)
    if build_tools_dir:
        in_dir = Path(build_tools_dir).expanduser() / name
        if in_dir.exists():
            return str(in_dir)
    # Unresolved names are returned as-is; running them raises ToolNotFoundError.
    return shutil.which(name) or name


@dataclass(frozen=True)
class BuildTools:
    aapt: str = "aapt"
    zipalign: str = "zipalign"
    apksigner: str = "apksigner"
    framework_res: str = "/system/framework/framework-res.apk"

    @classmethod
    def from_config(cls, tools_config: Optional[ToolsConfig] = None) -> "BuildTools":
        cfg = tools_config or ToolsConfig()
        return cls(
            aapt=_resolve_executable(cfg.aapt, cfg.build_tools_dir),
            zipalign=_resolve_executable(cfg.zipalign, cfg.build_tools_dir),
            apksigner=_resolve_executable(cfg.apksigner, cfg.build_tools_dir),
            framework_res=cfg.framework_res,
        )


__all__ = ["BuildTools"]
