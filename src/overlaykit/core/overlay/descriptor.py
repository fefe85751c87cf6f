"""Overlay descriptor files.

A descriptor is a YAML document naming the overlay package, its target and
the resource inputs, e.g.::

    package: com.example.overlay.settings
    target: com.android.settings
    version_code: 3
    label: Settings accent
    metadata:
      theme_name: Dusk
    resources: [res, res-v29]
    assets: assets
    extra_base_packages: [/data/app/com.android.settings/base.apk]

Relative paths resolve against the descriptor's directory.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml

from overlaykit.core.exceptions import OverlaySpecError
from overlaykit.core.schemas import SchemaValidationError, validate_payload
from overlaykit.core.utils.io import read_yaml

from .spec import OverlaySpecBuilder


def _resolve(base: Path, raw: Any) -> Path:
    p = Path(str(raw)).expanduser()
    return p if p.is_absolute() else base / p


def load_overlay_descriptor(
    path: Path | str,
    *,
    out_dir: Optional[Path | str] = None,
    timestamp: Optional[int] = None,
) -> OverlaySpecBuilder:
    """Load and validate ``path`` into a builder.

    ``out_dir`` overrides the descriptor's ``out_dir``. Extra base packages
    are kept even when missing on disk; compilation skips those.

    Raises:
        OverlaySpecError: If the file is missing, unreadable or invalid.
    """
    path = Path(path)
    try:
        data = read_yaml(path, default=None, raise_on_error=True)
    except FileNotFoundError as exc:
        raise OverlaySpecError(f"Overlay descriptor not found: {path}") from exc
    except (OSError, yaml.YAMLError) as exc:
        raise OverlaySpecError(f"Cannot read overlay descriptor {path}: {exc}") from exc

    try:
        validate_payload(data, "overlay-descriptor")
    except SchemaValidationError as exc:
        raise OverlaySpecError(str(exc), context={"path": str(path), "errors": exc.errors}) from exc

    base = path.parent.resolve()
    resolved_out: Optional[Path] = None
    if out_dir is not None:
        resolved_out = Path(out_dir).expanduser()
    elif data.get("out_dir"):
        resolved_out = _resolve(base, data["out_dir"])

    builder = OverlaySpecBuilder(
        data["package"],
        data["target"],
        timestamp if timestamp is not None else data.get("timestamp"),
        version_code=data.get("version_code"),
        version_name=data.get("version_name"),
        label=data.get("label"),
        metadata={str(k): _metadata_value(v) for k, v in (data.get("metadata") or {}).items()},
        out_dir=resolved_out,
    )
    for res_dir in data.get("resources") or []:
        builder.add_resource_dir(_resolve(base, res_dir))
    if data.get("assets"):
        builder.set_asset_dir(_resolve(base, data["assets"]))
    for base_package in data.get("extra_base_packages") or []:
        builder.add_extra_base_package(_resolve(base, base_package))
    return builder


def _metadata_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


__all__ = ["load_overlay_descriptor"]
