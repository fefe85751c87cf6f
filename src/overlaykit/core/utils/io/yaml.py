"""YAML reading, dumping and listing helpers."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, List

import yaml


def read_yaml(path: Path, default: Any = None, raise_on_error: bool = False) -> Any:
    """Read YAML with error handling.

    Returns default if file is missing or invalid, unless raise_on_error is True.

    Args:
        path: YAML file path to read
        default: Value to return if file missing or invalid (default: None)
        raise_on_error: If True, propagate exceptions instead of returning default.
    """
    path = Path(path)
    if not path.exists():
        if raise_on_error:
            raise FileNotFoundError(f"File not found: {path}")
        return default

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if data is not None else default
    except (OSError, yaml.YAMLError):
        if raise_on_error:
            raise
        return default


def dump_yaml_string(data: Any, sort_keys: bool = True) -> str:
    """Dump data to a YAML string."""
    return yaml.safe_dump(
        data,
        default_flow_style=False,
        sort_keys=sort_keys,
        allow_unicode=True,
    )


def iter_yaml_files(directory: Path) -> List[Path]:
    """Return ``*.yaml``/``*.yml`` files in ``directory`` in alphabetical order."""
    directory = Path(directory)
    if not directory.is_dir():
        return []
    files: Iterable[Path] = (
        p for p in directory.iterdir() if p.is_file() and p.suffix in {".yaml", ".yml"}
    )
    return sorted(files, key=lambda p: p.name)


__all__ = ["read_yaml", "dump_yaml_string", "iter_yaml_files"]
