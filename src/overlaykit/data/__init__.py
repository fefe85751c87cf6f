"""
overlaykit data resource helpers.

Provides access to the bundled configuration files and schemas using
importlib.resources.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path


def get_data_path(subpackage: str, filename: str = "") -> Path:
    """
    Get absolute path to a data file or directory.

    Args:
        subpackage: Name of the data subpackage (e.g., "config", "schemas")
        filename: Optional filename within the subpackage

    Example:
        >>> get_data_path("config", "tools.yaml")
        PosixPath('/path/to/overlaykit/data/config/tools.yaml')
    """
    pkg = resources.files("overlaykit.data")
    base = Path(str(pkg / subpackage))
    return base / filename if filename else base


__all__ = ["get_data_path"]
