"""Domain-specific configuration accessors."""
from __future__ import annotations

from .logging import LoggingConfig
from .manifest import ANDROID_NAMESPACE, ManifestConfig
from .paths import PathsConfig
from .signing import SigningConfig
from .timeouts import TimeoutsConfig
from .tools import ToolsConfig

__all__ = [
    "ANDROID_NAMESPACE",
    "LoggingConfig",
    "ManifestConfig",
    "PathsConfig",
    "SigningConfig",
    "TimeoutsConfig",
    "ToolsConfig",
]
