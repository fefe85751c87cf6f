"""Path resolution for overlaykit.

Project root resolution priority:
1. ``OVERLAYKIT_PROJECT_ROOT`` environment variable
2. Current working directory

Config directory names can be overridden with
``OVERLAYKIT_paths__project_config_dir`` and ``OVERLAYKIT_paths__user_config_dir``.
"""
from __future__ import annotations

import os
from pathlib import Path

from overlaykit.core.exceptions import ConfigError

DEFAULT_PROJECT_CONFIG_PRIMARY = ".overlaykit"
DEFAULT_USER_CONFIG_PRIMARY = ".overlaykit"

PROJECT_ROOT_ENV = "OVERLAYKIT_PROJECT_ROOT"


def resolve_project_root() -> Path:
    """Return the absolute project root.

    Raises:
        ConfigError: If ``OVERLAYKIT_PROJECT_ROOT`` points at a missing path.
    """
    env_root = os.environ.get(PROJECT_ROOT_ENV)
    if env_root:
        path = Path(env_root).expanduser().resolve()
        if not path.is_dir():
            raise ConfigError(
                f"{PROJECT_ROOT_ENV} points at missing path: {path}",
                context={"path": str(path)},
            )
        return path
    return Path.cwd().resolve()


def get_project_config_dir(repo_root: Path) -> Path:
    name = os.environ.get("OVERLAYKIT_paths__project_config_dir") or DEFAULT_PROJECT_CONFIG_PRIMARY
    p = Path(name).expanduser()
    if p.is_absolute():
        return p
    return Path(repo_root) / p


def get_user_config_dir() -> Path:
    """Return the user config directory (relative values resolve against $HOME)."""
    name = os.environ.get("OVERLAYKIT_paths__user_config_dir") or DEFAULT_USER_CONFIG_PRIMARY
    p = Path(name).expanduser()
    if not p.is_absolute():
        p = Path.home() / p
    return p


__all__ = [
    "DEFAULT_PROJECT_CONFIG_PRIMARY",
    "DEFAULT_USER_CONFIG_PRIMARY",
    "PROJECT_ROOT_ENV",
    "resolve_project_root",
    "get_project_config_dir",
    "get_user_config_dir",
]
