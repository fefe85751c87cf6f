"""Shared CLI helpers."""
from __future__ import annotations

import argparse
from pathlib import Path

from overlaykit.core.utils.paths import resolve_project_root


def get_repo_root(args: argparse.Namespace) -> Path:
    """Return ``--repo-root`` when given, otherwise the resolved project root."""
    raw = getattr(args, "repo_root", None)
    if raw:
        return Path(raw).expanduser().resolve()
    return resolve_project_root()


__all__ = ["get_repo_root"]
