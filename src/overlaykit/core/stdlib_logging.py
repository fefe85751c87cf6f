from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from overlaykit.core.utils.io import ensure_directory

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_OVERLAYKIT_HANDLER: logging.Handler | None = None
_CONFIGURED_TARGET: str | None = None


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_stdlib_logging(*, level: str = "WARNING", log_path: Optional[Path] = None) -> None:
    """Install one overlaykit handler on the ``overlaykit`` logger.

    Writes to ``log_path`` when given, otherwise to stderr (stdout stays clean
    for command output). Idempotent per-process for the same target; switching
    targets replaces the previously installed handler.
    """
    global _OVERLAYKIT_HANDLER, _CONFIGURED_TARGET

    target = str(Path(log_path).expanduser().resolve()) if log_path else "<stderr>"
    pkg_logger = logging.getLogger("overlaykit")
    pkg_logger.setLevel(_level_from_name(level))

    if _CONFIGURED_TARGET == target and _OVERLAYKIT_HANDLER is not None:
        _OVERLAYKIT_HANDLER.setLevel(_level_from_name(level))
        return

    if _OVERLAYKIT_HANDLER is not None:
        pkg_logger.removeHandler(_OVERLAYKIT_HANDLER)
        _OVERLAYKIT_HANDLER.close()
        _OVERLAYKIT_HANDLER = None

    handler: logging.Handler
    if log_path:
        ensure_directory(Path(target).parent)
        handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    pkg_logger.addHandler(handler)

    _OVERLAYKIT_HANDLER = handler
    _CONFIGURED_TARGET = target


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: remove the installed handler."""
    global _OVERLAYKIT_HANDLER, _CONFIGURED_TARGET
    if _OVERLAYKIT_HANDLER is not None:
        logging.getLogger("overlaykit").removeHandler(_OVERLAYKIT_HANDLER)
        _OVERLAYKIT_HANDLER.close()
    _OVERLAYKIT_HANDLER = None
    _CONFIGURED_TARGET = None


__all__ = ["LOG_FORMAT", "configure_stdlib_logging", "reset_stdlib_logging_for_tests"]
