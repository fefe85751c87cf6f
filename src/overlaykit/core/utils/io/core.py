"""Core I/O utilities for overlaykit.

Single source of truth for safe file access patterns:
- Atomic writes with fsync
- Atomic publication of a finished file into its final location
- Directory management and best-effort removal
"""
from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Optional, TextIO, Union

PathLike = Union[str, Path]

logger = logging.getLogger(__name__)


def ensure_parent_dir(path: Path) -> None:
    """Ensure the parent directory for ``path`` exists."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def ensure_directory(path: PathLike, create: bool = True) -> Path:
    """Ensure directory exists.

    Args:
        path: Directory path to check/create
        create: If True, create directory if missing; if False, raise if missing

    Returns:
        Path: The directory path (guaranteed to exist if create=True)

    Raises:
        FileNotFoundError: If create=False and directory doesn't exist
        NotADirectoryError: If path exists but is not a directory
        OSError: If directory creation fails
    """
    path = Path(path)

    if path.exists():
        if not path.is_dir():
            raise NotADirectoryError(f"Path exists but is not a directory: {path}")
        return path

    if create:
        path.mkdir(parents=True, exist_ok=True)
        return path
    raise FileNotFoundError(f"Directory does not exist: {path}")


def atomic_write(
    path: PathLike,
    write_fn: Callable[[TextIO], None],
    *,
    encoding: str = "utf-8",
) -> None:
    """Write to ``path`` atomically using a temp file + fsync + rename.

    - Parent directory is created if missing
    - Data is written to a temporary file in the same directory
    - File is fsync'd then atomically replaced
    - Any leftover temp file is cleaned up on failure
    """
    path = Path(path)
    ensure_parent_dir(path)

    tmp_path: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding=encoding,
            dir=str(path.parent),
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            write_fn(f)
            f.flush()
            os.fsync(f.fileno())

        os.replace(str(tmp_path), str(path))
    finally:
        if tmp_path is not None and tmp_path.exists():
            remove_file(tmp_path)


def write_text(path: PathLike, content: str) -> None:
    """Atomically write UTF-8 text to ``path``."""

    def _writer(f: TextIO) -> None:
        f.write(content)

    atomic_write(Path(path), _writer)


def publish_file(src: PathLike, dest: PathLike) -> Path:
    """Move a finished file into ``dest`` with a single atomic rename.

    ``src`` must live on the same filesystem as ``dest`` (callers stage
    partial files next to their destination).
    """
    dest = Path(dest)
    ensure_parent_dir(dest)
    os.replace(str(src), str(dest))
    return dest


def remove_file(path: PathLike) -> bool:
    """Best-effort file removal. Returns True when the file is gone."""
    p = Path(path)
    try:
        p.unlink()
    except FileNotFoundError:
        return True
    except OSError as exc:
        logger.warning("Could not remove %s: %s", p, exc)
        return False
    return True


def remove_tree(path: PathLike) -> None:
    """Recursively delete ``path``; errors are logged, never raised."""
    p = Path(path)
    if not p.exists():
        return
    try:
        shutil.rmtree(p)
    except OSError as exc:
        logger.warning("Could not remove %s: %s", p, exc)


__all__ = [
    "PathLike",
    "ensure_parent_dir",
    "ensure_directory",
    "atomic_write",
    "write_text",
    "publish_file",
    "remove_file",
    "remove_tree",
]
