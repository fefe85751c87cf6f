"""I/O utilities for overlaykit.

- Core: atomic writes, publication, directory management, removal
- YAML: read, dump and listing helpers
"""
from __future__ import annotations

from .core import (
    PathLike,
    atomic_write,
    ensure_directory,
    ensure_parent_dir,
    publish_file,
    remove_file,
    remove_tree,
    write_text,
)
from .yaml import (
    dump_yaml_string,
    iter_yaml_files,
    read_yaml,
)

__all__ = [
    # core
    "PathLike",
    "ensure_parent_dir",
    "ensure_directory",
    "atomic_write",
    "write_text",
    "publish_file",
    "remove_file",
    "remove_tree",
    # yaml
    "read_yaml",
    "dump_yaml_string",
    "iter_yaml_files",
]
