"""
overlaykit CLI package.

Commands are auto-discovered from domain subfolders (overlay/, backend/,
config/). Each command module exposes ``SUMMARY``, ``register_args(parser)``
and ``main(args) -> int``.
"""
from ._output import OutputFormatter
from ._args import add_json_flag, add_repo_root_flag, add_verbose_flag
from ._utils import get_repo_root

__all__ = [
    "OutputFormatter",
    "add_json_flag",
    "add_repo_root_flag",
    "add_verbose_flag",
    "get_repo_root",
]
