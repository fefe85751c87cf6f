"""Common CLI argument registration helpers."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_repo_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --repo-root flag for project root override."""
    parser.add_argument(
        "--repo-root",
        type=str,
        help="Override project root path (defaults to $OVERLAYKIT_PROJECT_ROOT or cwd)",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug output to stderr",
    )


__all__ = ["add_json_flag", "add_repo_root_flag", "add_verbose_flag"]
