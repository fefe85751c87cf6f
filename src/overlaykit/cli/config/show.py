"""
overlaykit config show command.

SUMMARY: Show current configuration

Displays the merged configuration from bundled defaults, user and project
overrides, and environment variables.
"""

from __future__ import annotations

import argparse
import sys

from overlaykit.cli import OutputFormatter, add_json_flag, get_repo_root
from overlaykit.core.config import ConfigManager, get_config_value
from overlaykit.core.exceptions import OverlayKitError
from overlaykit.core.utils.io import dump_yaml_string

SUMMARY = "Show current configuration"

_MISSING = object()


def _nest_key(key: str, value):
    """Nest a dot-notation key into a YAML/JSON-friendly mapping."""
    parts = [p for p in str(key).split(".") if p]
    out = value
    for part in reversed(parts):
        out = {part: out}
    return out


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "key",
        nargs="?",
        help="Specific configuration key to show (e.g., 'tools.aapt')",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        config = ConfigManager(get_repo_root(args)).load_config()
    except OverlayKitError as e:
        formatter.error(e, error_code="config_show_error")
        return 1

    if args.key:
        value = get_config_value(config, args.key, _MISSING)
        if value is _MISSING:
            formatter.error(f"Key not found: {args.key}", error_code="config_key_not_found")
            return 1
        if formatter.json_mode:
            formatter.json_output({args.key: value})
        else:
            formatter.text(dump_yaml_string(_nest_key(args.key, value)).rstrip())
        return 0

    if formatter.json_mode:
        formatter.json_output(config)
    else:
        formatter.text(dump_yaml_string(config).rstrip())
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
