"""
overlaykit backend resolve command.

SUMMARY: Select the install backend for this device

Enabled backends come from ``backends.enabled`` in the configuration plus any
``--enable`` flags. Device signals come from the ``platform`` and
``environment`` sections.
"""

from __future__ import annotations

import argparse
import sys

from overlaykit.cli import OutputFormatter, add_json_flag, get_repo_root
from overlaykit.core.backend import PRIORITY, BackendFlags, CapabilityResolver, Environment
from overlaykit.core.config import get_cached_config
from overlaykit.core.exceptions import OverlayKitError

SUMMARY = "Select the install backend for this device"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--enable",
        action="append",
        default=[],
        choices=PRIORITY,
        metavar="NAME",
        help=f"Also enable backend NAME (repeatable; one of: {', '.join(PRIORITY)})",
    )
    parser.add_argument(
        "--check-permissions",
        action="store_true",
        help="Skip backends whose runtime permission has not been granted",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        config = get_cached_config(repo_root=get_repo_root(args))
        configured = BackendFlags.from_config(config)
        flags = BackendFlags.of(set(configured.enabled_names()) | set(args.enable))
        resolver = CapabilityResolver(Environment.from_config(config))
    except OverlayKitError as e:
        formatter.error(e, error_code="backend_resolve_error")
        return 1

    if args.check_permissions:
        resolved = resolver.resolve_with_permissions(flags)
    else:
        resolved = resolver.resolve(flags)

    backend = resolver.backend
    if not resolved or backend is None:
        formatter.error(
            "No supported backend available",
            error_code="no_backend",
        )
        return 1

    formatter.success(
        {"backend": backend.describe(), "enabled": flags.enabled_names()},
        f"Backend: {backend.name}",
    )
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
