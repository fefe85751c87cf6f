"""
overlaykit overlay build command.

SUMMARY: Build and sign an overlay package from a descriptor

Loads a YAML overlay descriptor, runs the compile/align/sign pipeline with
tools and signing settings from the layered configuration, and prints the
path of the signed package.
"""

from __future__ import annotations

import argparse
import sys

from overlaykit.cli import OutputFormatter, add_json_flag, get_repo_root
from overlaykit.core.config import get_cached_config
from overlaykit.core.config.domains import (
    ManifestConfig,
    PathsConfig,
    SigningConfig,
    TimeoutsConfig,
    ToolsConfig,
)
from overlaykit.core.exceptions import OverlayKitError
from overlaykit.core.overlay import (
    ApkSigner,
    BuildTools,
    OverlayPipeline,
    PlatformProfile,
    Success,
    load_overlay_descriptor,
)
from overlaykit.core.preferences import FORCE_NEW_COMPILER, ConfigPreferences, DictPreferences
from overlaykit.core.utils.subprocess import SubprocessToolInvoker

SUMMARY = "Build and sign an overlay package from a descriptor"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("descriptor", help="Path to the overlay descriptor (YAML)")
    parser.add_argument(
        "--out-dir",
        help="Directory for the signed package (overrides descriptor and paths.overlay_output_dir)",
    )
    parser.add_argument(
        "--force-new-compiler",
        action="store_true",
        help="Never fall back to legacy compiler mode",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        config = get_cached_config(repo_root=get_repo_root(args))
        builder = load_overlay_descriptor(args.descriptor, out_dir=args.out_dir)
        if builder.out_dir is None:
            builder.out_dir = PathsConfig(config=config).overlay_output_dir
        spec = builder.build()
    except OverlayKitError as e:
        formatter.error(e, error_code="overlay_build_error")
        return 1

    preferences = ConfigPreferences(config=config)
    if args.force_new_compiler:
        preferences = DictPreferences({FORCE_NEW_COMPILER: True})

    tools = BuildTools.from_config(ToolsConfig(config=config))
    invoker = SubprocessToolInvoker(TimeoutsConfig(config=config).tool_seconds, use_config_timeout=False)
    pipeline = OverlayPipeline(
        spec,
        tools=tools,
        invoker=invoker,
        preferences=preferences,
        profile=PlatformProfile.from_config(config),
        manifest_config=ManifestConfig(config=config),
        signer=ApkSigner(tools, invoker, SigningConfig(config=config)),
        work_root=PathsConfig(config=config).work_root,
    )
    result = pipeline.exec()

    if isinstance(result, Success):
        formatter.success(
            {"package": spec.package_name, "target": spec.target_package, "path": result.path},
            result.path,
        )
        return 0
    formatter.error(result.message, error_code="overlay_build_failed")
    return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
