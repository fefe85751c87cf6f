"""Overlay build pipeline."""
from __future__ import annotations

from .compile import CompileStage, CompilerInvocationState, LEGACY_MARKER
from .descriptor import load_overlay_descriptor
from .manifest import MANIFEST_FILENAME, ManifestGenerator
from .pipeline import OverlayPipeline
from .platform import PlatformProfile
from .postprocess import PostProcessStage
from .result import Failure, Result, Success
from .signing import ApkSigner, Signer
from .spec import OverlaySpec, OverlaySpecBuilder
from .tools import BuildTools

__all__ = [
    "ApkSigner",
    "BuildTools",
    "CompileStage",
    "CompilerInvocationState",
    "Failure",
    "LEGACY_MARKER",
    "MANIFEST_FILENAME",
    "ManifestGenerator",
    "OverlayPipeline",
    "OverlaySpec",
    "OverlaySpecBuilder",
    "PlatformProfile",
    "PostProcessStage",
    "Result",
    "Signer",
    "Success",
    "load_overlay_descriptor",
]
