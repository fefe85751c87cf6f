"""Overlay build pipeline: manifest -> compile -> align/sign -> publish.

Each ``OverlayPipeline`` owns a private scratch directory for the duration
of ``exec()``, so independent instances can build concurrently. Stages
report through ``Result``; the first ``Failure`` is returned unchanged.
"""
from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Optional

from overlaykit.core.config.domains import ManifestConfig, PathsConfig, SigningConfig
from overlaykit.core.exceptions import OverlayIOError, PipelineStateError, ToolExecutionError
from overlaykit.core.preferences import ConfigPreferences, Preferences
from overlaykit.core.utils.io import ensure_directory, remove_file, remove_tree
from overlaykit.core.utils.subprocess import SubprocessToolInvoker, ToolInvoker

from .compile import CompileStage
from .manifest import ManifestGenerator
from .platform import PlatformProfile
from .postprocess import PostProcessStage
from .result import Failure, Result, Success
from .signing import ApkSigner, Signer
from .spec import OverlaySpec
from .tools import BuildTools

logger = logging.getLogger(__name__)

WORK_DIR_PREFIX = "overlay_builder-"

ERR_WORK_DIR = "Failed to create overlay work directory"


class OverlayPipeline:
    """Builds one overlay. ``exec()`` may be called once per instance.

    Collaborators default to config-driven implementations; pass explicit
    ones to build without touching the layered configuration.
    """

    def __init__(
        self,
        spec: OverlaySpec,
        *,
        tools: Optional[BuildTools] = None,
        invoker: Optional[ToolInvoker] = None,
        preferences: Optional[Preferences] = None,
        profile: Optional[PlatformProfile] = None,
        manifest_config: Optional[ManifestConfig] = None,
        signer: Optional[Signer] = None,
        work_root: Optional[Path] = None,
    ) -> None:
        self.spec = spec
        self.tools = tools or BuildTools.from_config()
        self.invoker = invoker or SubprocessToolInvoker()
        self.preferences = preferences or ConfigPreferences()
        self.profile = profile or PlatformProfile.from_config()
        self.manifest = ManifestGenerator(self.profile, manifest_config)
        self.signer = signer or ApkSigner(self.tools, self.invoker, SigningConfig())
        self.work_root = work_root if work_root is not None else PathsConfig().work_root
        self.work_dir: Optional[Path] = None
        self._executed = False

    def _create_work_dir(self) -> Path:
        if self.work_root is not None:
            ensure_directory(self.work_root)
        return Path(
            tempfile.mkdtemp(
                prefix=WORK_DIR_PREFIX,
                dir=str(self.work_root) if self.work_root is not None else None,
            )
        )

    def exec(self) -> Result:
        """Run the pipeline and return exactly one ``Success`` or ``Failure``.

        Raises:
            PipelineStateError: If called a second time on the same instance.
        """
        if self._executed:
            raise PipelineStateError(
                "OverlayPipeline.exec() may only be called once",
                context={"package": self.spec.package_name},
            )
        self._executed = True

        try:
            work_dir = self._create_work_dir()
        except OSError as exc:
            logger.error("%s: %s", ERR_WORK_DIR, exc)
            return Failure(ERR_WORK_DIR)

        self.work_dir = work_dir
        try:
            result = self._run(work_dir)
        finally:
            remove_tree(work_dir)
            remove_file(self.spec.unsigned_path)
            remove_file(self.spec.aligned_path)

        if isinstance(result, Failure):
            logger.error("Overlay %s failed: %s", self.spec.package_name, result.message)
        else:
            logger.info("Overlay %s built at %s", self.spec.package_name, result.path)
        return result

    def _run(self, work_dir: Path) -> Result:
        spec = self.spec
        try:
            self.manifest.write(spec, work_dir)
        except OverlayIOError as exc:
            return Failure(str(exc))

        compile_stage = CompileStage(self.tools, self.invoker, self.preferences)
        post_stage = PostProcessStage(self.tools, self.invoker, self.signer)
        try:
            compiled = compile_stage.compile(spec, work_dir)
            if not isinstance(compiled, Success):
                return compiled
            return post_stage.finish(compiled.path, spec.out_dir, spec.package_name)
        except ToolExecutionError as exc:
            return Failure(str(exc))


__all__ = ["OverlayPipeline", "WORK_DIR_PREFIX"]
