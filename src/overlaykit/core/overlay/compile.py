"""Resource compilation stage (aapt package).

The compiler sometimes rejects resource types in its default mode and
reports them with a "types not allowed" line. When that happens the stage
switches to legacy mode, which drops the extra base packages from the
include path, and runs the compiler exactly once more. Any other stderr
output is fatal.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from overlaykit.core.preferences import FORCE_NEW_COMPILER, Preferences
from overlaykit.core.utils.subprocess import ToolInvoker

from .manifest import MANIFEST_FILENAME
from .result import Failure, Result, Success
from .spec import OverlaySpec
from .tools import BuildTools

logger = logging.getLogger(__name__)

LEGACY_MARKER = "types not allowed"

# One normal attempt plus at most one legacy retry.
MAX_ATTEMPTS = 2

ERR_OUT_DIR = "Failed to create overlay cache directory"
ERR_NO_RESOURCES = "Resource directory cannot be empty!"
ERR_NO_OUTPUT = "Failed to compile overlay"


@dataclass
class CompilerInvocationState:
    legacy_mode: bool = False
    errors: List[str] = field(default_factory=list)


class CompileStage:
    def __init__(self, tools: BuildTools, invoker: ToolInvoker, preferences: Preferences) -> None:
        self.tools = tools
        self.invoker = invoker
        self.preferences = preferences

    def build_args(self, spec: OverlaySpec, manifest: Path, legacy_mode: bool) -> List[str]:
        args: List[str] = ["p", "-M", str(manifest)]
        for res_dir in spec.resource_dirs:
            args += ["-S", res_dir]
        if spec.asset_dir:
            args += ["-A", spec.asset_dir]

        # Always compile against the framework; extra base packages only
        # when not legacy compiling.
        args += ["-I", self.tools.framework_res]
        if not legacy_mode:
            for path in spec.extra_base_packages:
                if Path(path).exists():
                    args += ["-I", path]
                else:
                    logger.debug("Skipping missing base package %s", path)

        args += ["-F", str(spec.unsigned_path), "--auto-add-overlay", "-f"]
        return args

    def _scan_stderr(self, lines: Sequence[str], state: CompilerInvocationState) -> bool:
        """Sort stderr lines into state; return True if legacy mode was just switched on."""
        activated = False
        force_new: Optional[bool] = None
        for line in lines:
            if LEGACY_MARKER in line:
                if force_new is None:
                    force_new = self.preferences.get_boolean(FORCE_NEW_COMPILER, False)
                if not state.legacy_mode and not force_new:
                    state.legacy_mode = True
                    activated = True
                else:
                    state.errors.append(line)
            else:
                state.errors.append(line)
        return activated

    def compile(self, spec: OverlaySpec, work_dir: Path) -> Result:
        """Compile ``spec`` into the unsigned archive.

        Returns ``Success`` carrying the unsigned archive path, or ``Failure``.
        """
        out_dir = Path(spec.out_dir)
        if not out_dir.is_dir():
            try:
                out_dir.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                logger.error("Cannot create %s: %s", out_dir, exc)
                return Failure(ERR_OUT_DIR)

        if not spec.resource_dirs:
            return Failure(ERR_NO_RESOURCES)

        manifest = Path(work_dir) / MANIFEST_FILENAME
        state = CompilerInvocationState()
        for attempt in range(1, MAX_ATTEMPTS + 1):
            state.errors = []
            args = self.build_args(spec, manifest, state.legacy_mode)
            logger.info(
                "Compiling %s (attempt %d%s)",
                spec.package_name,
                attempt,
                ", legacy mode" if state.legacy_mode else "",
            )
            result = self.invoker.run(self.tools.aapt, args)

            if self._scan_stderr(result.stderr_lines, state):
                logger.warning(
                    "Compiler rejected resource types for %s; retrying in legacy mode",
                    spec.package_name,
                )
                continue

            if state.errors:
                return Failure("\n".join(state.errors))
            break

        if not spec.unsigned_path.is_file():
            return Failure(ERR_NO_OUTPUT)

        return Success(str(spec.unsigned_path))


__all__ = [
    "LEGACY_MARKER",
    "MAX_ATTEMPTS",
    "CompilerInvocationState",
    "CompileStage",
]
