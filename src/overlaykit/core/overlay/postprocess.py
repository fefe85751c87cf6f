"""Alignment, signing and publication of a compiled overlay."""
from __future__ import annotations

import logging
from pathlib import Path

from overlaykit.core.utils.io import remove_file
from overlaykit.core.utils.subprocess import ToolInvoker

from .result import Failure, Result, Success
from .signing import Signer
from .tools import BuildTools

logger = logging.getLogger(__name__)

ZIPALIGN_BOUNDARY = "4"

ERR_ZIPALIGN = "Failed to zipalign overlay"
ERR_SIGN = "Failed to sign overlay"


class PostProcessStage:
    def __init__(self, tools: BuildTools, invoker: ToolInvoker, signer: Signer) -> None:
        self.tools = tools
        self.invoker = invoker
        self.signer = signer

    def finish(self, unsigned: Path | str, out_dir: Path | str, package_name: str) -> Result:
        """Align and sign ``unsigned`` into ``<out_dir>/<package_name>.apk``.

        Both intermediate archives are removed on every exit path.
        """
        unsigned = Path(unsigned)
        out_dir = Path(out_dir)
        aligned = out_dir / f"{package_name}-unsigned-aligned.apk"
        signed = out_dir / f"{package_name}.apk"

        try:
            logger.info("Aligning %s", unsigned.name)
            self.invoker.run(
                self.tools.zipalign,
                ["-f", ZIPALIGN_BOUNDARY, str(unsigned), str(aligned)],
            )
            if not aligned.is_file():
                return Failure(ERR_ZIPALIGN)

            logger.info("Signing %s", aligned.name)
            if not self.signer.sign(aligned, signed):
                return Failure(ERR_SIGN)
        finally:
            remove_file(unsigned)
            remove_file(aligned)

        return Success(str(signed))


__all__ = ["PostProcessStage"]
