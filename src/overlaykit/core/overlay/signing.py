"""APK signing through ``apksigner``."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Protocol

from overlaykit.core.config.domains import SigningConfig
from overlaykit.core.utils.io import publish_file, remove_file
from overlaykit.core.utils.subprocess import ToolInvoker

from .tools import BuildTools

logger = logging.getLogger(__name__)


class Signer(Protocol):
    def sign(self, src: Path, dest: Path) -> bool:
        ...


class ApkSigner:
    """Signs into a partial file next to ``dest``, then publishes it atomically."""

    def __init__(
        self,
        tools: BuildTools,
        invoker: ToolInvoker,
        signing_config: Optional[SigningConfig] = None,
    ) -> None:
        self.tools = tools
        self.invoker = invoker
        self.config = signing_config or SigningConfig()

    def build_args(self, src: Path, out: Path) -> List[str]:
        cfg = self.config
        args: List[str] = ["sign"]
        if cfg.keystore:
            args += ["--ks", cfg.keystore]
            if cfg.key_alias:
                args += ["--ks-key-alias", cfg.key_alias]
            if cfg.keystore_password:
                args += ["--ks-pass", f"pass:{cfg.keystore_password}"]
            if cfg.key_password:
                args += ["--key-pass", f"pass:{cfg.key_password}"]
        else:
            args += ["--key", str(cfg.key), "--cert", str(cfg.cert)]
        args += ["--out", str(out), str(src)]
        return args

    def sign(self, src: Path, dest: Path) -> bool:
        if not self.config.is_configured:
            logger.error("No signing key configured (set signing.keystore or signing.key + signing.cert)")
            return False

        dest = Path(dest)
        partial = dest.with_name(dest.name + ".part")
        try:
            result = self.invoker.run(self.tools.apksigner, self.build_args(Path(src), partial))
            if not result.ok or not partial.is_file():
                for line in result.stderr_lines:
                    logger.error("apksigner: %s", line)
                return False
            try:
                publish_file(partial, dest)
            except OSError as exc:
                logger.error("Could not publish %s: %s", dest, exc)
                return False
            return True
        finally:
            remove_file(partial)


__all__ = ["Signer", "ApkSigner"]
