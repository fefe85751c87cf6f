"""Output formatting shared by CLI commands (JSON and text modes)."""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional

from overlaykit.core.exceptions import OverlayKitError


class OutputFormatter:
    """Unified output formatter for CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def success(
        self,
        data: Dict[str, Any],
        message: str,
        *,
        status: str = "success",
    ) -> None:
        """Print ``data`` as JSON in json mode, otherwise ``message``."""
        if self.json_mode:
            output = {"status": status, **data}
            print(json.dumps(output, indent=self.indent, default=str))
        else:
            print(message)

    def error(
        self,
        error: Exception | str,
        message: Optional[str] = None,
        *,
        error_code: str = "error",
    ) -> None:
        """Report an error on stderr.

        ``OverlayKitError`` instances contribute their context to the JSON
        payload.
        """
        msg = message or str(error)
        if self.json_mode:
            output: Dict[str, Any] = {"error": error_code, "message": msg}
            if isinstance(error, OverlayKitError) and error.context:
                output["context"] = error.context
            print(json.dumps(output, indent=self.indent, default=str), file=sys.stderr)
        else:
            print(f"Error: {msg}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        print(json.dumps(data, indent=self.indent, default=str))

    def text(self, message: str) -> None:
        print(message)


__all__ = ["OutputFormatter"]
