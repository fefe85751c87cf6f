from __future__ import annotations

from typing import Any, Dict, Mapping, Sequence


class OverlayKitError(Exception):
    """Base exception for overlaykit."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigError(OverlayKitError):
    """Raised when configuration is missing, malformed or fails validation."""


class OverlaySpecError(OverlayKitError, ValueError):
    """Raised when an overlay description is incomplete or invalid."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        OverlayKitError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class OverlayIOError(OverlayKitError, OSError):
    """Raised when an overlay work file cannot be written."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        OverlayKitError.__init__(self, message, context=context)
        OSError.__init__(self, message)


class ToolExecutionError(OverlayKitError, RuntimeError):
    """Raised when an external build tool cannot be executed."""

    def __init__(
        self,
        message: str,
        *,
        argv: Sequence[str] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if argv:
            ctx["argv"] = list(argv)
        OverlayKitError.__init__(self, message, context=ctx)
        RuntimeError.__init__(self, message)


class ToolNotFoundError(ToolExecutionError):
    """Raised when the executable of a build tool does not exist."""


class ToolTimeoutError(ToolExecutionError):
    """Raised when a build tool exceeds its configured timeout."""


class PipelineStateError(OverlayKitError, RuntimeError):
    """Raised when a pipeline is used outside its single-run lifecycle."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        OverlayKitError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class BackendError(OverlayKitError):
    """Raised when a backend cannot be constructed or is misconfigured."""


__all__ = [
    "OverlayKitError",
    "ConfigError",
    "OverlaySpecError",
    "OverlayIOError",
    "ToolExecutionError",
    "ToolNotFoundError",
    "ToolTimeoutError",
    "PipelineStateError",
    "BackendError",
]
