"""Terminal outcome of an overlay pipeline run.

``Result`` has exactly two variants, ``Success`` and ``Failure``; callers
branch with ``isinstance`` or the ``ok`` property. There is no partial state.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Result:
    @property
    def ok(self) -> bool:
        return isinstance(self, Success)


@dataclass(frozen=True)
class Success(Result):
    """Operation succeeded; ``path`` is the generated artifact."""

    path: str


@dataclass(frozen=True)
class Failure(Result):
    """Operation failed; ``message`` is the error reported to the caller."""

    message: str


__all__ = ["Result", "Success", "Failure"]
