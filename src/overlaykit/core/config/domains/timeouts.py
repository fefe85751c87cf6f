"""Domain-specific configuration for operation timeouts."""
from __future__ import annotations

from functools import cached_property
from typing import Optional

from ..base import BaseDomainConfig


class TimeoutsConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "timeouts"

    @cached_property
    def tool_seconds(self) -> Optional[float]:
        """Timeout for one external tool run; None when disabled (0 or null)."""
        raw = self.section.get("tool_seconds")
        if raw is None:
            return None
        value = float(raw)
        return value if value > 0 else None


__all__ = ["TimeoutsConfig"]
