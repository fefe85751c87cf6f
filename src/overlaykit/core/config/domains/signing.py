"""Domain-specific configuration for overlay signing."""
from __future__ import annotations

from functools import cached_property
from typing import Optional

from ..base import BaseDomainConfig


def _opt(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class SigningConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "signing"

    @cached_property
    def keystore(self) -> Optional[str]:
        return _opt(self.section.get("keystore"))

    @cached_property
    def key_alias(self) -> Optional[str]:
        return _opt(self.section.get("key_alias"))

    @cached_property
    def keystore_password(self) -> Optional[str]:
        return _opt(self.section.get("keystore_password"))

    @cached_property
    def key_password(self) -> Optional[str]:
        return _opt(self.section.get("key_password"))

    @cached_property
    def key(self) -> Optional[str]:
        return _opt(self.section.get("key"))

    @cached_property
    def cert(self) -> Optional[str]:
        return _opt(self.section.get("cert"))

    @property
    def is_configured(self) -> bool:
        return bool(self.keystore) or bool(self.key and self.cert)


__all__ = ["SigningConfig"]
