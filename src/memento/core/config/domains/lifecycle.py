from __future__ import annotations

from functools import cached_property

from ..base import BaseDomainConfig


class LifecycleConfig(BaseDomainConfig):
    """Manifest and update settings."""

    def _config_section(self) -> str:
        return "lifecycle"

    @cached_property
    def manifest_filename(self) -> str:
        return self._str("manifest_filename", "manifest.json")

    @cached_property
    def backups_dir(self) -> str:
        return self._str("backups_dir", ".backups")

    @cached_property
    def default_version(self) -> str:
        return self._str("default_version", "1.0.0")


__all__ = ["LifecycleConfig"]
