"""Domain-specific configuration for memento logging."""
from __future__ import annotations

import os
from functools import cached_property
from pathlib import Path
from typing import Optional

from ..base import BaseDomainConfig

VERBOSE_ENV = "MEMENTO_VERBOSE"


class LoggingConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "logging"

    @cached_property
    def level(self) -> str:
        return self._str("level", "WARNING").upper()

    @cached_property
    def verbose_level(self) -> str:
        return self._str("verbose_level", "DEBUG").upper()

    @cached_property
    def verbose(self) -> bool:
        return os.environ.get(VERBOSE_ENV, "").strip().lower() in {"1", "true", "yes", "on"}

    @cached_property
    def file(self) -> Optional[Path]:
        raw = str(self.section.get("file") or "").strip()
        if not raw:
            return None
        path = Path(raw).expanduser()
        return path if path.is_absolute() else (self.repo_root / path)


__all__ = ["LoggingConfig", "VERBOSE_ENV"]
