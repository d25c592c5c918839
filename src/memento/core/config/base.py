"""Shared plumbing for memento's per-section config accessors.

Each accessor (``PathsConfig``, ``LifecycleConfig``, ``FuzzyConfig``,
``ToolsConfig``, ``LoggingConfig``) reads one top-level section of the
merged configuration for a project root and exposes typed properties.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Optional

from .cache import get_cached_config

_TRUE = {"1", "true", "yes", "on"}


class BaseDomainConfig(ABC):
    """One config section, e.g. ``fuzzy`` -> ``FuzzyConfig(repo_root).min_score``.

    Subclasses name their section in :meth:`_config_section` and read it
    through :attr:`section` or the ``_str``/``_int``/``_bool`` helpers, which
    fall back to the given default when a key is absent or empty.
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self._repo_root = repo_root
        self._config = get_cached_config(repo_root=repo_root)

    @property
    def repo_root(self) -> Path:
        """The project root given at construction, else the detected one."""
        if self._repo_root:
            return Path(self._repo_root)
        from memento.core.utils.paths import resolve_project_root

        return resolve_project_root()

    @abstractmethod
    def _config_section(self) -> str:
        """Top-level key of this section (``paths``, ``fuzzy``, ...)."""
        ...

    @cached_property
    def section(self) -> Dict[str, Any]:
        return self._config.get(self._config_section(), {}) or {}

    def _str(self, key: str, default: str) -> str:
        value = self.section.get(key)
        return str(value) if value not in (None, "") else default

    def _int(self, key: str, default: int) -> int:
        value = self.section.get(key)
        return int(value) if value not in (None, "") else default

    def _bool(self, key: str, default: bool) -> bool:
        value = self.section.get(key)
        if value is None:
            return default
        if isinstance(value, str):
            return value.strip().lower() in _TRUE
        return bool(value)


__all__ = ["BaseDomainConfig"]
