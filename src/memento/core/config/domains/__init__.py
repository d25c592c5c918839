"""Domain-specific configuration accessors."""
from __future__ import annotations

from .fuzzy import FuzzyConfig
from .lifecycle import LifecycleConfig
from .logging import LoggingConfig
from .paths import PathsConfig
from .tools import ToolsConfig

__all__ = [
    "FuzzyConfig",
    "LifecycleConfig",
    "LoggingConfig",
    "PathsConfig",
    "ToolsConfig",
]
