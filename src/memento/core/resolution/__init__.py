"""Name and dependency resolution."""
from __future__ import annotations

from .catalog import ComponentCatalog
from .dependencies import DependencyResult, has_self_dependency, resolve_dependencies
from .fuzzy import (
    Candidate,
    ComponentInfo,
    FuzzyMatch,
    find_best_match,
    find_matches,
    generate_suggestions,
    select_match,
)

__all__ = [
    "Candidate",
    "ComponentCatalog",
    "ComponentInfo",
    "DependencyResult",
    "FuzzyMatch",
    "find_best_match",
    "find_matches",
    "generate_suggestions",
    "has_self_dependency",
    "resolve_dependencies",
    "select_match",
]
