"""Shared CLI utility functions.

Commands never build core services by hand; they go through the factories
here so every command honours ``--repo-root`` and the layered config the
same way.
"""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from memento.cli._output import OutputFormatter
from memento.core.components.store import ContentStore
from memento.core.config.domains import FuzzyConfig, LifecycleConfig, PathsConfig
from memento.core.lifecycle import ComponentInstaller, UpdateManager
from memento.core.manifest import ManifestStore
from memento.core.packs import LocalPackSource, PackInstaller, ToolDependencyChecker
from memento.core.resolution import ComponentCatalog, FuzzyMatch, select_match
from memento.core.utils.paths import resolve_project_root


def get_repo_root(args: argparse.Namespace) -> Path:
    """Project root from ``--repo-root`` or auto-detected."""
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).resolve()
    return resolve_project_root()


def formatter(args: argparse.Namespace) -> OutputFormatter:
    return OutputFormatter(json_mode=bool(getattr(args, "json", False)))


def content_store(repo_root: Path) -> ContentStore:
    return ContentStore.from_config(repo_root)


def manifest_store(repo_root: Path) -> ManifestStore:
    return ManifestStore.from_config(repo_root)


def component_installer(repo_root: Path) -> ComponentInstaller:
    return ComponentInstaller(content_store(repo_root), manifest_store(repo_root))


def update_manager(repo_root: Path) -> UpdateManager:
    return UpdateManager(
        content_store(repo_root),
        manifest_store(repo_root),
        backups_dir=LifecycleConfig(repo_root=repo_root).backups_dir,
    )


def pack_installer(repo_root: Path) -> PackInstaller:
    return PackInstaller(
        content_store(repo_root),
        manifest_store(repo_root),
        LocalPackSource.from_config(repo_root),
        ToolDependencyChecker.from_config(repo_root),
    )


def catalog(repo_root: Path) -> ComponentCatalog:
    return ComponentCatalog(content_store(repo_root), PathsConfig(repo_root=repo_root).user_dir)


def resolve_component(
    repo_root: Path,
    query: str,
    type_: Optional[str] = None,
    *,
    scope: str = "all",
) -> FuzzyMatch:
    """Resolve a user-typed name to one component.

    ``scope`` narrows the candidates: ``installed`` (project files only),
    ``available`` (user and template components) or ``all``.

    Raises:
        ComponentNotFoundError: Nothing matches (with suggestions)
        AmbiguousComponentError: No clear winner
    """
    cat = catalog(repo_root)
    if scope == "installed":
        candidates = cat.installed(type_)
    elif scope == "available":
        candidates = cat.available(type_)
    else:
        candidates = cat.candidates(type_)

    fuzzy = FuzzyConfig(repo_root=repo_root)
    return select_match(
        query,
        candidates,
        max_results=fuzzy.max_results,
        min_score=fuzzy.min_score,
        auto_select_min_score=fuzzy.auto_select_min_score,
        auto_select_margin=fuzzy.auto_select_margin,
        suggestion_min_score=fuzzy.suggestion_min_score,
        max_suggestions=fuzzy.max_suggestions,
        include_metadata=fuzzy.include_metadata,
    )


__all__ = [
    "get_repo_root",
    "formatter",
    "content_store",
    "manifest_store",
    "component_installer",
    "update_manager",
    "pack_installer",
    "catalog",
    "resolve_component",
]
