"""Starter packs: curated bundles of modes, workflows and agents."""
from __future__ import annotations

from .installer import PackInstallationResult, PackInstaller
from .model import PackComponent, PackManifest, PackStructure, ToolDependency
from .source import LocalPackSource
from .tools import ToolCheckResult, ToolDependencyChecker
from .validation import ValidationIssue, ValidationResult, validate_pack_manifest

__all__ = [
    "LocalPackSource",
    "PackComponent",
    "PackInstallationResult",
    "PackInstaller",
    "PackManifest",
    "PackStructure",
    "ToolCheckResult",
    "ToolDependency",
    "ToolDependencyChecker",
    "ValidationIssue",
    "ValidationResult",
    "validate_pack_manifest",
]
