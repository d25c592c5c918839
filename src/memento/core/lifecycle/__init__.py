"""Component lifecycle: install, remove, check, update and diff."""
from __future__ import annotations

from .installer import ComponentInstaller, DependencyIssue, InstallPlan, InstallResult, InstallStep
from .updates import DiffResult, UpdateInfo, UpdateManager, UpdateOutcome, UpdateSummary

__all__ = [
    "ComponentInstaller",
    "DependencyIssue",
    "DiffResult",
    "InstallPlan",
    "InstallResult",
    "InstallStep",
    "UpdateInfo",
    "UpdateManager",
    "UpdateOutcome",
    "UpdateSummary",
]
