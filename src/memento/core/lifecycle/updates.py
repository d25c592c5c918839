"""Drift detection and template updates for installed components."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from memento.core.components.store import ContentStore, content_hash
from memento.core.components.types import COMPONENT_TYPES, ComponentType, get_component_type
from memento.core.exceptions import (
    ComponentNotFoundError,
    ComponentReadError,
    ComponentRemovedUpstreamError,
    LocalModificationError,
    MementoError,
)
from memento.core.manifest import Manifest, ManifestStore
from memento.core.utils.time import filesystem_stamp

logger = logging.getLogger(__name__)

UPDATED = "updated"
UP_TO_DATE = "up-to-date"


@dataclass(frozen=True)
class UpdateInfo:
    type: str
    name: str
    current_version: str
    latest_version: str
    has_local_changes: bool

    @property
    def version_changed(self) -> bool:
        return self.current_version != self.latest_version

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "name": self.name,
            "currentVersion": self.current_version,
            "latestVersion": self.latest_version,
            "hasLocalChanges": self.has_local_changes,
            "versionChanged": self.version_changed,
        }


@dataclass(frozen=True)
class UpdateOutcome:
    type: str
    name: str
    status: str
    from_version: Optional[str] = None
    to_version: Optional[str] = None
    backup_path: Optional[Path] = None

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "name": self.name,
            "status": self.status,
            "fromVersion": self.from_version,
            "toVersion": self.to_version,
            "backup": str(self.backup_path) if self.backup_path else None,
        }


@dataclass(frozen=True)
class UpdateFailure:
    type: str
    name: str
    error: MementoError


@dataclass
class UpdateSummary:
    updated: List[UpdateOutcome] = field(default_factory=list)
    failed: List[UpdateFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass(frozen=True)
class DiffResult:
    type: str
    name: str
    identical: bool
    installed_hash: str
    template_hash: str

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "name": self.name,
            "identical": self.identical,
            "installedHash": self.installed_hash,
            "templateHash": self.template_hash,
        }


class UpdateManager:
    def __init__(
        self,
        store: ContentStore,
        manifest_store: ManifestStore,
        *,
        backups_dir: str = ".backups",
    ) -> None:
        self.store = store
        self.manifest_store = manifest_store
        self.backups_dir = backups_dir

    def _is_installed(self, manifest: Manifest, ctype: ComponentType, name: str) -> bool:
        return manifest.is_installed(ctype, name) and self.store.is_installed(ctype, name)

    def check_component(
        self,
        type_: "str | ComponentType",
        name: str,
        *,
        manifest: Optional[Manifest] = None,
    ) -> Optional[UpdateInfo]:
        """Compare an installed component with its record and the template set.

        Returns None when the component is not installed, has no version
        record, has no template, or matches both its recorded hash and the
        current template-set version.
        """
        ctype = get_component_type(type_)
        manifest = manifest if manifest is not None else self.manifest_store.load()
        if not self._is_installed(manifest, ctype, name):
            return None
        record = manifest.get_record(ctype, name)
        if record is None or not self.store.has_template(ctype, name):
            return None

        live_hash = content_hash(self.store.read_installed_bytes(ctype, name))
        latest = self.store.template_version()
        info = UpdateInfo(
            type=ctype.name,
            name=name,
            current_version=record.version,
            latest_version=latest,
            has_local_changes=live_hash != record.hash,
        )
        if not info.has_local_changes and not info.version_changed:
            return None
        return info

    def check_for_updates(self) -> List[UpdateInfo]:
        """Every installed component that has drifted or is behind the template set.

        Components whose files cannot be read are logged and left out.
        """
        manifest = self.manifest_store.load()
        out: List[UpdateInfo] = []
        for ctype in COMPONENT_TYPES:
            for name in manifest.installed(ctype):
                try:
                    info = self.check_component(ctype, name, manifest=manifest)
                except ComponentReadError as exc:
                    logger.warning("Cannot check %s '%s': %s", ctype.name, name, exc)
                    continue
                if info is not None:
                    out.append(info)
        return out

    def update_component(
        self,
        type_: "str | ComponentType",
        name: str,
        force: bool = False,
    ) -> UpdateOutcome:
        """Overwrite an installed component with its template.

        Raises:
            ComponentNotFoundError: The component is not installed
            ComponentRemovedUpstreamError: The template no longer exists
            LocalModificationError: The live file was edited and ``force`` is off
        """
        ctype = get_component_type(type_)
        manifest = self.manifest_store.load()
        if not self._is_installed(manifest, ctype, name):
            raise ComponentNotFoundError(
                f"Component not installed: {ctype.name} '{name}'",
                hint=f"Install it with 'memento component add {ctype.name} {name}'.",
                context={"type": ctype.name, "name": name},
            )
        if not self.store.has_template(ctype, name):
            raise ComponentRemovedUpstreamError(
                f"{ctype.name} '{name}' no longer exists in the template source",
                context={"type": ctype.name, "name": name},
            )

        info = self.check_component(ctype, name, manifest=manifest)
        if info is None:
            logger.info("%s '%s' is up to date", ctype.name, name)
            return UpdateOutcome(ctype.name, name, UP_TO_DATE)

        if info.has_local_changes and not force:
            raise LocalModificationError(
                f"{ctype.name} '{name}' has local modifications",
                hint="Re-run with --force to overwrite them; the current file is backed up first.",
                context={"type": ctype.name, "name": name},
            )

        backup = self.store.backup(ctype, name, backups_dir=self.backups_dir, stamp=filesystem_stamp())
        template = self.store.read_template_bytes(ctype, name)
        self.store.write(ctype, name, template)
        manifest.record_version(ctype, name, info.latest_version, content_hash(template))
        self.manifest_store.save(manifest)
        logger.info(
            "Updated %s '%s' from %s to %s", ctype.name, name, info.current_version, info.latest_version
        )
        return UpdateOutcome(
            ctype.name,
            name,
            UPDATED,
            from_version=info.current_version,
            to_version=info.latest_version,
            backup_path=backup,
        )

    def update_all(self, force: bool = False) -> UpdateSummary:
        """Update every installed component that has drifted or is behind.

        Each component is checked and updated on its own; failures (including
        unreadable files) are logged and collected and the batch always runs
        to the end.
        """
        summary = UpdateSummary()
        manifest = self.manifest_store.load()
        for ctype in COMPONENT_TYPES:
            for name in manifest.installed(ctype):
                try:
                    if self.check_component(ctype, name, manifest=manifest) is None:
                        continue
                    summary.updated.append(self.update_component(ctype, name, force=force))
                except MementoError as exc:
                    logger.error("Failed to update %s '%s': %s", ctype.name, name, exc)
                    summary.failed.append(UpdateFailure(ctype.name, name, exc))
        return summary

    def diff(self, type_: "str | ComponentType", name: str) -> DiffResult:
        """Report whether the installed copy differs from its template (no mutation)."""
        ctype = get_component_type(type_)
        installed = self.store.read_installed_bytes(ctype, name)
        if not self.store.has_template(ctype, name):
            raise ComponentRemovedUpstreamError(
                f"{ctype.name} '{name}' no longer exists in the template source",
                context={"type": ctype.name, "name": name},
            )
        template = self.store.read_template_bytes(ctype, name)
        installed_hash = content_hash(installed)
        template_hash = content_hash(template)
        return DiffResult(
            ctype.name,
            name,
            identical=installed_hash == template_hash,
            installed_hash=installed_hash,
            template_hash=template_hash,
        )


__all__ = [
    "UpdateManager",
    "UpdateInfo",
    "UpdateOutcome",
    "UpdateFailure",
    "UpdateSummary",
    "DiffResult",
    "UPDATED",
    "UP_TO_DATE",
]
