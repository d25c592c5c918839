"""Component installation.

Installation is split in two phases. :meth:`ComponentInstaller.plan_install`
validates everything (template presence, metadata, the mode dependency
graph) and writes nothing. :meth:`ComponentInstaller.apply` performs the
copies and records them on a :class:`~memento.core.manifest.Manifest`
without saving. Pack installation plans every component first and applies
them only once all plans succeeded.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from memento.core.components.metadata import ComponentMetadata
from memento.core.components.store import ContentStore, content_hash
from memento.core.components.types import COMPONENT_TYPES, MODE, ComponentType, get_component_type
from memento.core.exceptions import (
    ComponentMetadataError,
    ComponentNotFoundError,
    ComponentReadError,
    DependencyError,
)
from memento.core.manifest import Manifest, ManifestStore
from memento.core.resolution.dependencies import has_self_dependency, resolve_dependencies

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallStep:
    type: str
    name: str
    # None means the file is already in place and is only recorded
    content: Optional[bytes]
    dependency: bool = False


@dataclass
class InstallPlan:
    type: str
    name: str
    force: bool = False
    steps: List[InstallStep] = field(default_factory=list)
    skipped: bool = False

    @property
    def writes(self) -> List[Tuple[str, str]]:
        return [(s.type, s.name) for s in self.steps if s.content is not None]


@dataclass
class InstallResult:
    type: str
    name: str
    installed: List[Tuple[str, str]] = field(default_factory=list)
    skipped: bool = False

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "name": self.name,
            "installed": [{"type": t, "name": n} for t, n in self.installed],
            "skipped": self.skipped,
        }


@dataclass(frozen=True)
class DependencyIssue:
    type: str
    name: str
    missing: Tuple[str, ...]


class ComponentInstaller:
    def __init__(self, store: ContentStore, manifest_store: ManifestStore) -> None:
        self.store = store
        self.manifest_store = manifest_store

    # ---------- metadata helpers ----------

    def _metadata_from(self, content: bytes, source: str) -> Optional[ComponentMetadata]:
        try:
            return self.store.parse_metadata(content, source=source)
        except (ComponentMetadataError, ComponentReadError) as exc:
            logger.warning("Ignoring dependencies of %s: %s", source, exc)
            return None

    def _mode_dependencies(self, mode: str) -> Optional[Sequence[str]]:
        """Declared dependencies of ``mode``; None when no such mode exists anywhere."""
        meta = self.store.template_metadata(MODE, mode)
        if meta is None:
            meta = self.store.installed_metadata(MODE, mode)
        if meta is not None:
            return meta.dependencies
        if self.store.has_template(MODE, mode) or self.store.is_installed(MODE, mode):
            return ()
        return None

    # ---------- planning ----------

    def plan_install(
        self,
        type_: "str | ComponentType",
        name: str,
        force: bool = False,
        *,
        source: Optional[Path] = None,
        manifest: Optional[Manifest] = None,
        supplied_modes: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> InstallPlan:
        """Validate an installation and describe the writes it needs.

        ``supplied_modes`` maps modes the caller installs itself (a pack that
        ships its own mode files) to their declared dependencies. They satisfy
        mode dependencies without a template and get no step in this plan.

        Raises:
            InvalidComponentTypeError: Unknown component type
            ComponentNotFoundError: No template, no explicit source and no
                file already in place
            DependencyError: Self, missing or circular mode dependencies
        """
        ctype = get_component_type(type_)
        manifest = manifest if manifest is not None else self.manifest_store.load()
        plan = InstallPlan(type=ctype.name, name=name, force=force)

        if manifest.is_installed(ctype, name) and not force:
            logger.warning("%s '%s' is already installed", ctype.name, name)
            plan.skipped = True
            return plan

        present = self.store.is_installed(ctype, name)
        content: Optional[bytes]
        if source is not None:
            source = Path(source)
            if not source.is_file():
                raise ComponentNotFoundError(
                    f"Source file not found: {source}",
                    hint="Pass the path of an existing component file.",
                    context={"type": ctype.name, "name": name, "source": str(source)},
                )
            content = self.store.read_file(source)
            origin = str(source)
        elif self.store.has_template(ctype, name) and (force or not present):
            content = self.store.read_template_bytes(ctype, name)
            origin = str(self.store.template_path(ctype, name))
        elif present:
            # Placed out of band (e.g. by a pack); record it as is
            content = None
            origin = str(self.store.installed_path(ctype, name))
        else:
            raise ComponentNotFoundError(
                f"Component {ctype.name} '{name}' not found in templates",
                context={"type": ctype.name, "name": name},
            )

        if content is None:
            meta = self.store.installed_metadata(ctype, name)
        else:
            meta = self._metadata_from(content, origin)
        deps: Tuple[str, ...] = meta.dependencies if (meta and ctype.has_dependencies) else ()

        if ctype is MODE and has_self_dependency(name, deps):
            raise DependencyError(
                f"mode '{name}' depends on itself",
                self_dependency=name,
                context={"type": ctype.name, "name": name},
            )

        supplied = dict(supplied_modes or {})

        def mode_dependencies(mode: str) -> Optional[Sequence[str]]:
            if ctype is MODE and mode == name:
                return deps
            if mode in supplied:
                return supplied[mode]
            return self._mode_dependencies(mode)

        if ctype is MODE:
            result = resolve_dependencies([name], mode_dependencies, include_roots=False)
        else:
            result = resolve_dependencies(deps, mode_dependencies)

        if not result.ok:
            raise DependencyError(
                f"Cannot install {ctype.name} '{name}': " + "; ".join(result.errors()),
                missing=result.missing,
                circular=result.circular,
                context={"type": ctype.name, "name": name},
            )

        for dep in result.resolved:
            if dep in supplied or (manifest.is_installed(MODE, dep) and not force):
                continue
            dep_content = None
            if self.store.has_template(MODE, dep) and (force or not self.store.is_installed(MODE, dep)):
                dep_content = self.store.read_template_bytes(MODE, dep)
            plan.steps.append(InstallStep(MODE.name, dep, dep_content, dependency=True))

        plan.steps.append(InstallStep(ctype.name, name, content))
        return plan

    # ---------- applying ----------

    def apply(self, plan: InstallPlan, manifest: Manifest) -> InstallResult:
        """Write the plan's files and record them on ``manifest`` (not saved)."""
        result = InstallResult(type=plan.type, name=plan.name, skipped=plan.skipped)
        if plan.skipped:
            return result

        version = self.store.template_version()
        for step in plan.steps:
            if step.content is not None:
                self.store.write(step.type, step.name, step.content)
                written = step.content
            else:
                written = self.store.read_installed_bytes(step.type, step.name)
            manifest.add_component(step.type, step.name)
            manifest.record_version(step.type, step.name, version, content_hash(written))
            result.installed.append((step.type, step.name))
            if step.dependency:
                logger.info("Installed required dependency: mode '%s'", step.name)
            else:
                logger.info("%s %s '%s'", "Reinstalled" if plan.force else "Installed", step.type, step.name)
        return result

    def install(
        self,
        type_: "str | ComponentType",
        name: str,
        force: bool = False,
        *,
        source: Optional[Path] = None,
    ) -> InstallResult:
        """Install one component (and its modes); idempotent without ``force``."""
        manifest = self.manifest_store.load()
        plan = self.plan_install(type_, name, force, source=source, manifest=manifest)
        result = self.apply(plan, manifest)
        if manifest.dirty:
            self.manifest_store.save(manifest)
        return result

    def remove(self, type_: "str | ComponentType", name: str) -> None:
        ctype = get_component_type(type_)
        manifest = self.manifest_store.load()
        listed = manifest.is_installed(ctype, name)
        present = self.store.is_installed(ctype, name)
        if not listed and not present:
            raise ComponentNotFoundError(
                f"Component not installed: {ctype.name} '{name}'",
                hint="Run 'memento component list --installed' to see installed components.",
                context={"type": ctype.name, "name": name},
            )

        if ctype is MODE:
            dependents = [
                f"{t.name} '{n}'"
                for t, n, meta in self._installed_metadata(manifest)
                if name in meta.dependencies
            ]
            if dependents:
                logger.warning("mode '%s' is still required by %s", name, ", ".join(dependents))

        if present:
            self.store.remove(ctype, name)
        manifest.remove_component(ctype, name)
        self.manifest_store.save(manifest)
        logger.info("Removed %s '%s'", ctype.name, name)

    # ---------- queries ----------

    def list_installed(self) -> Dict[str, List[str]]:
        manifest = self.manifest_store.load()
        return {t.plural: manifest.installed(t) for t in COMPONENT_TYPES}

    def list_available(self) -> Dict[str, List[ComponentMetadata]]:
        return {t.plural: self.store.list_available(t) for t in COMPONENT_TYPES}

    def _installed_metadata(self, manifest: Manifest) -> List[Tuple[ComponentType, str, ComponentMetadata]]:
        out = []
        for ctype in COMPONENT_TYPES:
            if not ctype.has_dependencies:
                continue
            for name in manifest.installed(ctype):
                meta = self.store.installed_metadata(ctype, name)
                if meta is not None:
                    out.append((ctype, name, meta))
        return out

    def validate_installed_dependencies(self) -> List[DependencyIssue]:
        """Installed components whose declared modes are not installed."""
        manifest = self.manifest_store.load()
        installed_modes = set(manifest.installed(MODE))
        issues: List[DependencyIssue] = []
        for ctype, name, meta in self._installed_metadata(manifest):
            missing = tuple(d for d in meta.dependencies if d not in installed_modes)
            if missing:
                issues.append(DependencyIssue(ctype.name, name, missing))
        return issues


__all__ = [
    "ComponentInstaller",
    "DependencyIssue",
    "InstallPlan",
    "InstallResult",
    "InstallStep",
]
