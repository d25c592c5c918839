"""Starter pack installation.

Installing a pack is all-or-nothing up to the first write: the pack and
every pack it depends on are validated, the pack dependency graph is
resolved, and an install plan is built for every component. Only when all
of that succeeds are files written and the manifest saved (once).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from memento.core.components.store import ContentStore
from memento.core.components.types import COMPONENT_TYPES, MODE, get_component_type
from memento.core.exceptions import DependencyError, PackValidationError
from memento.core.lifecycle.installer import ComponentInstaller, InstallPlan
from memento.core.manifest import ManifestStore, PackRecord
from memento.core.resolution.dependencies import (
    DependencyResult,
    has_self_dependency,
    resolve_dependencies,
)
from memento.core.utils.io import read_yaml, write_yaml
from memento.core.utils.merge import deep_merge
from memento.core.utils.time import utc_timestamp

from .model import PackComponent, PackManifest, PackStructure
from .source import LocalPackSource
from .tools import ToolCheckResult, ToolDependencyChecker
from .validation import ValidationResult, validate_pack_manifest

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILE = Path("config") / "project.yaml"


def _by_type() -> Dict[str, List[str]]:
    return {t.plural: [] for t in COMPONENT_TYPES}


@dataclass
class PackInstallationResult:
    pack: str
    version: str
    dependencies: List[str] = field(default_factory=list)
    installed: Dict[str, List[str]] = field(default_factory=_by_type)
    skipped: Dict[str, List[str]] = field(default_factory=_by_type)
    tools: List[ToolCheckResult] = field(default_factory=list)
    post_install_message: Optional[str] = None
    dry_run: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pack": self.pack,
            "version": self.version,
            "dependencies": list(self.dependencies),
            "installed": self.installed,
            "skipped": self.skipped,
            "tools": [t.to_dict() for t in self.tools],
            "postInstallMessage": self.post_install_message,
            "dryRun": self.dry_run,
        }


class PackInstaller:
    def __init__(
        self,
        store: ContentStore,
        manifest_store: ManifestStore,
        source: LocalPackSource,
        tool_checker: ToolDependencyChecker,
        *,
        component_installer: Optional[ComponentInstaller] = None,
    ) -> None:
        self.store = store
        self.manifest_store = manifest_store
        self.source = source
        self.tool_checker = tool_checker
        self.components = component_installer or ComponentInstaller(store, manifest_store)

    # ---------- validation & resolution ----------

    def validate(self, structure: PackStructure) -> ValidationResult:
        def component_exists(plural: str, name: str) -> bool:
            return self.source.has_component(structure, plural, name) or self.store.has_template(plural, name)

        return validate_pack_manifest(
            structure.raw,
            schema_path=self.source.schema_path,
            component_exists=component_exists,
        )

    def _validated(self, name: str) -> PackStructure:
        structure = self.source.load_pack(name)
        result = self.validate(structure)
        for warning in result.warnings:
            logger.warning("Pack '%s': %s", name, warning)
        if not result.ok:
            raise PackValidationError(
                f"Pack '{name}' failed validation",
                issues=result.messages(),
                context={"pack": name},
            )
        return structure

    def resolve_dependencies(self, name: str) -> DependencyResult:
        """Packs ``name`` depends on (transitively), dependencies first, excluding itself."""

        def lookup(pack: str) -> Optional[Sequence[str]]:
            if not self.source.has_pack(pack):
                return None
            return PackManifest.from_dict(self.source.load_raw(pack)).dependencies

        return resolve_dependencies([name], lookup, include_roots=False)

    # ---------- install ----------

    def _skip_reason(self, component_tools: Tuple[str, ...], unavailable: Set[str], skip_optional: bool) -> Optional[str]:
        if skip_optional:
            return "optional"
        missing = [t for t in component_tools if t in unavailable]
        if missing:
            return f"missing tools: {', '.join(missing)}"
        return None

    def install_pack(
        self,
        name: str,
        force: bool = False,
        skip_optional: bool = False,
        dry_run: bool = False,
    ) -> PackInstallationResult:
        """Install a pack, its pack dependencies and all of their components.

        Raises:
            PackNotFoundError: The pack (or a dependency) does not exist
            PackValidationError: A pack manifest failed validation
            DependencyError: Self, missing or circular dependencies (packs or modes)
        """
        root = self._validated(name)
        manifest_model = root.manifest

        if has_self_dependency(name, manifest_model.dependencies):
            raise DependencyError(
                f"Pack '{name}' depends on itself",
                self_dependency=name,
                context={"pack": name},
            )
        deps = self.resolve_dependencies(name)
        if not deps.ok:
            raise DependencyError(
                f"Cannot install pack '{name}': " + "; ".join(deps.errors()),
                missing=deps.missing,
                circular=deps.circular,
                context={"pack": name},
            )

        structures = [self._validated(dep) for dep in deps.resolved] + [root]
        result = PackInstallationResult(
            pack=name,
            version=manifest_model.version,
            dependencies=list(deps.resolved),
            post_install_message=manifest_model.post_install_message,
            dry_run=dry_run,
        )

        tool_deps = [t for s in structures for t in s.manifest.tool_dependencies]
        result.tools = self.tool_checker.check_dependencies(tool_deps)
        unavailable = {t.name for t in result.tools if not t.available}
        for line in ToolDependencyChecker.installation_guidance(result.tools):
            logger.warning(line)

        manifest = self.manifest_store.load()
        plans: List[InstallPlan] = []
        planned: Set[Tuple[str, str]] = set()
        pack_components: Dict[str, Dict[str, List[str]]] = {}
        selected: List[Tuple[str, PackComponent, Optional[Path]]] = []

        for structure in structures:
            recorded = pack_components.setdefault(structure.manifest.name, {})
            for plural, component in structure.manifest.iter_components():
                if not component.required:
                    reason = self._skip_reason(component.tools, unavailable, skip_optional)
                    if reason:
                        logger.info(
                            "Skipping optional %s '%s' (%s)", get_component_type(plural).name, component.name, reason
                        )
                        result.skipped[plural].append(component.name)
                        continue
                recorded.setdefault(plural, []).append(component.name)
                pack_file = self.source.component_path(structure, plural, component.name)
                selected.append((plural, component, pack_file if pack_file.is_file() else None))

        supplied_modes = self._supplied_modes(selected)
        for plural, component, pack_file in selected:
            ctype = get_component_type(plural)
            if (ctype.name, component.name) in planned:
                continue
            plan = self.components.plan_install(
                ctype,
                component.name,
                force,
                source=pack_file,
                manifest=manifest,
                supplied_modes=supplied_modes,
            )
            if plan.skipped:
                result.skipped[plural].append(component.name)
            plan.steps = [s for s in plan.steps if (s.type, s.name) not in planned]
            planned.update((s.type, s.name) for s in plan.steps)
            planned.add((ctype.name, component.name))
            plans.append(plan)

        if dry_run:
            for plan in plans:
                for step in plan.steps:
                    result.installed[get_component_type(step.type).plural].append(step.name)
            return result

        for plan in plans:
            applied = self.components.apply(plan, manifest)
            for ctype_name, cname in applied.installed:
                result.installed[get_component_type(ctype_name).plural].append(cname)

        stamp = utc_timestamp()
        for structure in structures:
            pm = structure.manifest
            manifest.record_pack(
                PackRecord(
                    name=pm.name,
                    version=pm.version,
                    installed_at=stamp,
                    source=self.source.kind,
                    components={k: tuple(v) for k, v in pack_components.get(pm.name, {}).items()},
                )
            )
            self._apply_configuration(pm)

        self.manifest_store.save(manifest)
        logger.info("Installed starter pack '%s' v%s", name, manifest_model.version)
        return result

    def _supplied_modes(
        self, selected: Sequence[Tuple[str, PackComponent, Optional[Path]]]
    ) -> Dict[str, Tuple[str, ...]]:
        """Modes shipped as pack files, mapped to their declared dependencies."""
        supplied: Dict[str, Tuple[str, ...]] = {}
        for plural, component, pack_file in selected:
            if pack_file is None or get_component_type(plural) is not MODE:
                continue
            meta = self.store.metadata_at(pack_file)
            supplied[component.name] = meta.dependencies if meta is not None else ()
        return supplied

    def _apply_configuration(self, pack: PackManifest) -> None:
        """Merge the pack's ``configuration`` into ``.memento/config/project.yaml``."""
        settings: Dict[str, Any] = dict(pack.configuration.get("projectSettings") or {})
        if pack.default_mode:
            settings["defaultMode"] = pack.default_mode
        if not settings:
            return
        path = self.store.project_dir / PROJECT_CONFIG_FILE
        current = read_yaml(path, default={}) or {}
        write_yaml(path, deep_merge(current, {"project": settings}))
        logger.debug("Updated project configuration %s from pack '%s'", path, pack.name)

    # ---------- queries ----------

    def list_available(self) -> List[PackManifest]:
        packs: List[PackManifest] = []
        for name in self.source.list_packs():
            try:
                packs.append(PackManifest.from_dict(self.source.load_raw(name)))
            except PackValidationError as exc:
                logger.warning("Skipping pack '%s': %s", name, exc)
        return packs

    def list_installed(self) -> Dict[str, PackRecord]:
        return dict(self.manifest_store.load().packs)


__all__ = ["PackInstaller", "PackInstallationResult"]
