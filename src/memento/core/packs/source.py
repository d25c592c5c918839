"""Local starter pack source.

Packs live under the template ``starter-packs/`` directory in one of two
forms::

    starter-packs/<name>/manifest.json
    starter-packs/<name>/components/<plural>/<component>.md   (optional)
    starter-packs/<name>.json
"""
from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from memento.core.exceptions import PackNotFoundError, PackValidationError
from memento.core.utils.io import read_json

from .model import PackManifest, PackStructure

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "manifest.json"
SCHEMA_FILENAME = "schema.json"
_SAFE_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class LocalPackSource:
    kind = "local"

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    @classmethod
    def from_config(cls, repo_root: Optional[Path] = None) -> "LocalPackSource":
        from memento.core.config.domains import PathsConfig

        return cls(PathsConfig(repo_root=repo_root).starter_packs_dir)

    @property
    def schema_path(self) -> Path:
        return self.root / SCHEMA_FILENAME

    def _manifest_path(self, name: str) -> Optional[Path]:
        if not _SAFE_NAME.match(name or "") or ".." in name:
            return None
        as_dir = self.root / name / MANIFEST_FILENAME
        if as_dir.is_file():
            return as_dir
        flat = self.root / f"{name}.json"
        if flat.is_file() and flat.name != SCHEMA_FILENAME:
            return flat
        return None

    def list_packs(self) -> List[str]:
        if not self.root.is_dir():
            return []
        names = set()
        for child in self.root.iterdir():
            if child.is_dir() and (child / MANIFEST_FILENAME).is_file():
                names.add(child.name)
            elif child.is_file() and child.suffix == ".json" and child.name != SCHEMA_FILENAME:
                names.add(child.stem)
        return sorted(names)

    def has_pack(self, name: str) -> bool:
        return self._manifest_path(name) is not None

    def _require_manifest_path(self, name: str) -> Path:
        path = self._manifest_path(name)
        if path is None:
            raise PackNotFoundError(
                f"Starter pack '{name}' not found",
                context={"pack": name, "root": str(self.root)},
            )
        return path

    def load_raw(self, name: str) -> Dict[str, Any]:
        path = self._require_manifest_path(name)
        try:
            data = read_json(path)
        except json.JSONDecodeError as exc:
            raise PackValidationError(
                f"Pack manifest {path} is not valid JSON: {exc}",
                issues=[f"invalid JSON: {exc}"],
                context={"pack": name, "path": str(path)},
            ) from exc
        if not isinstance(data, dict):
            raise PackValidationError(
                f"Pack manifest {path} must be a JSON object",
                issues=["manifest must be a JSON object"],
                context={"pack": name, "path": str(path)},
            )
        return data

    def load_pack(self, name: str) -> PackStructure:
        path = self._require_manifest_path(name)
        raw = self.load_raw(name)
        pack_dir = path.parent if path.name == MANIFEST_FILENAME else self.root / name
        return PackStructure(
            manifest=PackManifest.from_dict(raw),
            path=pack_dir,
            components_path=pack_dir / "components",
            raw=raw,
        )

    def component_path(self, structure: PackStructure, plural: str, component: str) -> Path:
        return structure.components_path / plural / f"{component}.md"

    def has_component(self, structure: PackStructure, plural: str, component: str) -> bool:
        return self.component_path(structure, plural, component).is_file()


__all__ = ["LocalPackSource", "MANIFEST_FILENAME", "SCHEMA_FILENAME"]
