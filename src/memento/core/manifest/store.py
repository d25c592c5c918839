"""Persistence for the project manifest.

``save`` is a read-modify-write: the file is re-read and the manifest's
journaled mutations are replayed on top, so entries written by another
process since ``load`` survive. Nothing is locked between the read and the
write; concurrent writers may still lose updates.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from memento.core.exceptions import ManifestError
from memento.core.utils.io import read_json, update_json

from .model import InstalledRecord, Manifest

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "manifest.json"


class ManifestStore:
    def __init__(self, project_dir: Path, filename: str = DEFAULT_FILENAME) -> None:
        self.project_dir = Path(project_dir)
        self.filename = filename

    @classmethod
    def from_config(cls, repo_root: Optional[Path] = None) -> "ManifestStore":
        from memento.core.config.domains import LifecycleConfig, PathsConfig

        return cls(
            PathsConfig(repo_root=repo_root).project_dir,
            LifecycleConfig(repo_root=repo_root).manifest_filename,
        )

    @property
    def path(self) -> Path:
        return self.project_dir / self.filename

    def exists(self) -> bool:
        return self.path.exists()

    def _read_document(self) -> Any:
        try:
            return read_json(self.path, default=None)
        except json.JSONDecodeError as exc:
            raise ManifestError(
                f"Manifest {self.path} is not valid JSON: {exc}",
                context={"path": str(self.path)},
            ) from exc
        except OSError as exc:
            raise ManifestError(
                f"Cannot read manifest {self.path}: {exc}",
                context={"path": str(self.path)},
            ) from exc

    def load(self) -> Manifest:
        """Load the manifest; a missing file yields an empty default manifest."""
        data = self._read_document()
        if data is None:
            logger.debug("No manifest at %s; using an empty one", self.path)
            return Manifest()
        try:
            return Manifest.from_dict(data)
        except ManifestError as exc:
            exc.context.setdefault("path", str(self.path))
            raise

    def save(self, manifest: Manifest) -> None:
        # Validate the on-disk copy before touching it
        self._read_document()

        def _merge(current: Dict[str, Any]) -> Dict[str, Any]:
            if not current:
                return manifest.to_dict()
            current.setdefault("version", manifest.version)
            current.setdefault("created", manifest.created)
            return manifest.replay(current)

        try:
            update_json(self.path, _merge)
        except json.JSONDecodeError as exc:
            raise ManifestError(
                f"Manifest {self.path} is not valid JSON: {exc}",
                context={"path": str(self.path)},
            ) from exc
        manifest.clear_journal()
        logger.debug("Saved manifest %s", self.path)

    def record_version(self, type_: Any, name: str, version: str, hash_: str) -> InstalledRecord:
        manifest = self.load()
        record = manifest.record_version(type_, name, version, hash_)
        self.save(manifest)
        return record

    def get_version(self, type_: Any, name: str) -> Optional[InstalledRecord]:
        return self.load().get_record(type_, name)


__all__ = ["ManifestStore", "DEFAULT_FILENAME"]
