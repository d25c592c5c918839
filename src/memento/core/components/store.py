"""Content store: template source and project installation directory.

The store is the only place that touches component files. Paths are derived
from the component type registry; file access goes through a small
:class:`FileSystem` protocol so tests and callers can substitute their own.

Component files are copied and hashed as raw bytes. Text is decoded (UTF-8,
strict) only to parse front matter, so line endings and encoding quirks of
an installed copy always show up as drift.
"""
from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import List, Optional, Protocol, Tuple, Union, runtime_checkable

from memento.core.exceptions import (
    ComponentMetadataError,
    ComponentNotFoundError,
    ComponentReadError,
)
from memento.core.utils.io import read_bytes, write_bytes

from .metadata import ComponentMetadata, parse_component_metadata
from .types import ComponentType, get_component_type

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_VERSION = "1.0.0"
METADATA_FILENAME = "metadata.json"

TypeLike = Union[str, ComponentType]
Content = Union[bytes, str]


@runtime_checkable
class FileSystem(Protocol):
    def read_bytes(self, path: Path) -> bytes: ...

    def write_bytes(self, path: Path, data: bytes) -> None: ...

    def exists(self, path: Path) -> bool: ...

    def list_dir(self, path: Path) -> List[Path]: ...

    def remove(self, path: Path) -> None: ...


class LocalFileSystem:
    """:class:`FileSystem` over ``pathlib`` with atomic writes."""

    def read_bytes(self, path: Path) -> bytes:
        return read_bytes(path)

    def write_bytes(self, path: Path, data: bytes) -> None:
        write_bytes(path, data)

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def list_dir(self, path: Path) -> List[Path]:
        p = Path(path)
        if not p.is_dir():
            return []
        return sorted(child for child in p.iterdir() if child.is_file())

    def remove(self, path: Path) -> None:
        Path(path).unlink()


def _as_bytes(content: Content) -> bytes:
    return content.encode("utf-8") if isinstance(content, str) else bytes(content)


def content_hash(content: Content) -> str:
    """SHA-256 hex digest of the raw bytes (``str`` is encoded as UTF-8 first)."""
    return hashlib.sha256(_as_bytes(content)).hexdigest()


def decode_content(data: bytes, *, source: str = "<bytes>") -> str:
    """Strict UTF-8 decode of component bytes.

    Raises:
        ComponentReadError: If ``data`` is not valid UTF-8
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ComponentReadError(
            f"{source} is not valid UTF-8: {exc}",
            context={"path": source},
        ) from exc


class ContentStore:
    def __init__(
        self,
        project_dir: Path,
        templates_dir: Path,
        fs: Optional[FileSystem] = None,
        *,
        default_version: str = DEFAULT_TEMPLATE_VERSION,
    ) -> None:
        self.project_dir = Path(project_dir)
        self.templates_dir = Path(templates_dir)
        self.fs: FileSystem = fs or LocalFileSystem()
        self.default_version = default_version

    @classmethod
    def from_config(cls, repo_root: Optional[Path] = None) -> "ContentStore":
        from memento.core.config.domains import LifecycleConfig, PathsConfig

        paths = PathsConfig(repo_root=repo_root)
        return cls(
            paths.project_dir,
            paths.templates_dir,
            default_version=LifecycleConfig(repo_root=repo_root).default_version,
        )

    # ---------- paths ----------

    def template_path(self, type_: TypeLike, name: str) -> Path:
        ctype = get_component_type(type_)
        return self.templates_dir / ctype.directory / ctype.filename(name)

    def installed_path(self, type_: TypeLike, name: str) -> Path:
        ctype = get_component_type(type_)
        return self.project_dir / ctype.directory / ctype.filename(name)

    def installed_dir(self, type_: TypeLike) -> Path:
        return self.project_dir / get_component_type(type_).directory

    def has_template(self, type_: TypeLike, name: str) -> bool:
        return self.fs.exists(self.template_path(type_, name))

    def is_installed(self, type_: TypeLike, name: str) -> bool:
        return self.fs.exists(self.installed_path(type_, name))

    # ---------- content ----------

    def read_file(self, path: Path) -> bytes:
        """Raw bytes of any component file (template, installed, or an explicit source).

        Raises:
            ComponentReadError: The file exists but cannot be read
        """
        try:
            return self.fs.read_bytes(Path(path))
        except OSError as exc:
            raise ComponentReadError(
                f"Cannot read {path}: {exc}",
                context={"path": str(path)},
            ) from exc

    def read_template_bytes(self, type_: TypeLike, name: str) -> bytes:
        path = self.template_path(type_, name)
        if not self.fs.exists(path):
            ctype = get_component_type(type_)
            raise ComponentNotFoundError(
                f"Template not found: {ctype.name} '{name}'",
                context={"type": ctype.name, "name": name, "path": str(path)},
            )
        return self.read_file(path)

    def read_installed_bytes(self, type_: TypeLike, name: str) -> bytes:
        path = self.installed_path(type_, name)
        if not self.fs.exists(path):
            ctype = get_component_type(type_)
            raise ComponentNotFoundError(
                f"Component not installed: {ctype.name} '{name}'",
                hint=f"Install it with 'memento component add {ctype.name} {name}'.",
                context={"type": ctype.name, "name": name, "path": str(path)},
            )
        return self.read_file(path)

    def read_template(self, type_: TypeLike, name: str) -> str:
        data = self.read_template_bytes(type_, name)
        return decode_content(data, source=str(self.template_path(type_, name)))

    def read_installed(self, type_: TypeLike, name: str) -> str:
        data = self.read_installed_bytes(type_, name)
        return decode_content(data, source=str(self.installed_path(type_, name)))

    def write(self, type_: TypeLike, name: str, content: Content) -> Path:
        """Write ``content`` to the installed path; bytes are copied exactly."""
        path = self.installed_path(type_, name)
        self.fs.write_bytes(path, _as_bytes(content))
        logger.debug("Wrote %s", path)
        return path

    def remove(self, type_: TypeLike, name: str) -> None:
        self.fs.remove(self.installed_path(type_, name))

    def backup(self, type_: TypeLike, name: str, *, backups_dir: str, stamp: str) -> Path:
        """Copy the installed file to ``<type dir>/<backups_dir>/<stamp>/<file>``."""
        ctype = get_component_type(type_)
        data = self.read_installed_bytes(ctype, name)
        target = self.installed_dir(ctype) / backups_dir / stamp / ctype.filename(name)
        self.fs.write_bytes(target, data)
        logger.info("Backed up %s '%s' to %s", ctype.name, name, target)
        return target

    @staticmethod
    def content_hash(content: Content) -> str:
        return content_hash(content)

    # ---------- metadata / listings ----------

    def parse_metadata(self, data: bytes, *, source: str) -> ComponentMetadata:
        """Front matter of component bytes.

        Raises:
            ComponentReadError: Not valid UTF-8
            ComponentMetadataError: Missing or malformed front matter
        """
        return parse_component_metadata(decode_content(data, source=source), source=source)

    def metadata_at(self, path: Path) -> Optional[ComponentMetadata]:
        """Metadata of the file at ``path``, or None (with a warning) when unusable."""
        try:
            return self.parse_metadata(self.read_file(path), source=str(path))
        except (ComponentMetadataError, ComponentReadError) as exc:
            logger.warning("Skipping metadata for %s: %s", path, exc)
            return None

    def template_metadata(self, type_: TypeLike, name: str) -> Optional[ComponentMetadata]:
        """Metadata of a template, or None when absent, unreadable or unparsable."""
        if not self.has_template(type_, name):
            return None
        return self.metadata_at(self.template_path(type_, name))

    def installed_metadata(self, type_: TypeLike, name: str) -> Optional[ComponentMetadata]:
        if not self.is_installed(type_, name):
            return None
        return self.metadata_at(self.installed_path(type_, name))

    def list_templates(self, type_: TypeLike) -> List[Tuple[Path, ComponentMetadata]]:
        """``(path, metadata)`` of every usable template of ``type_``.

        Templates are addressed by file stem; the front-matter ``name`` is
        informational. Bad files are skipped with a warning.
        """
        ctype = get_component_type(type_)
        out: List[Tuple[Path, ComponentMetadata]] = []
        for path in self.fs.list_dir(self.templates_dir / ctype.directory):
            if path.suffix != ctype.extension:
                continue
            meta = self.metadata_at(path)
            if meta is not None:
                out.append((path, meta))
        return out

    def list_available(self, type_: TypeLike) -> List[ComponentMetadata]:
        """Metadata of every template of ``type_``; bad files are skipped with a warning."""
        return [meta for _path, meta in self.list_templates(type_)]

    def list_installed(self, type_: TypeLike) -> List[str]:
        """Names of component files present in the project directory."""
        ctype = get_component_type(type_)
        return [
            path.stem
            for path in self.fs.list_dir(self.installed_dir(ctype))
            if path.suffix == ctype.extension
        ]

    def template_version(self) -> str:
        """Global template-set version from ``metadata.json``."""
        path = self.templates_dir / METADATA_FILENAME
        if not self.fs.exists(path):
            return self.default_version
        try:
            data = json.loads(self.read_file(path).decode("utf-8"))
        except (ComponentReadError, ValueError) as exc:
            logger.warning("Unreadable template metadata %s: %s", path, exc)
            return self.default_version
        version = data.get("version") if isinstance(data, dict) else None
        return str(version) if version else self.default_version


__all__ = [
    "FileSystem",
    "LocalFileSystem",
    "ContentStore",
    "content_hash",
    "decode_content",
    "DEFAULT_TEMPLATE_VERSION",
]
