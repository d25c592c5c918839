"""In-memory view of ``.memento/manifest.json``.

Mutations go through named methods. Each one updates the typed view and is
journaled so :class:`~memento.core.manifest.store.ManifestStore` can replay
exactly those changes on top of whatever is on disk at save time.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from memento.core.components.types import COMPONENT_TYPES, get_component_type
from memento.core.exceptions import ManifestError
from memento.core.utils.time import utc_timestamp

MANIFEST_FORMAT_VERSION = "1.0.0"
_KNOWN_KEYS = {"version", "created", "components", "versions", "packs"}

Document = Dict[str, Any]


@dataclass(frozen=True)
class InstalledRecord:
    name: str
    version: str
    hash: str
    last_updated: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "version": self.version,
            "hash": self.hash,
            "lastUpdated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> "InstalledRecord":
        return cls(
            name=str(data.get("name") or name),
            version=str(data.get("version") or ""),
            hash=str(data.get("hash") or ""),
            last_updated=str(data.get("lastUpdated") or ""),
        )


@dataclass(frozen=True)
class PackRecord:
    name: str
    version: str
    installed_at: str
    source: str = "local"
    components: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "installedAt": self.installed_at,
            "source": self.source,
            "components": {k: list(v) for k, v in self.components.items()},
        }

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> "PackRecord":
        comps = data.get("components") or {}
        return cls(
            name=str(data.get("name") or name),
            version=str(data.get("version") or ""),
            installed_at=str(data.get("installedAt") or ""),
            source=str(data.get("source") or "local"),
            components={str(k): tuple(str(n) for n in (v or [])) for k, v in comps.items()},
        )


# ---------- document operations (shared by the view and the journal replay) ----------


def _doc_components(doc: Document) -> Dict[str, Any]:
    comps = doc.get("components")
    if not isinstance(comps, dict):
        comps = doc["components"] = {}
    return comps


def _op_add_component(doc: Document, plural: str, name: str, stamp: str) -> None:
    comps = _doc_components(doc)
    names = comps.setdefault(plural, [])
    if name not in names:
        names.append(name)
    comps["updated"] = stamp


def _op_remove_component(doc: Document, plural: str, name: str, stamp: str) -> None:
    comps = _doc_components(doc)
    names = comps.get(plural) or []
    comps[plural] = [n for n in names if n != name]
    comps["updated"] = stamp
    versions = doc.get("versions")
    if isinstance(versions, dict) and isinstance(versions.get(plural), dict):
        versions[plural].pop(name, None)


def _op_record_version(doc: Document, plural: str, record: InstalledRecord) -> None:
    versions = doc.get("versions")
    if not isinstance(versions, dict):
        versions = doc["versions"] = {}
    versions.setdefault(plural, {})[record.name] = record.to_dict()


def _op_record_pack(doc: Document, record: PackRecord) -> None:
    packs = doc.get("packs")
    if not isinstance(packs, dict):
        packs = doc["packs"] = {}
    packs[record.name] = record.to_dict()


@dataclass
class Manifest:
    version: str = MANIFEST_FORMAT_VERSION
    created: str = field(default_factory=utc_timestamp)
    components: Dict[str, List[str]] = field(
        default_factory=lambda: {t.plural: [] for t in COMPONENT_TYPES}
    )
    versions: Dict[str, Dict[str, InstalledRecord]] = field(
        default_factory=lambda: {t.plural: {} for t in COMPONENT_TYPES}
    )
    packs: Dict[str, PackRecord] = field(default_factory=dict)
    updated: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    _journal: List[Callable[[Document], None]] = field(
        default_factory=list, repr=False, compare=False
    )

    # ---------- queries ----------

    def installed(self, type_: Any) -> List[str]:
        return list(self.components.get(get_component_type(type_).plural, []))

    def is_installed(self, type_: Any, name: str) -> bool:
        return name in self.installed(type_)

    def get_record(self, type_: Any, name: str) -> Optional[InstalledRecord]:
        return self.versions.get(get_component_type(type_).plural, {}).get(name)

    @property
    def dirty(self) -> bool:
        return bool(self._journal)

    # ---------- named mutations ----------

    def _apply(self, op: Callable[[Document], None]) -> None:
        # The view is rebuilt from its own document so both paths share one implementation
        doc = self.to_dict()
        op(doc)
        fresh = Manifest.from_dict(doc)
        self.components = fresh.components
        self.versions = fresh.versions
        self.packs = fresh.packs
        self.updated = fresh.updated
        self._journal.append(op)

    def add_component(self, type_: Any, name: str) -> None:
        plural = get_component_type(type_).plural
        stamp = utc_timestamp()
        self._apply(lambda doc: _op_add_component(doc, plural, name, stamp))

    def remove_component(self, type_: Any, name: str) -> None:
        plural = get_component_type(type_).plural
        stamp = utc_timestamp()
        self._apply(lambda doc: _op_remove_component(doc, plural, name, stamp))

    def record_version(
        self,
        type_: Any,
        name: str,
        version: str,
        hash_: str,
        *,
        timestamp: Optional[str] = None,
    ) -> InstalledRecord:
        plural = get_component_type(type_).plural
        record = InstalledRecord(name, version, hash_, timestamp or utc_timestamp())
        self._apply(lambda doc: _op_record_version(doc, plural, record))
        return record

    def record_pack(self, record: PackRecord) -> None:
        self._apply(lambda doc: _op_record_pack(doc, record))

    # ---------- persistence helpers ----------

    def replay(self, doc: Document) -> Document:
        """Apply the journaled mutations to ``doc`` (in order) and return it."""
        for op in self._journal:
            op(doc)
        return doc

    def clear_journal(self) -> None:
        self._journal.clear()

    def to_dict(self) -> Document:
        components: Dict[str, Any] = {k: list(v) for k, v in self.components.items()}
        if self.updated:
            components["updated"] = self.updated
        doc: Document = dict(self.extra)
        doc.update(
            {
                "version": self.version,
                "created": self.created,
                "components": components,
                "versions": {
                    plural: {name: rec.to_dict() for name, rec in records.items()}
                    for plural, records in self.versions.items()
                },
            }
        )
        if self.packs:
            doc["packs"] = {name: rec.to_dict() for name, rec in self.packs.items()}
        return doc

    @classmethod
    def from_dict(cls, data: Any) -> "Manifest":
        if not isinstance(data, dict):
            raise ManifestError("Manifest must be a JSON object")

        raw_components = data.get("components") or {}
        raw_versions = data.get("versions") or {}
        raw_packs = data.get("packs") or {}
        if not isinstance(raw_components, dict) or not isinstance(raw_versions, dict):
            raise ManifestError("Manifest 'components' and 'versions' must be objects")
        if not isinstance(raw_packs, dict):
            raise ManifestError("Manifest 'packs' must be an object")

        components: Dict[str, List[str]] = {t.plural: [] for t in COMPONENT_TYPES}
        for key, names in raw_components.items():
            if key == "updated":
                continue
            if not isinstance(names, list):
                raise ManifestError(f"Manifest 'components.{key}' must be a list")
            components[key] = [str(n) for n in names]

        versions: Dict[str, Dict[str, InstalledRecord]] = {t.plural: {} for t in COMPONENT_TYPES}
        for key, records in raw_versions.items():
            if not isinstance(records, dict):
                raise ManifestError(f"Manifest 'versions.{key}' must be an object")
            versions[key] = {
                name: InstalledRecord.from_dict(name, rec)
                for name, rec in records.items()
                if isinstance(rec, dict)
            }

        packs = {
            name: PackRecord.from_dict(name, rec)
            for name, rec in raw_packs.items()
            if isinstance(rec, dict)
        }

        updated = raw_components.get("updated")
        return cls(
            version=str(data.get("version") or MANIFEST_FORMAT_VERSION),
            created=str(data.get("created") or utc_timestamp()),
            components=components,
            versions=versions,
            packs=packs,
            updated=str(updated) if updated else None,
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )


__all__ = ["InstalledRecord", "PackRecord", "Manifest", "MANIFEST_FORMAT_VERSION"]
