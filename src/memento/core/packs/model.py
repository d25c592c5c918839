"""Typed starter pack manifests."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from memento.core.components.types import COMPONENT_TYPES


@dataclass(frozen=True)
class PackComponent:
    name: str
    required: bool = True
    description: Optional[str] = None
    tools: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PackComponent":
        return cls(
            name=str(data.get("name", "")),
            required=data.get("required", True) is not False,
            description=data.get("description"),
            tools=tuple(str(t) for t in (data.get("tools") or [])),
        )


@dataclass(frozen=True)
class ToolDependency:
    name: str
    version: Optional[str] = None
    required: bool = False
    install_command: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ToolDependency":
        return cls(
            name=str(data.get("name", "")),
            version=data.get("version"),
            required=bool(data.get("required", False)),
            install_command=data.get("installCommand"),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class PackManifest:
    name: str
    version: str
    description: str
    author: str
    category: Optional[str] = None
    tags: Tuple[str, ...] = ()
    components: Mapping[str, Tuple[PackComponent, ...]] = field(default_factory=dict)
    dependencies: Tuple[str, ...] = ()
    tool_dependencies: Tuple[ToolDependency, ...] = ()
    configuration: Mapping[str, Any] = field(default_factory=dict)
    post_install: Mapping[str, Any] = field(default_factory=dict)
    memento_version: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PackManifest":
        raw_components = data.get("components") or {}
        components = {
            t.plural: tuple(
                PackComponent.from_dict(c) for c in (raw_components.get(t.plural) or []) if isinstance(c, Mapping)
            )
            for t in COMPONENT_TYPES
        }
        return cls(
            name=str(data.get("name", "")),
            version=str(data.get("version", "")),
            description=str(data.get("description", "")),
            author=str(data.get("author", "")),
            category=data.get("category"),
            tags=tuple(str(t) for t in (data.get("tags") or [])),
            components=components,
            dependencies=tuple(str(d) for d in (data.get("dependencies") or [])),
            tool_dependencies=tuple(
                ToolDependency.from_dict(t) for t in (data.get("toolDependencies") or []) if isinstance(t, Mapping)
            ),
            configuration=dict(data.get("configuration") or {}),
            post_install=dict(data.get("postInstall") or {}),
            memento_version=data.get("mementoVersion"),
        )

    def iter_components(self) -> Iterator[Tuple[str, PackComponent]]:
        """Yield ``(plural type, component)`` in type-registry order."""
        for t in COMPONENT_TYPES:
            for component in self.components.get(t.plural, ()):
                yield t.plural, component

    @property
    def default_mode(self) -> Optional[str]:
        return self.configuration.get("defaultMode") or None

    @property
    def post_install_message(self) -> Optional[str]:
        return self.post_install.get("message") or None

    def summary(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "author": self.author,
            "category": self.category,
            "dependencies": list(self.dependencies),
            "components": {k: [c.name for c in v] for k, v in self.components.items()},
        }


@dataclass(frozen=True)
class PackStructure:
    manifest: PackManifest
    path: Path
    components_path: Path
    raw: Mapping[str, Any] = field(default_factory=dict)


__all__ = ["PackComponent", "ToolDependency", "PackManifest", "PackStructure"]
