"""Component files: the type registry, front matter metadata and the content store."""
from __future__ import annotations

from .metadata import ComponentMetadata, parse_component_metadata
from .store import ContentStore, FileSystem, LocalFileSystem, content_hash
from .types import AGENT, COMPONENT_TYPES, MODE, WORKFLOW, ComponentType, get_component_type

__all__ = [
    "AGENT",
    "COMPONENT_TYPES",
    "MODE",
    "WORKFLOW",
    "ComponentMetadata",
    "ComponentType",
    "ContentStore",
    "FileSystem",
    "LocalFileSystem",
    "content_hash",
    "get_component_type",
    "parse_component_metadata",
]
