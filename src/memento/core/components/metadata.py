"""Typed metadata extracted from component front matter."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Tuple

from memento.core.exceptions import ComponentMetadataError
from memento.core.utils.text import has_frontmatter, parse_frontmatter

REQUIRED_FIELDS = ("name", "description")


@dataclass(frozen=True)
class ComponentMetadata:
    name: str
    description: str
    author: Optional[str] = None
    version: Optional[str] = None
    tags: Tuple[str, ...] = field(default_factory=tuple)
    dependencies: Tuple[str, ...] = field(default_factory=tuple)
    tools: Tuple[str, ...] = field(default_factory=tuple)
    model: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ("tags", "dependencies", "tools"):
            data[key] = list(data[key])
        return data


def _as_str_tuple(value: Any, *, key: str, source: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    if isinstance(value, (list, tuple)):
        return tuple(str(item).strip() for item in value if str(item).strip())
    raise ComponentMetadataError(
        f"{source}: '{key}' must be a list or a comma-separated string",
        context={"source": source, "field": key},
    )


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_component_metadata(content: str, *, source: str = "<string>") -> ComponentMetadata:
    """Parse and validate the front matter block of a component document.

    Raises:
        ComponentMetadataError: If the block is missing, is not a YAML mapping,
            or lacks a required field
    """
    if not has_frontmatter(content):
        raise ComponentMetadataError(
            f"{source}: missing front matter block", context={"source": source}
        )
    try:
        doc = parse_frontmatter(content)
    except ValueError as exc:
        raise ComponentMetadataError(f"{source}: {exc}", context={"source": source}) from exc

    data = doc.frontmatter
    missing = [key for key in REQUIRED_FIELDS if not _optional_str(data.get(key))]
    if missing:
        raise ComponentMetadataError(
            f"{source}: missing required field(s): {', '.join(missing)}",
            context={"source": source, "missing": missing},
        )

    return ComponentMetadata(
        name=str(data["name"]).strip(),
        description=str(data["description"]).strip(),
        author=_optional_str(data.get("author")),
        version=_optional_str(data.get("version")),
        tags=_as_str_tuple(data.get("tags"), key="tags", source=source),
        dependencies=_as_str_tuple(data.get("dependencies"), key="dependencies", source=source),
        tools=_as_str_tuple(data.get("tools"), key="tools", source=source),
        model=_optional_str(data.get("model")),
    )


__all__ = ["ComponentMetadata", "parse_component_metadata", "REQUIRED_FIELDS"]
