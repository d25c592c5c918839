"""Registry of component types.

Each type maps to a directory (its plural name) and a file extension under
both the template source and the project installation directory.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from memento.core.exceptions import InvalidComponentTypeError


@dataclass(frozen=True)
class ComponentType:
    name: str
    directory: str
    extension: str = ".md"
    # Whether the type may declare mode dependencies in its front matter
    has_dependencies: bool = True

    @property
    def plural(self) -> str:
        return self.directory

    def filename(self, component: str) -> str:
        return f"{component}{self.extension}"


MODE = ComponentType("mode", "modes")
WORKFLOW = ComponentType("workflow", "workflows")
AGENT = ComponentType("agent", "agents")

COMPONENT_TYPES: Tuple[ComponentType, ...] = (MODE, WORKFLOW, AGENT)

_BY_NAME: Dict[str, ComponentType] = {}
for _t in COMPONENT_TYPES:
    _BY_NAME[_t.name] = _t
    _BY_NAME[_t.directory] = _t


def get_component_type(value: "str | ComponentType") -> ComponentType:
    """Return the registered type for ``value`` (singular or plural name).

    Raises:
        InvalidComponentTypeError: If the type is not registered
    """
    if isinstance(value, ComponentType):
        return value
    key = str(value or "").strip().lower()
    try:
        return _BY_NAME[key]
    except KeyError:
        valid = ", ".join(t.name for t in COMPONENT_TYPES)
        raise InvalidComponentTypeError(
            f"Invalid component type: {value!r}",
            hint=f"Valid component types are: {valid}.",
            context={"type": value},
        ) from None


def type_names() -> Tuple[str, ...]:
    return tuple(t.name for t in COMPONENT_TYPES)


__all__ = [
    "ComponentType",
    "MODE",
    "WORKFLOW",
    "AGENT",
    "COMPONENT_TYPES",
    "get_component_type",
    "type_names",
]
