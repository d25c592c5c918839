"""Depth-first dependency resolution with cycle and missing-node reporting.

One resolver serves both graphs memento cares about: component to mode
dependencies, and pack to pack dependencies. Callers supply ``lookup``,
which returns the dependency names of a known node or ``None`` for an
unknown one.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence, Set

logger = logging.getLogger(__name__)

Lookup = Callable[[str], Optional[Sequence[str]]]


@dataclass
class DependencyResult:
    """Outcome of a resolution.

    ``resolved`` is in dependency order (dependencies before dependents) and
    never contains a node that sits on a cycle.
    """

    resolved: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    circular: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing and not self.circular

    def errors(self) -> List[str]:
        out: List[str] = []
        if self.missing:
            out.append(f"Missing dependencies: {', '.join(self.missing)}")
        if self.circular:
            out.append(f"Circular dependencies: {', '.join(self.circular)}")
        return out


def _add_unique(items: List[str], value: str) -> None:
    if value not in items:
        items.append(value)


def resolve_dependencies(
    roots: Iterable[str],
    lookup: Lookup,
    *,
    include_roots: bool = True,
) -> DependencyResult:
    """Resolve the transitive dependencies of ``roots``.

    Meeting a node that is still being visited records every node of that
    cycle (from the revisited node to the top of the current path) in
    ``circular`` without descending again. Unknown nodes go to ``missing``.

    Example:
        >>> graph = {"a": ["b"], "b": []}
        >>> resolve_dependencies(["a"], graph.get).resolved
        ['b', 'a']
    """
    result = DependencyResult()
    visited: Set[str] = set()
    visiting: Set[str] = set()
    path: List[str] = []
    root_list = list(roots)

    def visit(name: str) -> None:
        if name in visiting:
            cycle = path[path.index(name):]
            logger.warning("Circular dependency detected: %s", " -> ".join([*cycle, name]))
            for node in cycle:
                _add_unique(result.circular, node)
            return
        if name in visited:
            return

        deps = lookup(name)
        if deps is None:
            logger.warning("Missing dependency: %s", name)
            _add_unique(result.missing, name)
            visited.add(name)
            return

        visiting.add(name)
        path.append(name)
        for dep in deps:
            visit(dep)
        path.pop()
        visiting.discard(name)
        visited.add(name)
        if name not in result.circular:
            result.resolved.append(name)

    for root in root_list:
        visit(root)

    if not include_roots:
        result.resolved = [n for n in result.resolved if n not in root_list]
    return result


def has_self_dependency(name: str, dependencies: Iterable[str]) -> bool:
    return name in set(dependencies)


__all__ = ["DependencyResult", "resolve_dependencies", "has_self_dependency", "Lookup"]
