"""Candidate catalog for fuzzy resolution.

Components are visible from three scopes: ``project`` (installed in the
project directory), ``global`` (the per-user ``~/.memento`` directory) and
``builtin`` (the template source).
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from memento.core.components.store import ContentStore
from memento.core.components.types import COMPONENT_TYPES, ComponentType, get_component_type
from memento.core.exceptions import ComponentMetadataError, ComponentReadError

from .fuzzy import Candidate, ComponentInfo

logger = logging.getLogger(__name__)


class ComponentCatalog:
    def __init__(self, store: ContentStore, user_dir: Optional[Path] = None) -> None:
        self.store = store
        self.user_dir = Path(user_dir) if user_dir is not None else None

    def _types(self, type_: object = None) -> Iterable[ComponentType]:
        if type_ is None:
            return COMPONENT_TYPES
        return (get_component_type(type_),)  # type: ignore[arg-type]

    def _project(self, ctype: ComponentType) -> List[Candidate]:
        out: List[Candidate] = []
        for name in self.store.list_installed(ctype):
            info = ComponentInfo(
                name=name,
                type=ctype.name,
                path=self.store.installed_path(ctype, name),
                metadata=self.store.installed_metadata(ctype, name),
            )
            out.append(Candidate(info, "project"))
        return out

    def _global(self, ctype: ComponentType) -> List[Candidate]:
        if self.user_dir is None:
            return []
        out: List[Candidate] = []
        for path in self.store.fs.list_dir(self.user_dir / ctype.directory):
            if path.suffix != ctype.extension:
                continue
            try:
                metadata = self.store.parse_metadata(self.store.read_file(path), source=str(path))
            except (ComponentMetadataError, ComponentReadError) as exc:
                logger.debug("Global component %s has no usable metadata: %s", path, exc)
                metadata = None
            out.append(Candidate(ComponentInfo(path.stem, ctype.name, path, metadata), "global"))
        return out

    def _builtin(self, ctype: ComponentType) -> List[Candidate]:
        # Templates are installed by file stem, whatever their front matter says
        return [
            Candidate(ComponentInfo(path.stem, ctype.name, path, meta), "builtin")
            for path, meta in self.store.list_templates(ctype)
        ]

    def candidates(self, type_: object = None) -> List[Candidate]:
        """All candidates of ``type_`` (every type when None), project scope first."""
        out: List[Candidate] = []
        for ctype in self._types(type_):
            out.extend(self._project(ctype))
            out.extend(self._global(ctype))
            out.extend(self._builtin(ctype))
        return out

    def available(self, type_: object = None) -> List[Candidate]:
        """Candidates that can be installed (global and builtin scopes)."""
        return [c for c in self.candidates(type_) if c.scope != "project"]

    def installed(self, type_: object = None) -> List[Candidate]:
        return [c for c in self.candidates(type_) if c.scope == "project"]


__all__ = ["ComponentCatalog"]
