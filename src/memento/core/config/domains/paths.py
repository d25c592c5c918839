"""Where memento keeps installed components, user components and templates."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path

from memento.data import get_data_path

from ..base import BaseDomainConfig


class PathsConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "paths"

    @cached_property
    def project_dir_name(self) -> str:
        return self._str("project_dir", ".memento")

    @cached_property
    def user_dir_name(self) -> str:
        return self._str("user_dir", ".memento")

    @cached_property
    def project_dir(self) -> Path:
        """Installation directory inside the project (``<root>/.memento``)."""
        return self.repo_root / self.project_dir_name

    @cached_property
    def user_dir(self) -> Path:
        """Per-user component directory (``~/.memento``)."""
        return Path.home() / self.user_dir_name

    @cached_property
    def templates_dir(self) -> Path:
        """Template source; the bundled set unless ``paths.templates_dir`` is set.

        Relative paths are resolved against the project root.
        """
        raw = str(self.section.get("templates_dir") or "").strip()
        if not raw:
            return get_data_path("templates")
        path = Path(raw).expanduser()
        return path if path.is_absolute() else (self.repo_root / path)

    @cached_property
    def starter_packs_dir(self) -> Path:
        return self.templates_dir / "starter-packs"


__all__ = ["PathsConfig"]
