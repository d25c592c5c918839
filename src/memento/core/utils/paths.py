"""Project root resolution.

Resolution priority:
1. ``MEMENTO_PROJECT_ROOT`` environment variable
2. The nearest directory (cwd or a parent) containing the project marker
   directory (``.memento`` by default)
3. ``git rev-parse --show-toplevel``
4. The current working directory
"""
from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional

from ..exceptions import MementoError

logger = logging.getLogger(__name__)

PROJECT_ROOT_ENV = "MEMENTO_PROJECT_ROOT"
DEFAULT_MARKER = ".memento"


class ProjectRootError(MementoError):
    """Raised when an explicit project root is unusable."""

    default_hint = f"Unset {PROJECT_ROOT_ENV} or point it at an existing directory."


def _git_toplevel(cwd: Path) -> Optional[Path]:
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=str(cwd),
            text=True,
            capture_output=True,
            check=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.CalledProcessError, subprocess.TimeoutExpired):
        return None
    root = (result.stdout or "").strip()
    return Path(root).resolve() if root else None


def resolve_project_root(start: Optional[Path] = None, *, marker: str = DEFAULT_MARKER) -> Path:
    """Resolve the project root directory.

    Raises:
        ProjectRootError: If ``MEMENTO_PROJECT_ROOT`` points at a missing path
            or at the marker directory itself.
    """
    env_root = os.environ.get(PROJECT_ROOT_ENV)
    if env_root:
        path = Path(env_root).expanduser().resolve()
        if not path.is_dir():
            raise ProjectRootError(f"{PROJECT_ROOT_ENV} points at missing path: {path}")
        if path.name == marker:
            raise ProjectRootError(
                f"{PROJECT_ROOT_ENV} points to the {marker} directory: {path}. "
                "It must point to the project root."
            )
        return path

    cwd = (start or Path.cwd()).resolve()
    for candidate in (cwd, *cwd.parents):
        if (candidate / marker).is_dir() and candidate != Path.home():
            return candidate

    git_root = _git_toplevel(cwd)
    if git_root is not None:
        return git_root

    logger.debug("No project marker or git repository found; using %s", cwd)
    return cwd


__all__ = ["PROJECT_ROOT_ENV", "ProjectRootError", "resolve_project_root"]
