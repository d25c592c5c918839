"""
Project initialization command.

SUMMARY: Create the .memento directory, its component folders and the manifest.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from memento.cli import add_json_flag, add_verbose_flag, formatter
from memento.core.components.types import COMPONENT_TYPES
from memento.core.config.domains import LifecycleConfig, PathsConfig
from memento.core.exceptions import MementoError
from memento.core.manifest import Manifest, ManifestStore
from memento.core.utils.io import ensure_directory, write_text

SUMMARY = "Initialize memento in a project (creates .memento/ and the manifest)"

GITIGNORE = "# memento backups\n*/.backups/\n"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register CLI arguments for ``memento init``."""
    parser.add_argument(
        "project_path",
        nargs="?",
        default=".",
        help="Project directory to initialize (defaults to current directory)",
    )
    add_json_flag(parser)
    add_verbose_flag(parser)


def _ensure_structure(project_root: Path) -> Path:
    """Create the .memento layout and return its path."""
    project_dir = PathsConfig(repo_root=project_root).project_dir
    for ctype in COMPONENT_TYPES:
        ensure_directory(project_dir / ctype.directory)
    ensure_directory(project_dir / "config")

    gitignore = project_dir / ".gitignore"
    if not gitignore.exists():
        write_text(gitignore, GITIGNORE)
    return project_dir


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    # init defines the project root; it is never auto-detected
    project_root = Path(args.project_path).resolve()
    args.repo_root = str(project_root)
    try:
        project_dir = _ensure_structure(project_root)
        store = ManifestStore(project_dir, LifecycleConfig(repo_root=project_root).manifest_filename)
        created = not store.exists()
        if created:
            store.save(Manifest())
        message = (
            f"Initialized memento in {project_dir}"
            if created
            else f"memento already initialized in {project_dir}"
        )
        out.success(
            {"projectDir": str(project_dir), "manifest": str(store.path), "created": created},
            message,
        )
        return 0
    except MementoError as exc:
        out.error(exc, error_code="init_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
