from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'memento' and tests/ importable for helpers
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from helpers.builders import build_project, build_templates  # noqa: E402
from memento.core.components.store import ContentStore  # noqa: E402
from memento.core.config import clear_all_caches  # noqa: E402
from memento.core.lifecycle import ComponentInstaller, UpdateManager  # noqa: E402
from memento.core.logging import reset_logging  # noqa: E402
from memento.core.manifest import ManifestStore  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path_factory, monkeypatch):
    """Fresh caches, a private HOME and no leaked MEMENTO_* variables."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("MEMENTO_"):
            monkeypatch.delenv(key, raising=False)
    clear_all_caches()
    yield
    clear_all_caches()
    reset_logging()


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """Template source with the standard modes, workflows and agents."""
    return build_templates(tmp_path / "templates")


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    return build_project(tmp_path / "project")


@pytest.fixture
def store(project_root: Path, templates_dir: Path) -> ContentStore:
    return ContentStore(project_root / ".memento", templates_dir)


@pytest.fixture
def manifest_store(project_root: Path) -> ManifestStore:
    return ManifestStore(project_root / ".memento")


@pytest.fixture
def installer(store: ContentStore, manifest_store: ManifestStore) -> ComponentInstaller:
    return ComponentInstaller(store, manifest_store)


@pytest.fixture
def updater(store: ContentStore, manifest_store: ManifestStore) -> UpdateManager:
    return UpdateManager(store, manifest_store)


@pytest.fixture
def cli_project(project_root: Path, templates_dir: Path) -> Path:
    """Project whose config points the template source at ``templates_dir``."""
    config = project_root / ".memento" / "config" / "paths.yaml"
    config.parent.mkdir(parents=True, exist_ok=True)
    config.write_text(f"paths:\n  templates_dir: {templates_dir}\n", encoding="utf-8")
    return project_root
