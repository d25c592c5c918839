from __future__ import annotations

from pathlib import Path

import pytest

from helpers.builders import write
from memento.core.config.domains import FuzzyConfig, LifecycleConfig, LoggingConfig, PathsConfig, ToolsConfig
from memento.data import get_data_path


def test_paths_defaults(tmp_path: Path) -> None:
    paths = PathsConfig(repo_root=tmp_path)
    assert paths.project_dir == tmp_path / ".memento"
    assert paths.user_dir == Path.home() / ".memento"
    assert paths.templates_dir == get_data_path("templates")
    assert paths.starter_packs_dir == get_data_path("templates") / "starter-packs"


def test_relative_templates_dir_resolves_against_project(tmp_path: Path) -> None:
    write(tmp_path / ".memento" / "config" / "paths.yaml", "paths:\n  templates_dir: my-templates\n")
    assert PathsConfig(repo_root=tmp_path).templates_dir == tmp_path / "my-templates"


def test_lifecycle_and_fuzzy_values(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MEMENTO_lifecycle__manifest_filename", "components.json")
    monkeypatch.setenv("MEMENTO_fuzzy__auto_select_margin", "5")

    assert LifecycleConfig(repo_root=tmp_path).manifest_filename == "components.json"
    assert LifecycleConfig(repo_root=tmp_path).backups_dir == ".backups"
    fuzzy = FuzzyConfig(repo_root=tmp_path)
    assert fuzzy.auto_select_margin == 5
    assert fuzzy.min_score == 20
    assert fuzzy.include_metadata is True


def test_metadata_boost_can_be_switched_off(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MEMENTO_fuzzy__include_metadata", "false")
    assert FuzzyConfig(repo_root=tmp_path).include_metadata is False


def test_tools_allowlist_is_normalized(tmp_path: Path) -> None:
    tools = ToolsConfig(repo_root=tmp_path)
    assert tools.allowed["ast-grep"] == [("ast-grep", "--version"), ("sg", "--version")]
    assert tools.timeout_seconds == 5.0


def test_logging_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg = LoggingConfig(repo_root=tmp_path)
    assert cfg.level == "WARNING"
    assert cfg.file is None
    assert cfg.verbose is False

    monkeypatch.setenv("MEMENTO_logging__file", "logs/out.log")
    monkeypatch.setenv("MEMENTO_VERBOSE", "yes")
    cfg = LoggingConfig(repo_root=tmp_path)
    assert cfg.file == tmp_path / "logs" / "out.log"
    assert cfg.verbose is True
