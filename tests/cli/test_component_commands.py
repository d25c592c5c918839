"""End-to-end runs of ``memento component ...`` against a temporary project."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from helpers.builders import read_manifest, set_template_version
from memento.cli._dispatcher import main
from memento.core.config import clear_all_caches


def run(root: Path, *argv: str) -> int:
    return main([*argv, "--repo-root", str(root)])


def run_json(root: Path, capsys, *argv: str):
    code = run(root, *argv, "--json")
    return code, json.loads(capsys.readouterr().out)


def test_add_resolves_fuzzy_name(cli_project: Path, capsys) -> None:
    code, payload = run_json(cli_project, capsys, "component", "add", "mode", "arch")
    assert code == 0
    assert payload["status"] == "success"
    assert payload["installed"] == [{"type": "mode", "name": "architect"}]
    assert (cli_project / ".memento" / "modes" / "architect.md").is_file()


def test_add_installs_required_modes(cli_project: Path, capsys) -> None:
    assert run(cli_project, "component", "add", "workflow", "review") == 0
    out = capsys.readouterr().out
    assert "Installed mode 'reviewer'" in out
    assert "Installed workflow 'review'" in out
    manifest = read_manifest(cli_project)
    assert manifest["components"]["modes"] == ["reviewer"]
    assert manifest["components"]["workflows"] == ["review"]


def test_add_twice_reports_skipped(cli_project: Path, capsys) -> None:
    run(cli_project, "component", "add", "mode", "engineer")
    capsys.readouterr()
    code, payload = run_json(cli_project, capsys, "component", "add", "mode", "engineer")
    assert code == 0
    assert payload["status"] == "skipped"


def test_add_from_explicit_source(cli_project: Path, tmp_path: Path, capsys) -> None:
    source = tmp_path / "custom.md"
    source.write_text("---\nname: custom\ndescription: Mine\n---\n# Custom\n", encoding="utf-8")
    assert run(cli_project, "component", "add", "agent", "custom", "--source", str(source)) == 0
    assert (cli_project / ".memento" / "agents" / "custom.md").read_text(encoding="utf-8").endswith("# Custom\n")


def test_add_installs_user_level_component(cli_project: Path, capsys) -> None:
    user_file = Path.home() / ".memento" / "modes" / "globalonly.md"
    user_file.parent.mkdir(parents=True, exist_ok=True)
    user_file.write_text("---\nname: globalonly\ndescription: Lives in the home directory\n---\n# Mine\n", encoding="utf-8")

    code, payload = run_json(cli_project, capsys, "component", "add", "mode", "globalonly")
    assert code == 0
    assert payload["installed"] == [{"type": "mode", "name": "globalonly"}]
    installed = cli_project / ".memento" / "modes" / "globalonly.md"
    assert installed.read_bytes() == user_file.read_bytes()


def test_list_installed_and_available(cli_project: Path, capsys) -> None:
    run(cli_project, "component", "add", "mode", "architect")
    capsys.readouterr()

    code, payload = run_json(cli_project, capsys, "component", "list", "mode")
    assert code == 0
    assert payload["installed"] == {"modes": ["architect"]}
    assert [m["name"] for m in payload["available"]["modes"]] == ["architect", "engineer", "reviewer"]

    code, payload = run_json(cli_project, capsys, "component", "list", "--installed")
    assert set(payload) == {"installed"}


def test_search_ranks_matches(cli_project: Path, capsys) -> None:
    code, payload = run_json(cli_project, capsys, "component", "search", "rev")
    assert code == 0
    names = [m["name"] for m in payload["matches"]]
    assert names[:2] == ["review", "reviewer"]
    assert payload["suggestions"] == []


def test_search_without_matches(cli_project: Path, capsys) -> None:
    assert run(cli_project, "component", "search", "qqqq") == 0
    assert "No components match 'qqqq'" in capsys.readouterr().out


def test_search_suggests_only_without_matches(cli_project: Path, capsys, monkeypatch) -> None:
    code, payload = run_json(cli_project, capsys, "component", "search", "reviewr")
    assert code == 0
    assert payload["matches"]
    assert payload["suggestions"] == []

    monkeypatch.setenv("MEMENTO_fuzzy__min_score", "95")
    clear_all_caches()
    code, payload = run_json(cli_project, capsys, "component", "search", "reviewr")
    assert code == 0
    assert payload["matches"] == []
    assert "reviewer" in payload["suggestions"]


def test_check_and_update_all(cli_project: Path, templates_dir: Path, capsys) -> None:
    run(cli_project, "component", "add", "mode", "architect")
    set_template_version(templates_dir, "1.1.0")
    capsys.readouterr()

    code, payload = run_json(cli_project, capsys, "component", "check")
    assert code == 0
    assert [(u["name"], u["latestVersion"]) for u in payload["updates"]] == [("architect", "1.1.0")]

    code, payload = run_json(cli_project, capsys, "component", "update")
    assert code == 0
    assert payload["status"] == "success"
    assert [u["name"] for u in payload["updated"]] == ["architect"]

    code, payload = run_json(cli_project, capsys, "component", "update", "mode", "architect")
    assert code == 0
    assert payload["status"] == "up-to-date"
    assert read_manifest(cli_project)["versions"]["modes"]["architect"]["version"] == "1.1.0"


def test_update_all_reports_local_changes(cli_project: Path, templates_dir: Path, capsys) -> None:
    run(cli_project, "component", "add", "mode", "architect")
    (cli_project / ".memento" / "modes" / "architect.md").write_text("edited by hand", encoding="utf-8")
    set_template_version(templates_dir, "1.1.0")
    capsys.readouterr()

    code, payload = run_json(cli_project, capsys, "component", "update")
    assert code == 1
    assert payload["status"] == "partial"
    assert payload["failed"][0]["code"] == "LocalModificationError"


def test_update_requires_name_with_type(cli_project: Path, capsys) -> None:
    assert run(cli_project, "component", "update", "mode") == 1


def test_diff_reports_identical(cli_project: Path, capsys) -> None:
    run(cli_project, "component", "add", "mode", "architect")
    capsys.readouterr()
    code, payload = run_json(cli_project, capsys, "component", "diff", "mode", "architect")
    assert code == 0
    assert payload["identical"] is True


def test_remove(cli_project: Path, capsys) -> None:
    run(cli_project, "component", "add", "mode", "engineer")
    assert run(cli_project, "component", "remove", "mode", "engineer") == 0
    assert not (cli_project / ".memento" / "modes" / "engineer.md").exists()
    assert read_manifest(cli_project)["components"]["modes"] == []


def test_remove_unknown_component_fails(cli_project: Path, capsys) -> None:
    assert run(cli_project, "component", "remove", "mode", "ghost") == 1
    assert "Component not installed" in capsys.readouterr().err


def test_conflicting_list_flags_are_rejected(cli_project: Path) -> None:
    with pytest.raises(SystemExit):
        run(cli_project, "component", "list", "--installed", "--available")
