"""``memento pack ...`` against the test template source and the bundled packs."""
from __future__ import annotations

import json
from pathlib import Path

import yaml

from helpers.builders import write, write_pack
from memento.cli._dispatcher import main


def run_json(root: Path, capsys, *argv: str):
    code = main([*argv, "--json", "--repo-root", str(root)])
    return code, json.loads(capsys.readouterr().out)


def test_list_available_packs(cli_project: Path, templates_dir: Path, capsys) -> None:
    write_pack(templates_dir / "starter-packs", "core", category="general")
    code, payload = run_json(cli_project, capsys, "pack", "list")
    assert code == 0
    assert [p["name"] for p in payload["packs"]] == ["core"]
    assert payload["packs"][0]["components"]["modes"] == ["architect"]


def test_install_dry_run_then_real(cli_project: Path, templates_dir: Path, capsys) -> None:
    write_pack(
        templates_dir / "starter-packs",
        "core",
        components={"modes": [{"name": "engineer"}], "workflows": [{"name": "review"}]},
        configuration={"defaultMode": "engineer"},
    )

    code, payload = run_json(cli_project, capsys, "pack", "install", "core", "--dry-run")
    assert code == 0
    assert payload["status"] == "dry-run"
    assert payload["installed"]["modes"] == ["engineer", "reviewer"]
    assert not (cli_project / ".memento" / "manifest.json").exists()

    code, payload = run_json(cli_project, capsys, "pack", "install", "core")
    assert code == 0
    assert payload["status"] == "success"
    assert (cli_project / ".memento" / "workflows" / "review.md").is_file()
    project_cfg = yaml.safe_load((cli_project / ".memento" / "config" / "project.yaml").read_text(encoding="utf-8"))
    assert project_cfg["project"]["defaultMode"] == "engineer"

    code, payload = run_json(cli_project, capsys, "pack", "list", "--installed")
    assert list(payload["installed"]) == ["core"]


def test_install_invalid_pack_lists_issues(cli_project: Path, templates_dir: Path, capsys) -> None:
    write_pack(templates_dir / "starter-packs", "broken", components={"modes": [{"name": "nope"}]})
    assert main(["pack", "install", "broken", "--repo-root", str(cli_project)]) == 1
    err = capsys.readouterr().err
    assert "failed validation" in err
    assert "nope" in err


def test_validate_all_packs(cli_project: Path, templates_dir: Path, capsys) -> None:
    packs = templates_dir / "starter-packs"
    write_pack(packs, "good")
    write_pack(packs, "bad", name="Bad Name")
    write(packs / "garbage" / "manifest.json", "{")

    code, payload = run_json(cli_project, capsys, "pack", "validate")
    assert code == 1
    assert payload["status"] == "invalid"
    assert payload["packs"]["good"]["ok"] is True
    assert payload["packs"]["bad"]["ok"] is False
    assert payload["packs"]["garbage"]["ok"] is False

    code, payload = run_json(cli_project, capsys, "pack", "validate", "good")
    assert code == 0


def test_deps_reports_cycle(cli_project: Path, templates_dir: Path, capsys) -> None:
    packs = templates_dir / "starter-packs"
    write_pack(packs, "base")
    write_pack(packs, "web", dependencies=["base"])
    write_pack(packs, "p", dependencies=["q"])
    write_pack(packs, "q", dependencies=["p"])

    code, payload = run_json(cli_project, capsys, "pack", "deps", "web")
    assert code == 0
    assert payload["resolved"] == ["base"]

    code, payload = run_json(cli_project, capsys, "pack", "deps", "p")
    assert code == 1
    assert set(payload["circular"]) == {"p", "q"}


def test_unknown_pack(cli_project: Path, capsys) -> None:
    assert main(["pack", "deps", "missing", "--repo-root", str(cli_project)]) == 1
    assert "not found" in capsys.readouterr().err


def test_bundled_essentials_pack_dry_run(project_root: Path, monkeypatch, capsys) -> None:
    ran = []

    def fake_run(argv, timeout):
        ran.append(list(argv))
        raise FileNotFoundError(argv[0])

    monkeypatch.setattr("memento.core.packs.tools._run", fake_run)
    code, payload = run_json(project_root, capsys, "pack", "install", "essentials", "--dry-run", "--skip-optional")
    assert code == 0
    assert payload["installed"]["modes"] == ["architect", "engineer"]
    assert "summarize" in payload["skipped"]["workflows"]
    assert payload["postInstallMessage"].startswith("Essentials installed")
    assert ran == [["rg", "--version"]]
    assert payload["tools"][0]["available"] is False
