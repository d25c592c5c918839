"""Installing and removing components, with cascading mode dependencies."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from helpers.builders import read_manifest, write, write_component
from memento.core.components.store import ContentStore, content_hash
from memento.core.exceptions import ComponentNotFoundError, DependencyError, InvalidComponentTypeError
from memento.core.lifecycle import ComponentInstaller
from memento.core.manifest import ManifestStore


def test_install_copies_template_and_records_version(installer, store, project_root, templates_dir):
    result = installer.install("mode", "architect")

    assert result.installed == [("mode", "architect")]
    installed = store.read_installed("mode", "architect")
    assert installed == (templates_dir / "modes" / "architect.md").read_text(encoding="utf-8")

    data = read_manifest(project_root)
    assert data["components"]["modes"] == ["architect"]
    record = data["versions"]["modes"]["architect"]
    assert record["version"] == "1.0.0"
    assert record["hash"] == content_hash(installed)
    assert record["lastUpdated"].endswith("Z")


def test_install_is_idempotent(installer, manifest_store, project_root):
    installer.install("mode", "architect")
    before = (project_root / ".memento" / "manifest.json").read_text(encoding="utf-8")

    result = installer.install("mode", "architect")

    assert result.skipped
    assert result.installed == []
    assert (project_root / ".memento" / "manifest.json").read_text(encoding="utf-8") == before
    assert manifest_store.load().installed("mode") == ["architect"]


def test_force_reinstalls_over_local_edits(installer, store, templates_dir):
    installer.install("mode", "architect")
    store.write("mode", "architect", "edited")
    result = installer.install("mode", "architect", force=True)
    assert not result.skipped
    assert store.read_installed("mode", "architect") == (templates_dir / "modes" / "architect.md").read_text(
        encoding="utf-8"
    )


def test_workflow_pulls_in_its_modes_first(installer, manifest_store):
    result = installer.install("workflow", "review")
    assert result.installed == [("mode", "reviewer"), ("workflow", "review")]
    manifest = manifest_store.load()
    assert manifest.installed("mode") == ["reviewer"]
    assert manifest.get_record("mode", "reviewer") is not None


def test_already_installed_dependency_is_not_rewritten(installer, store):
    installer.install("mode", "reviewer")
    store.write("mode", "reviewer", "---\nname: reviewer\ndescription: mine\n---\n")
    result = installer.install("workflow", "review")
    assert result.installed == [("workflow", "review")]
    assert "mine" in store.read_installed("mode", "reviewer")


def test_transitive_mode_dependencies(installer, templates_dir):
    write_component(templates_dir, "modes", "lead", "Leads", dependencies=["architect"])
    write_component(templates_dir, "workflows", "plan", "Planning", dependencies=["lead"])
    result = installer.install("workflow", "plan")
    assert result.installed == [("mode", "architect"), ("mode", "lead"), ("workflow", "plan")]


def test_missing_template_raises_not_found(installer):
    with pytest.raises(ComponentNotFoundError):
        installer.install("mode", "does-not-exist")


def test_unknown_type_raises(installer):
    with pytest.raises(InvalidComponentTypeError):
        installer.install("template", "architect")


def test_missing_mode_dependency_writes_nothing(installer, store, templates_dir, project_root):
    write_component(templates_dir, "workflows", "deploy", "Deploy", dependencies=["ops"])
    with pytest.raises(DependencyError) as exc:
        installer.install("workflow", "deploy")
    assert exc.value.missing == ["ops"]
    assert not store.is_installed("workflow", "deploy")
    assert not (project_root / ".memento" / "manifest.json").exists()


def test_mode_cycle_is_rejected_before_writing(installer, store, templates_dir):
    write_component(templates_dir, "modes", "ping", "Ping", dependencies=["pong"])
    write_component(templates_dir, "modes", "pong", "Pong", dependencies=["ping"])
    with pytest.raises(DependencyError) as exc:
        installer.install("mode", "ping")
    assert set(exc.value.circular) == {"ping", "pong"}
    assert store.list_installed("mode") == []


def test_mode_depending_on_itself(installer, templates_dir):
    write_component(templates_dir, "modes", "narcissus", "Self", dependencies=["narcissus"])
    with pytest.raises(DependencyError) as exc:
        installer.install("mode", "narcissus")
    assert exc.value.self_dependency == "narcissus"


def test_out_of_band_file_is_recorded_as_is(installer, store, manifest_store):
    store.write("agent", "custom", "---\nname: custom\ndescription: Hand made\n---\n")
    result = installer.install("agent", "custom")
    assert result.installed == [("agent", "custom")]
    assert manifest_store.load().get_record("agent", "custom").hash == content_hash(
        store.read_installed("agent", "custom")
    )


def test_install_from_explicit_source(installer, store, tmp_path):
    source = write(tmp_path / "elsewhere" / "special.md", "---\nname: special\ndescription: From disk\n---\n")
    installer.install("mode", "special", source=source)
    assert "From disk" in store.read_installed("mode", "special")

    with pytest.raises(ComponentNotFoundError):
        installer.install("mode", "other", source=tmp_path / "missing.md")


def test_install_copies_template_bytes_exactly(installer, store, templates_dir, manifest_store):
    raw = b"---\r\nname: crlf\r\ndescription: Windows line endings\r\n---\r\n# Crlf\r\n"
    (templates_dir / "modes" / "crlf.md").write_bytes(raw)

    installer.install("mode", "crlf")

    assert store.installed_path("mode", "crlf").read_bytes() == raw
    assert manifest_store.get_version("mode", "crlf").hash == content_hash(raw)


def test_supplied_modes_satisfy_dependencies(installer, store, tmp_path):
    source = write(
        tmp_path / "pack" / "flow.md",
        "---\nname: flow\ndescription: Needs a shipped mode\ndependencies: [shipped]\n---\n",
    )
    with pytest.raises(DependencyError):
        installer.plan_install("workflow", "flow", source=source)

    plan = installer.plan_install("workflow", "flow", source=source, supplied_modes={"shipped": ()})
    assert [(s.type, s.name) for s in plan.steps] == [("workflow", "flow")]


def test_plan_install_writes_nothing(installer, store, project_root):
    plan = installer.plan_install("workflow", "summarize")
    assert [(s.type, s.name, s.dependency) for s in plan.steps] == [
        ("mode", "architect", True),
        ("workflow", "summarize", False),
    ]
    assert plan.writes == [("mode", "architect"), ("workflow", "summarize")]
    assert store.list_installed("mode") == []
    assert not (project_root / ".memento" / "manifest.json").exists()


def test_remove_deletes_file_and_entries(installer, store, manifest_store, caplog):
    installer.install("workflow", "review")
    installer.remove("mode", "reviewer")

    assert not store.is_installed("mode", "reviewer")
    manifest = manifest_store.load()
    assert manifest.installed("mode") == []
    assert manifest.get_record("mode", "reviewer") is None
    assert "still required by workflow 'review'" in caplog.text


def test_remove_unknown_component(installer):
    with pytest.raises(ComponentNotFoundError):
        installer.remove("mode", "architect")


def test_listings(installer):
    installer.install("mode", "engineer")
    assert installer.list_installed() == {"modes": ["engineer"], "workflows": [], "agents": []}
    available = installer.list_available()
    assert [m.name for m in available["workflows"]] == ["review", "summarize"]


def test_validate_installed_dependencies(installer, manifest_store):
    installer.install("workflow", "review")
    assert installer.validate_installed_dependencies() == []

    manifest = manifest_store.load()
    manifest.remove_component("mode", "reviewer")
    manifest_store.save(manifest)

    issues = installer.validate_installed_dependencies()
    assert [(i.type, i.name, i.missing) for i in issues] == [("workflow", "review", ("reviewer",))]


def test_install_into_a_fresh_project(tmp_path: Path, templates_dir: Path):
    project = tmp_path / "fresh"
    installer = ComponentInstaller(ContentStore(project / ".memento", templates_dir), ManifestStore(project / ".memento"))
    installer.install("agent", "research")
    data = json.loads((project / ".memento" / "manifest.json").read_text(encoding="utf-8"))
    assert data["components"]["agents"] == ["research"]
