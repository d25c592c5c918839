from __future__ import annotations

from pathlib import Path

import pytest

from helpers.builders import write, write_component
from memento.core.components.store import ContentStore, content_hash
from memento.core.exceptions import ComponentNotFoundError, ComponentReadError


def test_content_hash_is_deterministic_sha256():
    assert content_hash("hello") == content_hash("hello")
    assert content_hash("hello") == "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
    assert content_hash("hello") != content_hash("hello\n")
    assert ContentStore.content_hash("é") == content_hash("é")


def test_paths(store: ContentStore, project_root: Path, templates_dir: Path):
    assert store.template_path("mode", "architect") == templates_dir / "modes" / "architect.md"
    assert store.installed_path("workflows", "review") == project_root / ".memento" / "workflows" / "review.md"


def test_read_write_round_trip(store: ContentStore):
    store.write("mode", "architect", "content\n")
    assert store.is_installed("mode", "architect")
    assert store.read_installed("mode", "architect") == "content\n"


def test_missing_files_raise_not_found(store: ContentStore):
    with pytest.raises(ComponentNotFoundError):
        store.read_template("mode", "nope")
    with pytest.raises(ComponentNotFoundError) as exc:
        store.read_installed("mode", "architect")
    assert "memento component add mode architect" in exc.value.hint


def test_list_available_skips_broken_files(store: ContentStore, templates_dir: Path, caplog):
    write(templates_dir / "modes" / "broken.md", "no front matter\n")
    write(templates_dir / "modes" / "notes.txt", "ignored\n")
    names = [m.name for m in store.list_available("mode")]
    assert names == ["architect", "engineer", "reviewer"]
    assert "broken.md" in caplog.text


def test_list_available_on_missing_directory(tmp_path: Path):
    store = ContentStore(tmp_path / "project", tmp_path / "nowhere")
    assert store.list_available("agent") == []


def test_list_installed_only_sees_component_files(store: ContentStore):
    store.write("mode", "architect", "a")
    store.backup("mode", "architect", backups_dir=".backups", stamp="s1")
    assert store.list_installed("mode") == ["architect"]


def test_template_version(store: ContentStore, templates_dir: Path):
    assert store.template_version() == "1.0.0"
    write(templates_dir / "metadata.json", '{"version": "2.3.4"}')
    assert store.template_version() == "2.3.4"
    write(templates_dir / "metadata.json", "{not json")
    assert store.template_version() == "1.0.0"
    (templates_dir / "metadata.json").unlink()
    assert store.template_version() == "1.0.0"


def test_backup_copies_installed_file(store: ContentStore):
    store.write("agent", "research", "live")
    target = store.backup("agent", "research", backups_dir=".backups", stamp="2024-01-01T00-00-00Z")
    assert target == store.installed_dir("agent") / ".backups" / "2024-01-01T00-00-00Z" / "research.md"
    assert target.read_text(encoding="utf-8") == "live"


def test_metadata_helpers(store: ContentStore, templates_dir: Path):
    write_component(templates_dir, "modes", "odd", "Odd one")
    assert store.template_metadata("mode", "odd").description == "Odd one"
    assert store.template_metadata("mode", "missing") is None
    assert store.installed_metadata("mode", "odd") is None


def test_content_hash_covers_raw_bytes():
    assert content_hash(b"hello") == content_hash("hello")
    assert content_hash(b"a\r\nb") != content_hash(b"a\nb")
    assert content_hash(b"abc") != content_hash(b"abd")


def test_write_keeps_bytes_exactly(store: ContentStore):
    data = b"---\r\nname: x\r\ndescription: y\r\n---\r\n\xef\xbb\xbfbody"
    store.write("mode", "architect", data)
    assert store.read_installed_bytes("mode", "architect") == data
    assert store.installed_path("mode", "architect").read_bytes() == data


def test_undecodable_file_raises_read_error(store: ContentStore):
    store.write("mode", "architect", b"\xff\xfe bad")
    assert store.read_installed_bytes("mode", "architect") == b"\xff\xfe bad"
    with pytest.raises(ComponentReadError) as exc:
        store.read_installed("mode", "architect")
    assert "UTF-8" in exc.value.hint


def test_metadata_of_undecodable_files_is_skipped(store: ContentStore, templates_dir: Path, caplog):
    (templates_dir / "modes" / "zeta.md").write_bytes(b"\xff\xfe bad")
    store.write("mode", "architect", b"\xff\xfe bad")

    assert store.installed_metadata("mode", "architect") is None
    assert store.template_metadata("mode", "zeta") is None
    assert [m.name for m in store.list_available("mode")] == ["architect", "engineer", "reviewer"]
    assert "zeta.md" in caplog.text


def test_list_templates_is_keyed_by_file(store: ContentStore, templates_dir: Path):
    write(
        templates_dir / "modes" / "code-review.md",
        "---\nname: Code Reviewer\ndescription: Named differently\n---\n",
    )
    entries = {path.stem: meta.name for path, meta in store.list_templates("mode")}
    assert entries["code-review"] == "Code Reviewer"
