from __future__ import annotations

import json
from pathlib import Path

import pytest

from memento.core.utils.io import (
    atomic_write,
    ensure_directory,
    iter_yaml_files,
    read_json,
    read_text,
    read_yaml,
    update_json,
    write_json_atomic,
    write_text,
    write_yaml,
)


def test_write_text_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "file.md"
    write_text(target, "hello")
    assert read_text(target) == "hello"


def test_failed_atomic_write_leaves_target_and_no_temp(tmp_path: Path) -> None:
    target = tmp_path / "file.md"
    write_text(target, "original")

    def boom(f):
        f.write("partial")
        raise RuntimeError("fail")

    with pytest.raises(RuntimeError):
        atomic_write(target, boom)

    assert target.read_text(encoding="utf-8") == "original"
    assert [p.name for p in tmp_path.iterdir()] == ["file.md"]


def test_read_text_missing(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        read_text(tmp_path / "nope.md")


def test_json_roundtrip_and_default(tmp_path: Path) -> None:
    path = tmp_path / "data.json"
    assert read_json(path, default={}) == {}
    write_json_atomic(path, {"b": 1, "a": "é"})
    raw = path.read_text(encoding="utf-8")
    assert raw.endswith("\n")
    assert "é" in raw
    assert list(json.loads(raw)) == ["b", "a"]


def test_update_json(tmp_path: Path) -> None:
    path = tmp_path / "data.json"

    def add(doc):
        doc["count"] = doc.get("count", 0) + 1
        return doc

    update_json(path, add)
    assert update_json(path, add) == {"count": 2}
    assert update_json(path, lambda doc: None) == {"count": 2}


def test_yaml_helpers(tmp_path: Path) -> None:
    path = tmp_path / "conf" / "x.yaml"
    write_yaml(path, {"z": 1, "a": [1, 2]})
    assert path.read_text(encoding="utf-8").startswith("z: 1")
    assert read_yaml(path) == {"z": 1, "a": [1, 2]}
    assert read_yaml(tmp_path / "missing.yaml", default={}) == {}

    (tmp_path / "conf" / "bad.yaml").write_text("a: [", encoding="utf-8")
    assert read_yaml(tmp_path / "conf" / "bad.yaml", default="fallback") == "fallback"


def test_iter_yaml_files_order(tmp_path: Path) -> None:
    for name in ("b.yml", "a.yaml", "a.yml", "notes.txt"):
        (tmp_path / name).write_text("{}", encoding="utf-8")
    assert [p.name for p in iter_yaml_files(tmp_path)] == ["a.yaml", "b.yml"]
    assert iter_yaml_files(tmp_path / "missing") == []


def test_ensure_directory(tmp_path: Path) -> None:
    created = ensure_directory(tmp_path / "x" / "y")
    assert created.is_dir()
    with pytest.raises(FileNotFoundError):
        ensure_directory(tmp_path / "absent", create=False)
    (tmp_path / "file").write_text("", encoding="utf-8")
    with pytest.raises(NotADirectoryError):
        ensure_directory(tmp_path / "file")
