from __future__ import annotations

import json

import pytest

from helpers.builders import write, write_pack
from memento.core.exceptions import PackNotFoundError, PackValidationError
from memento.core.packs import LocalPackSource


@pytest.fixture
def packs_dir(tmp_path):
    root = tmp_path / "starter-packs"
    write_pack(root, "alpha")
    write(root / "beta.json", json.dumps({"name": "beta", "version": "0.1.0"}))
    write(root / "schema.json", "{}")
    (root / "empty-dir").mkdir()
    return root


def test_list_packs_supports_both_layouts(packs_dir):
    source = LocalPackSource(packs_dir)
    assert source.list_packs() == ["alpha", "beta"]
    assert source.has_pack("beta")
    assert not source.has_pack("schema")
    assert not source.has_pack("../alpha")


def test_list_packs_on_missing_root(tmp_path):
    assert LocalPackSource(tmp_path / "nowhere").list_packs() == []


def test_load_pack(packs_dir):
    structure = LocalPackSource(packs_dir).load_pack("alpha")
    assert structure.manifest.name == "alpha"
    assert structure.path == packs_dir / "alpha"
    assert structure.components_path == packs_dir / "alpha" / "components"
    assert [c.name for _, c in structure.manifest.iter_components()] == ["architect"]


def test_unknown_pack(packs_dir):
    with pytest.raises(PackNotFoundError):
        LocalPackSource(packs_dir).load_pack("gamma")


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_unreadable_manifest(packs_dir, content):
    write(packs_dir / "broken" / "manifest.json", content)
    with pytest.raises(PackValidationError) as exc:
        LocalPackSource(packs_dir).load_raw("broken")
    assert exc.value.issues


def test_pack_component_files(packs_dir):
    source = LocalPackSource(packs_dir)
    structure = source.load_pack("alpha")
    assert not source.has_component(structure, "modes", "custom")
    write(packs_dir / "alpha" / "components" / "modes" / "custom.md", "x")
    assert source.has_component(structure, "modes", "custom")
