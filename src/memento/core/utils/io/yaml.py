"""YAML I/O utilities."""
from __future__ import annotations

import fcntl
from pathlib import Path
from typing import Any, TextIO

import yaml

from .core import atomic_write


def read_yaml(path: Path, default: Any = None, raise_on_error: bool = False) -> Any:
    """Read YAML with error handling.

    Returns ``default`` if the file is missing or invalid, unless
    ``raise_on_error`` is True.

    Examples:
        >>> config = read_yaml(Path("config.yaml"), default={})
        >>> assert isinstance(config, dict)
    """
    path = Path(path)
    if not path.exists():
        if raise_on_error:
            raise FileNotFoundError(f"File not found: {path}")
        return default

    try:
        with open(path, "r", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            try:
                data = yaml.safe_load(f)
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        return data if data is not None else default
    except (OSError, yaml.YAMLError):
        if raise_on_error:
            raise
        return default


def write_yaml(path: Path, data: Any) -> None:
    """Atomically write YAML data to ``path`` (keys in insertion order)."""

    def _writer(f: TextIO) -> None:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    atomic_write(Path(path), _writer)


def iter_yaml_files(dir_path: Path) -> list[Path]:
    """Return YAML files in ``dir_path`` in deterministic order.

    Includes both ``*.yml`` and ``*.yaml``; when both ``<name>.yaml`` and
    ``<name>.yml`` exist only the ``.yaml`` path is returned.
    """
    d = Path(dir_path)
    if not d.is_dir():
        return []
    yml_files = {p.stem: p for p in d.glob("*.yml")}
    yaml_files = {p.stem: p for p in d.glob("*.yaml")}

    out: list[Path] = []
    for stem in sorted(set(yml_files) | set(yaml_files)):
        out.append(yaml_files.get(stem) or yml_files[stem])
    return out


__all__ = [
    "read_yaml",
    "write_yaml",
    "iter_yaml_files",
]
