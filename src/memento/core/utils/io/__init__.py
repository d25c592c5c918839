"""I/O utilities for memento.

- Core: atomic writes, directory management, text and byte I/O
- JSON: read/write/read-modify-write
- YAML: tolerant reads for configuration
"""
from __future__ import annotations

from .core import (
    PathLike,
    atomic_write,
    ensure_directory,
    ensure_parent_dir,
    read_bytes,
    read_text,
    write_bytes,
    write_text,
)
from .json import (
    read_json,
    update_json,
    write_json_atomic,
)
from .yaml import (
    iter_yaml_files,
    read_yaml,
    write_yaml,
)

__all__ = [
    # core
    "PathLike",
    "ensure_parent_dir",
    "ensure_directory",
    "atomic_write",
    "read_text",
    "write_text",
    "read_bytes",
    "write_bytes",
    # json
    "read_json",
    "write_json_atomic",
    "update_json",
    # yaml
    "read_yaml",
    "write_yaml",
    "iter_yaml_files",
]
