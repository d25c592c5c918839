"""JSON I/O utilities with atomic writes."""
from __future__ import annotations

import fcntl
import json
from pathlib import Path
from typing import Any, Callable, Dict, TextIO

from .core import atomic_write

DEFAULT_JSON_CONFIG: Dict[str, Any] = {
    "indent": 2,
    "sort_keys": False,
    "ensure_ascii": False,
    "encoding": "utf-8",
}


def _json_writer(data: Any, cfg: Dict[str, Any]) -> Callable[[TextIO], None]:
    def _writer(f: TextIO) -> None:
        json.dump(
            data,
            f,
            indent=cfg["indent"],
            sort_keys=cfg["sort_keys"],
            ensure_ascii=cfg["ensure_ascii"],
        )
        f.write("\n")

    return _writer


_MISSING = object()  # Sentinel for unset default


def read_json(file_path: Path | str, *, default: Any = _MISSING) -> Any:
    """Read JSON with a shared lock.

    Args:
        file_path: Path to JSON file
        default: Value to return if the file doesn't exist. If not provided,
            FileNotFoundError is raised.

    Raises:
        FileNotFoundError: If the file does not exist and no default is provided
        json.JSONDecodeError: If the file is not valid JSON
    """
    path = Path(file_path)
    if not path.exists():
        if default is not _MISSING:
            return default
        raise FileNotFoundError(f"JSON file not found: {path}")

    with open(path, "r", encoding=DEFAULT_JSON_CONFIG["encoding"]) as f:
        fcntl.flock(f.fileno(), fcntl.LOCK_SH)
        try:
            data = json.load(f)
        finally:
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    return data


def write_json_atomic(
    file_path: Path | str,
    data: Any,
    *,
    indent: int | None = None,
    sort_keys: bool | None = None,
) -> None:
    """Atomically write JSON to ``file_path``."""
    cfg = DEFAULT_JSON_CONFIG.copy()
    if indent is not None:
        cfg["indent"] = indent
    if sort_keys is not None:
        cfg["sort_keys"] = sort_keys

    atomic_write(Path(file_path), _json_writer(data, cfg), encoding=cfg["encoding"])


def update_json(
    file_path: Path | str,
    update_fn: Callable[[Dict[str, Any]], Dict[str, Any] | None],
) -> Dict[str, Any]:
    """Read-modify-write helper with atomic replacement.

    ``update_fn`` receives the current document (``{}`` when the file is
    missing) and returns the updated one; returning None keeps the current
    data. No lock is held between the read and the write.

    Returns:
        The document that was written.
    """
    path = Path(file_path)

    current: Dict[str, Any] = {}
    if path.exists():
        current_obj = read_json(path)
        if isinstance(current_obj, dict):
            current = dict(current_obj)
        else:
            current = {"value": current_obj}

    updated = update_fn(current)
    if updated is None:
        updated = current

    write_json_atomic(path, updated)
    return updated


__all__ = [
    "DEFAULT_JSON_CONFIG",
    "read_json",
    "write_json_atomic",
    "update_json",
]
