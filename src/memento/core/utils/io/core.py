"""Core I/O primitives for memento.

Every file memento writes (component copies, backups, the manifest) goes
through :func:`atomic_write`: temp file in the target directory, fsync, then
``os.replace``. Readers therefore never observe a half-written file.
"""
from __future__ import annotations

import fcntl
import os
import tempfile
from pathlib import Path
from typing import IO, Any, Callable, Optional, TextIO, Union

PathLike = Union[str, Path]


def ensure_parent_dir(path: Path) -> None:
    """Ensure the parent directory for ``path`` exists."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def ensure_directory(path: PathLike, create: bool = True) -> Path:
    """Ensure directory exists.

    Args:
        path: Directory path to check/create
        create: If True, create directory if missing; if False, raise if missing

    Raises:
        FileNotFoundError: If create=False and directory doesn't exist
        NotADirectoryError: If path exists but is not a directory
    """
    path = Path(path)

    if path.exists():
        if not path.is_dir():
            raise NotADirectoryError(f"Path exists but is not a directory: {path}")
        return path

    if not create:
        raise FileNotFoundError(f"Directory does not exist: {path}")
    path.mkdir(parents=True, exist_ok=True)
    return path


def atomic_write(
    path: PathLike,
    write_fn: Callable[[IO[Any]], None],
    *,
    encoding: str = "utf-8",
    binary: bool = False,
) -> None:
    """Write to ``path`` atomically using a temp file + fsync + rename.

    The parent directory is created if missing and any leftover temp file is
    removed when ``write_fn`` fails. With ``binary`` the temp file is opened
    in ``wb`` mode and ``encoding`` is ignored.
    """
    path = Path(path)
    ensure_parent_dir(path)

    tmp_path: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
            "wb" if binary else "w",
            encoding=None if binary else encoding,
            dir=str(path.parent),
            prefix=f".{path.name}.",
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            write_fn(f)
            f.flush()
            os.fsync(f.fileno())
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)

        os.replace(str(tmp_path), str(path))
    finally:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def read_text(path: PathLike) -> str:
    """Read a UTF-8 text file.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Text file not found: {path}")
    return path.read_text(encoding="utf-8")


def write_text(path: PathLike, content: str) -> None:
    """Atomically write UTF-8 text to ``path``."""

    def _writer(f: TextIO) -> None:
        f.write(content)

    atomic_write(Path(path), _writer)


def read_bytes(path: PathLike) -> bytes:
    """Read a file's raw bytes (no decoding, no newline translation).

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return path.read_bytes()


def write_bytes(path: PathLike, data: bytes) -> None:
    """Atomically write ``data`` to ``path`` byte for byte."""

    def _writer(f: IO[bytes]) -> None:
        f.write(data)

    atomic_write(Path(path), _writer, binary=True)


__all__ = [
    "PathLike",
    "ensure_parent_dir",
    "ensure_directory",
    "atomic_write",
    "read_text",
    "write_text",
    "read_bytes",
    "write_bytes",
]
