"""
Memento data resource helpers.

Locates bundled configuration files, schemas and the built-in template set
using importlib.resources.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path


def get_data_path(subpackage: str, filename: str = "") -> Path:
    """
    Get absolute path to a data file or directory.

    Args:
        subpackage: Name of the data subdirectory (e.g., "config", "templates")
        filename: Optional filename within the subdirectory

    Returns:
        Absolute path to the file or directory

    Example:
        >>> get_data_path("config", "defaults.yaml")
        PosixPath('/path/to/memento/data/config/defaults.yaml')
    """
    pkg = resources.files("memento.data")
    base = Path(str(pkg / subpackage))
    return base / filename if filename else base


__all__ = ["get_data_path"]
