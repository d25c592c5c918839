"""Shared utilities: atomic I/O, front matter, merging, time and paths."""
from __future__ import annotations

from .merge import deep_merge, merge_arrays
from .paths import resolve_project_root
from .time import filesystem_stamp, utc_now, utc_timestamp

__all__ = [
    "deep_merge",
    "merge_arrays",
    "resolve_project_root",
    "utc_now",
    "utc_timestamp",
    "filesystem_stamp",
]
