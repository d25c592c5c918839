"""Centralized configuration caching.

Loaded configuration is cached per project root. The cache key includes a
fingerprint of ``MEMENTO_*`` variables and config file mtimes so that tests
and long-running processes never see stale values.
"""
from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any, Dict, Optional

_config_cache: Dict[str, Dict[str, Any]] = {}


def _normalize_repo_root(repo_root: Optional[Path]) -> Path:
    if repo_root is None:
        from memento.core.utils.paths import resolve_project_root

        return resolve_project_root()
    return Path(repo_root).expanduser().resolve()


def _fingerprint_dir(d: Path) -> list[tuple[str, int, int]]:
    from memento.core.utils.io import iter_yaml_files

    files: list[tuple[str, int, int]] = []
    for p in iter_yaml_files(d):
        st = p.stat()
        files.append((p.name, int(st.st_mtime_ns), int(st.st_size)))
    return files


def _cache_key(repo_root: Path) -> str:
    from .manager import CONFIG_DIR_NAME, ENV_PREFIX

    env_items = sorted((k, v) for k, v in os.environ.items() if k.startswith(ENV_PREFIX))
    env_fp = hashlib.sha256(repr(env_items).encode("utf-8")).hexdigest()[:12]

    cfg_files = {
        "user": _fingerprint_dir(Path.home() / CONFIG_DIR_NAME / "config"),
        "project": _fingerprint_dir(repo_root / CONFIG_DIR_NAME / "config"),
    }
    cfg_fp = hashlib.sha256(repr(cfg_files).encode("utf-8")).hexdigest()[:12]
    return f"{repo_root}:env={env_fp}:cfg={cfg_fp}"


def get_cached_config(repo_root: Optional[Path] = None) -> Dict[str, Any]:
    """Get configuration with caching.

    Returns the same dict instance for the same root and fingerprint; treat
    it as immutable.
    """
    normalized_root = _normalize_repo_root(repo_root)
    key = _cache_key(normalized_root)
    if key not in _config_cache:
        from .manager import ConfigManager

        _config_cache[key] = ConfigManager(repo_root=normalized_root).load_config()
    return _config_cache[key]


def clear_all_caches() -> None:
    """Clear the cached configuration for every project root."""
    _config_cache.clear()


__all__ = ["get_cached_config", "clear_all_caches"]
