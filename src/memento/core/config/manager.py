"""
Memento configuration management (layered YAML + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from memento.core.utils.io import iter_yaml_files, read_yaml
from memento.core.utils.merge import deep_merge
from memento.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "MEMENTO_"
CONFIG_DIR_NAME = ".memento"


class ConfigManager:
    """Load and merge memento configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: ``MEMENTO_<section>__<key>`` (type-coerced)
    2. Project config: ``<project>/.memento/config/*.yaml`` (alphabetical order)
    3. User config: ``~/.memento/config/*.yaml`` (alphabetical order)
    4. Bundled defaults: ``memento/data/config/*.yaml`` (alphabetical order)

    Only variables with a ``__`` separator are treated as overrides, so
    plain switches such as ``MEMENTO_PROJECT_ROOT`` never leak into config.
    """

    ARRAY_APPEND_MARKER = object()

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        if repo_root is None:
            from memento.core.utils.paths import resolve_project_root

            repo_root = resolve_project_root()
        self.repo_root = Path(repo_root)
        self.core_config_dir = get_data_path("config")
        self.user_config_dir = Path.home() / CONFIG_DIR_NAME / "config"
        self.project_config_dir = self.repo_root / CONFIG_DIR_NAME / "config"

    def config_dirs(self) -> List[Path]:
        """Return config directories in low to high precedence order."""
        return [self.core_config_dir, self.user_config_dir, self.project_config_dir]

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        data = read_yaml(path, default={}, raise_on_error=True)
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a YAML mapping")
        return data

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path in iter_yaml_files(directory):
            logger.debug("Loading config layer %s", path)
            cfg = deep_merge(cfg, self.load_yaml(path))
        return cfg

    # ---------- environment overrides ----------

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _parse_env_key(self, raw: str) -> List[Union[str, object]]:
        if "__" not in raw:
            return []
        processed: List[Union[str, object]] = []
        for seg in raw.split("__"):
            if seg == "":
                logger.warning("Ignoring malformed %s* key: %s%s", ENV_PREFIX, ENV_PREFIX, raw)
                return []
            if seg.upper() == "APPEND":
                processed.append(self.ARRAY_APPEND_MARKER)
            else:
                processed.append(seg.lower())
        return processed

    def _iter_env_overrides(self) -> Iterator[Tuple[List[Union[str, object]], Any]]:
        for key in sorted(os.environ):
            if not key.startswith(ENV_PREFIX):
                continue
            path = self._parse_env_key(key[len(ENV_PREFIX):])
            if path:
                yield path, self._coerce_type(os.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[Union[str, object]], value: Any) -> None:
        cur: Any = root
        for i, part in enumerate(path[:-1]):
            if part is self.ARRAY_APPEND_MARKER:
                raise ValueError("APPEND may only appear as the last segment")
            if not isinstance(cur, dict):
                raise ValueError("Path traverses non-dict container")
            nxt = path[i + 1]
            cur = cur.setdefault(part, [] if nxt is self.ARRAY_APPEND_MARKER else {})
        leaf = path[-1]
        if leaf is self.ARRAY_APPEND_MARKER:
            if not isinstance(cur, list):
                raise ValueError("APPEND requires list")
            cur.append(value)
            return
        if not isinstance(cur, dict):
            raise ValueError("Key assignment requires dict")
        cur[leaf] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, typed_value in self._iter_env_overrides():
            self._set_nested(cfg, path, typed_value)

    # ---------- loading ----------

    def load_config(self) -> Dict[str, Any]:
        """Load and merge configuration from all layers (uncached)."""
        cfg: Dict[str, Any] = {}
        for directory in self.config_dirs():
            cfg = self._load_directory(directory, cfg)
        self.apply_env_overrides(cfg)
        return cfg


__all__ = ["ConfigManager", "ENV_PREFIX", "CONFIG_DIR_NAME"]
