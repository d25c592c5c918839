from __future__ import annotations

from functools import cached_property
from typing import Dict, List, Tuple

from ..base import BaseDomainConfig


class ToolsConfig(BaseDomainConfig):
    """Allow-list of external tools memento may check, with their fixed argv."""

    def _config_section(self) -> str:
        return "tools"

    @cached_property
    def timeout_seconds(self) -> float:
        return float(self.section.get("timeout_seconds", 5))

    @cached_property
    def allowed(self) -> Dict[str, List[Tuple[str, ...]]]:
        raw = self.section.get("allowed") or {}
        out: Dict[str, List[Tuple[str, ...]]] = {}
        for name, commands in raw.items():
            out[str(name)] = [tuple(str(a) for a in argv) for argv in (commands or []) if argv]
        return out


__all__ = ["ToolsConfig"]
