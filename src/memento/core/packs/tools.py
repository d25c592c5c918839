"""External tool availability checks.

Only tools on the configured allow-list are ever run, each with the fixed
argv from that list. Nothing a pack declares is passed to a process, and no
shell is involved.
"""
from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from memento.core.exceptions import SecurityError

from .model import ToolDependency

logger = logging.getLogger(__name__)

Runner = Callable[[Sequence[str], float], "subprocess.CompletedProcess[str]"]


def _run(argv: Sequence[str], timeout: float) -> "subprocess.CompletedProcess[str]":
    return subprocess.run(
        list(argv),
        capture_output=True,
        text=True,
        timeout=timeout,
        check=False,
    )


@dataclass(frozen=True)
class ToolCheckResult:
    name: str
    available: bool
    version: Optional[str] = None
    required: bool = False
    install_command: Optional[str] = None
    allowed: bool = True

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "available": self.available,
            "version": self.version,
            "required": self.required,
            "allowed": self.allowed,
        }


class ToolDependencyChecker:
    def __init__(
        self,
        allowlist: Mapping[str, Sequence[Sequence[str]]],
        timeout: float = 5.0,
        *,
        runner: Optional[Runner] = None,
    ) -> None:
        self.allowlist: Dict[str, Tuple[Tuple[str, ...], ...]] = {
            name: tuple(tuple(argv) for argv in commands) for name, commands in allowlist.items()
        }
        self.timeout = timeout
        self._runner = runner or _run
        self._cache: Dict[str, ToolCheckResult] = {}

    @classmethod
    def from_config(cls, repo_root: Optional[Path] = None) -> "ToolDependencyChecker":
        from memento.core.config.domains import ToolsConfig

        cfg = ToolsConfig(repo_root=repo_root)
        return cls(cfg.allowed, cfg.timeout_seconds)

    def is_allowed(self, name: str) -> bool:
        return name in self.allowlist

    def ensure_allowed(self, name: str) -> Tuple[Tuple[str, ...], ...]:
        """Return the version commands for ``name``.

        Raises:
            SecurityError: If ``name`` is not on the allow-list
        """
        if not self.is_allowed(name):
            raise SecurityError(
                f"Tool '{name}' is not on the allow-list",
                context={"tool": name, "allowed": sorted(self.allowlist)},
            )
        return self.allowlist[name]

    def check(self, name: str) -> ToolCheckResult:
        if name in self._cache:
            return self._cache[name]
        result = ToolCheckResult(name=name, available=False)
        for argv in self.ensure_allowed(name):
            try:
                proc = self._runner(argv, self.timeout)
            except (OSError, subprocess.TimeoutExpired) as exc:
                logger.debug("Check %s failed: %s", " ".join(argv), exc)
                continue
            if proc.returncode == 0:
                lines = (proc.stdout or "").strip().splitlines()
                result = ToolCheckResult(name=name, available=True, version=lines[0] if lines else None)
                break
        self._cache[name] = result
        return result

    def check_dependencies(self, dependencies: Iterable[ToolDependency]) -> List[ToolCheckResult]:
        """Check declared tools; tools off the allow-list count as unavailable."""
        results: List[ToolCheckResult] = []
        for dep in dependencies:
            try:
                found = self.check(dep.name)
            except SecurityError as exc:
                logger.warning("%s; treating it as unavailable", exc)
                found = ToolCheckResult(name=dep.name, available=False, allowed=False)
            results.append(
                ToolCheckResult(
                    name=dep.name,
                    available=found.available,
                    version=found.version,
                    required=dep.required,
                    install_command=dep.install_command,
                    allowed=found.allowed,
                )
            )
        return results

    @staticmethod
    def installation_guidance(results: Iterable[ToolCheckResult]) -> List[str]:
        """Human-readable lines for every missing tool, required ones first."""
        missing = sorted((r for r in results if not r.available), key=lambda r: (not r.required, r.name))
        lines: List[str] = []
        for r in missing:
            label = "required" if r.required else "optional"
            line = f"Missing {label} tool '{r.name}'"
            if r.install_command:
                line += f"; install with: {r.install_command}"
            lines.append(line)
        return lines


__all__ = ["ToolDependencyChecker", "ToolCheckResult", "Runner"]
