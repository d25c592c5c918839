"""Starter pack manifest validation.

Two passes: JSON Schema (Draft 2020-12) for shape, then structural and
security rules that a schema cannot express. Every finding becomes a
:class:`ValidationIssue`; the caller decides whether to stop.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from jsonschema import Draft202012Validator

from memento.core.components.types import COMPONENT_TYPES
from memento.core.utils.io import read_json
from memento.data import get_data_path

logger = logging.getLogger(__name__)

NAME_PATTERN = re.compile(r"^[a-z0-9-]+$")
MAX_NAME_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 500
MAX_COMPONENTS_PER_TYPE = 20
MEMENTO_VERSION_PATTERN = re.compile(r"\d+\.\d+\.\d+")

SUSPICIOUS_COMMANDS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"rm\s+-rf\s+/",
        r"\bsudo\b",
        r"chmod\s+777",
        r"curl\s+.*\|\s*(ba)?sh",
        r"wget\s+.*\|\s*(ba)?sh",
        r"\beval\b",
        r"\bexec\b",
        r"\bsystem\s*\(",
        r"`[^`]*`",
        r"\$\([^)]*\)",
        r"\bnohup\b",
        r"&\s*$",
    )
)

ComponentExists = Callable[[str, str], bool]


@dataclass
class ValidationIssue:
    path: str
    code: str
    message: str
    severity: str = "error"

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass
class ValidationResult:
    ok: bool
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity != "error"]

    def messages(self) -> List[str]:
        return [str(i) for i in self.errors]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "errors": [str(i) for i in self.errors],
            "warnings": [str(i) for i in self.warnings],
        }


def bundled_schema_path() -> Path:
    return get_data_path("schemas", "pack.schema.json")


@lru_cache(maxsize=8)
def _load_schema(path: str) -> Dict[str, Any]:
    schema = read_json(Path(path))
    Draft202012Validator.check_schema(schema)
    return schema


def load_schema(schema_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the pack schema, falling back to the bundled copy."""
    if schema_path is not None and Path(schema_path).is_file():
        return _load_schema(str(Path(schema_path).resolve()))
    if schema_path is not None:
        logger.debug("Pack schema %s not found; using the bundled schema", schema_path)
    return _load_schema(str(bundled_schema_path()))


def _schema_issues(raw: Mapping[str, Any], schema: Dict[str, Any]) -> List[ValidationIssue]:
    validator = Draft202012Validator(schema)
    issues = []
    for err in sorted(validator.iter_errors(raw), key=lambda e: [str(p) for p in e.path]):
        path = "/".join(str(p) for p in err.path) or "<root>"
        issues.append(ValidationIssue(path, "schema", err.message))
    return issues


def _rule_issues(raw: Mapping[str, Any]) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []

    name = raw.get("name")
    if isinstance(name, str):
        if len(name) > MAX_NAME_LENGTH:
            issues.append(
                ValidationIssue("name", "name-length", f"Pack name too long (max {MAX_NAME_LENGTH} characters)")
            )
        if not NAME_PATTERN.match(name):
            issues.append(
                ValidationIssue(
                    "name", "name-pattern", "Pack name must contain only lowercase letters, numbers, and hyphens"
                )
            )

    description = raw.get("description")
    if isinstance(description, str) and len(description) > MAX_DESCRIPTION_LENGTH:
        issues.append(
            ValidationIssue(
                "description",
                "description-length",
                f"Description too long (max {MAX_DESCRIPTION_LENGTH} characters)",
            )
        )

    version = raw.get("mementoVersion")
    if version is not None and not (isinstance(version, str) and MEMENTO_VERSION_PATTERN.fullmatch(version)):
        issues.append(
            ValidationIssue("mementoVersion", "memento-version", f"Invalid mementoVersion: {version!r}")
        )

    components = raw.get("components") if isinstance(raw.get("components"), Mapping) else {}
    for ctype in COMPONENT_TYPES:
        entries = components.get(ctype.plural) or []
        if not isinstance(entries, list):
            continue
        if len(entries) > MAX_COMPONENTS_PER_TYPE:
            issues.append(
                ValidationIssue(
                    f"components/{ctype.plural}",
                    "too-many-components",
                    f"Too many {ctype.plural} (max {MAX_COMPONENTS_PER_TYPE})",
                )
            )
        seen = set()
        for entry in entries:
            cname = entry.get("name") if isinstance(entry, Mapping) else None
            if not cname:
                continue
            if cname in seen:
                issues.append(
                    ValidationIssue(
                        f"components/{ctype.plural}", "duplicate-component", f"Duplicate component name: {cname}"
                    )
                )
            seen.add(cname)

    modes = [m.get("name") for m in (components.get("modes") or []) if isinstance(m, Mapping)]
    configuration = raw.get("configuration") if isinstance(raw.get("configuration"), Mapping) else {}
    default_mode = configuration.get("defaultMode")
    if default_mode and default_mode not in modes:
        issues.append(
            ValidationIssue(
                "configuration/defaultMode",
                "default-mode",
                f"Default mode '{default_mode}' not found in pack modes",
            )
        )
    if modes and not any(
        m.get("required", True) is not False for m in components.get("modes") or [] if isinstance(m, Mapping)
    ):
        issues.append(
            ValidationIssue("components/modes", "no-required-mode", "Pack has modes but none are required", "warning")
        )

    post_install = raw.get("postInstall") if isinstance(raw.get("postInstall"), Mapping) else {}
    for command in post_install.get("commands") or []:
        if any(p.search(str(command)) for p in SUSPICIOUS_COMMANDS):
            issues.append(
                ValidationIssue(
                    "postInstall/commands",
                    "suspicious-command",
                    f"Suspicious post-install command detected: {command}",
                )
            )

    declared_tools = {
        t.get("name") for t in (raw.get("toolDependencies") or []) if isinstance(t, Mapping)
    }
    for ctype in COMPONENT_TYPES:
        for entry in components.get(ctype.plural) or []:
            if not isinstance(entry, Mapping):
                continue
            for tool in entry.get("tools") or []:
                if tool not in declared_tools:
                    issues.append(
                        ValidationIssue(
                            f"components/{ctype.plural}/{entry.get('name')}",
                            "undeclared-tool",
                            f"Tool '{tool}' is not declared in toolDependencies",
                        )
                    )
    return issues


def _component_issues(raw: Mapping[str, Any], component_exists: ComponentExists) -> List[ValidationIssue]:
    issues = []
    components = raw.get("components") if isinstance(raw.get("components"), Mapping) else {}
    for ctype in COMPONENT_TYPES:
        for entry in components.get(ctype.plural) or []:
            cname = entry.get("name") if isinstance(entry, Mapping) else None
            if cname and not component_exists(ctype.plural, cname):
                issues.append(
                    ValidationIssue(
                        f"components/{ctype.plural}/{cname}",
                        "component-missing",
                        f"Component '{cname}' of type '{ctype.plural}' not found in pack or templates",
                    )
                )
    return issues


def validate_pack_manifest(
    raw: Mapping[str, Any],
    *,
    schema_path: Optional[Path] = None,
    component_exists: Optional[ComponentExists] = None,
) -> ValidationResult:
    """Validate a raw pack manifest.

    ``component_exists(plural, name)`` is consulted for every declared
    component when given.
    """
    issues = _schema_issues(raw, load_schema(schema_path))
    issues.extend(_rule_issues(raw))
    if component_exists is not None:
        issues.extend(_component_issues(raw, component_exists))
    ok = not any(i.severity == "error" for i in issues)
    return ValidationResult(ok, issues)


__all__ = [
    "ValidationIssue",
    "ValidationResult",
    "validate_pack_manifest",
    "load_schema",
    "bundled_schema_path",
]
