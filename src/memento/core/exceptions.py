from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional


class MementoError(Exception):
    """Base exception for memento.

    Every error carries a human-readable ``hint`` telling the user what to do
    next, plus an optional ``context`` mapping for machine consumers.
    """

    context: Dict[str, Any]
    default_hint: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        hint: Optional[str] = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.hint = hint if hint is not None else self.default_hint
        if context is not None:
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        payload: Dict[str, Any] = {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }
        if self.hint:
            payload["hint"] = self.hint
        return payload


class NotFoundError(MementoError, LookupError):
    """Raised when a component, template or pack cannot be found."""

    default_hint = "Run 'memento component list' to see what is available."


class ComponentNotFoundError(NotFoundError):
    """Raised when a component is neither installed nor available."""

    def __init__(
        self,
        message: str = "",
        *,
        suggestions: Iterable[str] = (),
        hint: Optional[str] = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.suggestions: List[str] = list(suggestions)
        if hint is None and self.suggestions:
            hint = "Did you mean: " + ", ".join(self.suggestions) + "?"
        ctx = dict(context or {})
        if self.suggestions:
            ctx["suggestions"] = list(self.suggestions)
        super().__init__(message, hint=hint, context=ctx)


class ComponentRemovedUpstreamError(NotFoundError):
    """Raised when an installed component no longer exists in the template source."""

    default_hint = (
        "The installed copy was left untouched. Remove it with "
        "'memento component remove' if it is no longer needed."
    )


class ComponentReadError(MementoError):
    """Raised when a component file cannot be read or is not valid UTF-8."""

    default_hint = "Check the file permissions; component files must be UTF-8 text."


class PackNotFoundError(NotFoundError):
    """Raised when a starter pack is not present in the pack source."""

    default_hint = "Run 'memento pack list' to see the available packs."


class LocalModificationError(MementoError):
    """Raised when an operation would overwrite locally modified content."""

    default_hint = "Re-run with --force to overwrite (a backup is kept), or diff first."


class ValidationError(MementoError, ValueError):
    """Raised when input data (types, metadata, manifests, packs) is invalid."""

    def __init__(
        self,
        message: str = "",
        *,
        hint: Optional[str] = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        MementoError.__init__(self, message, hint=hint, context=context)
        ValueError.__init__(self, message)


class InvalidComponentTypeError(ValidationError):
    """Raised for a component type outside the registry."""

    default_hint = "Valid component types are: mode, workflow, agent."


class ComponentMetadataError(ValidationError):
    """Raised when component front matter is missing or malformed."""

    default_hint = (
        "Component files must start with a '---' YAML block that declares "
        "at least 'name' and 'description'."
    )


class PackValidationError(ValidationError):
    """Raised when a pack manifest fails schema or structural validation."""

    default_hint = "Run 'memento pack validate <name>' for the full list of issues."

    def __init__(
        self,
        message: str = "",
        *,
        issues: Iterable[str] = (),
        hint: Optional[str] = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.issues: List[str] = list(issues)
        ctx = dict(context or {})
        if self.issues:
            ctx["issues"] = list(self.issues)
        super().__init__(message, hint=hint, context=ctx)


class ManifestError(ValidationError):
    """Raised when the project manifest cannot be read."""

    default_hint = (
        "Fix or delete .memento/manifest.json; it is rebuilt on the next install."
    )


class AmbiguousComponentError(MementoError):
    """Raised when a fuzzy query matches several components equally well."""

    default_hint = "Use the exact component name."

    def __init__(
        self,
        message: str = "",
        *,
        candidates: Iterable[str] = (),
        hint: Optional[str] = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.candidates: List[str] = list(candidates)
        ctx = dict(context or {})
        ctx["candidates"] = list(self.candidates)
        super().__init__(message, hint=hint, context=ctx)


class DependencyError(MementoError):
    """Raised when a dependency graph cannot be satisfied.

    ``missing`` and ``circular`` are reported verbatim from the resolver;
    ``self_dependency`` names a node that lists itself.
    """

    default_hint = "Install or fix the listed dependencies, then retry."

    def __init__(
        self,
        message: str = "",
        *,
        missing: Iterable[str] = (),
        circular: Iterable[str] = (),
        self_dependency: Optional[str] = None,
        hint: Optional[str] = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.missing: List[str] = list(missing)
        self.circular: List[str] = list(circular)
        self.self_dependency = self_dependency
        ctx = dict(context or {})
        ctx.update(
            {
                "missing": list(self.missing),
                "circular": list(self.circular),
            }
        )
        if self_dependency:
            ctx["self_dependency"] = self_dependency
        super().__init__(message, hint=hint, context=ctx)


class SecurityError(MementoError):
    """Raised when a tool check or command falls outside the allow-list."""

    default_hint = "Only tools listed under 'tools.allowed' in the config can be checked."


__all__ = [
    "MementoError",
    "NotFoundError",
    "ComponentNotFoundError",
    "ComponentRemovedUpstreamError",
    "ComponentReadError",
    "PackNotFoundError",
    "LocalModificationError",
    "ValidationError",
    "InvalidComponentTypeError",
    "ComponentMetadataError",
    "PackValidationError",
    "ManifestError",
    "AmbiguousComponentError",
    "DependencyError",
    "SecurityError",
]
