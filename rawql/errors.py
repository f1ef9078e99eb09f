"""Custom exception hierarchy for rawql.

All public errors inherit from RawQLError so callers can catch the base
class for any rawql-specific failure.
"""
from __future__ import annotations

from typing import Any


class RawQLError(Exception):
    """Base exception for all rawql errors."""


class TemplateError(RawQLError):
    """Raised when a SQL template cannot be compiled.

    Args:
        message: Human-readable description.
        code: Machine-readable error code (e.g. INVALID_TEMPLATE).
        details: Extra context identifying the offending template text.
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details: dict[str, Any] = details or {}

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response for API callers."""
        return {
            "error": self.code,
            "message": str(self),
            "details": self.details,
        }


class InvalidTemplateError(TemplateError):
    """Raised when a placeholder, fragment reference, or loop block is malformed.

    Args:
        message: Human-readable description.
        match: The raw template text that failed to compile.
    """

    def __init__(self, message: str, match: str) -> None:
        super().__init__(
            f"{message} {match}",
            code="INVALID_TEMPLATE",
            details={"match": match},
        )
        self.match = match


class MissingParamError(TemplateError):
    """Raised when a loop block iterates over a parameter that was never added."""

    def __init__(self, param: str) -> None:
        super().__init__(
            f"Parameter '{param}' is required by an or_loop block but was not provided.",
            code="MISSING_PARAM",
            details={"param": param},
        )
        self.param = param


class ParamTypeError(TemplateError):
    """Raised when a loop block parameter is not a sequence."""

    def __init__(self, param: str, value: Any) -> None:
        type_name = type(value).__name__
        super().__init__(
            f"Parameter '{param}' must be a sequence to be used in an or_loop block, "
            f"got {type_name}.",
            code="PARAM_TYPE_MISMATCH",
            details={"param": param, "type": type_name},
        )
        self.param = param


class FragmentNotFoundError(TemplateError):
    """Raised when the template references a fragment that was never registered."""

    def __init__(self, fragment: str, registered: list[str]) -> None:
        super().__init__(
            f"Fragment '{fragment}' is not registered.",
            code="FRAGMENT_NOT_FOUND",
            details={"fragment": fragment, "registered_fragments": registered},
        )
        self.fragment = fragment


class SourceNotFoundError(RawQLError):
    """Raised when a TemplateSource has no file for the requested logical name.

    Args:
        kind: ``'template'`` or ``'fragment'``.
        name: The logical name requested.
    """

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"{kind.capitalize()} \"{name}\" not found")
        self.kind = kind
        self.name = name


class SourceConfigError(RawQLError):
    """Raised when a TemplateSource is misconfigured.

    Detected when the source is constructed, before any file is read, so the
    developer gets an actionable message instead of an empty source.

    Args:
        message: Human-readable description.
        pattern: The glob pattern that was rejected.
        marker: The marker segment the pattern must contain.
    """

    def __init__(self, message: str, pattern: str, marker: str) -> None:
        super().__init__(message)
        self.pattern = pattern
        self.marker = marker


class CompilationError(RawQLError):
    """Raised when the compiler is set up incorrectly (e.g. unknown style)."""
