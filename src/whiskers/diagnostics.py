"""Diagnostic types shared by every compiler stage.

A ``Diagnostic`` is an annotated message attached to a source location.
The lexer, parser, validator and compiler facade all report problems as
diagnostics; none of them raise to the caller.  ``Diagnostic.to_dict``
produces the stable wire shape consumed by editor integrations::

    {"code": "E202", "message": "...", "line": 3, "column": 5,
     "severity": "error", "suggestion": "..."}
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Final

from whiskers.ast.nodes import Span


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostics."""

    ERROR = auto()
    WARNING = auto()
    INFO = auto()


class ErrorCode:
    """Namespace of diagnostic codes.

    ``E0xx`` are lexical, ``E1xx`` structural, ``E2xx`` type errors,
    ``E3xx`` semantic errors and ``W4xx`` asset warnings.
    """

    INVALID_BRACKET: Final = "E001"
    INVALID_CURLY_BRACKET: Final = "E003"
    EMPTY_PARENTHESES: Final = "E004"
    UNTERMINATED_STRING: Final = "E005"
    INCONSISTENT_INDENT: Final = "E006"
    UNEXPECTED_CHARACTER: Final = "E007"

    UNDECLARED_VARIABLE: Final = "W101"
    RESERVED_KEYWORD: Final = "E102"
    MISSING_VALUE: Final = "E103"
    UNEXPECTED_TOKEN: Final = "E104"
    INVALID_SYNTAX: Final = "E106"
    EMPTY_BODY: Final = "W107"
    UNKNOWN_BLOCK: Final = "E108"
    PROCEDURE_ARG_MISMATCH: Final = "E109"
    NESTING_TOO_DEEP: Final = "E110"
    UNEXPECTED_INDENT: Final = "E111"
    UNDECLARED_LIST: Final = "E112"

    NUMBER_REQUIRED: Final = "E202"
    BOOLEAN_REQUIRED: Final = "E204"
    INVALID_BOOLEAN_OPERATION: Final = "E205"

    UNFILLED_PLACEHOLDER: Final = "E301"
    ASSIGNMENT_IN_EXPRESSION: Final = "E302"
    STAGE_MOTION: Final = "E303"

    UNKNOWN_COSTUME: Final = "W401"
    UNKNOWN_SOUND: Final = "W402"
    DUPLICATE_PROCEDURE: Final = "W403"

    INTERNAL_ERROR: Final = "E999"


@dataclass(frozen=True)
class Diagnostic:
    """A single finding from any compiler stage.

    Parameters
    ----------
    severity:
        How serious this finding is.
    code:
        A short machine-readable identifier, e.g. ``"E202"``.
    message:
        Human-readable description of the problem.
    span:
        Source location in the sprite's own source text.
    suggestion:
        Optional human-readable fix suggestion.
    rule:
        The stage or rule name that produced this diagnostic.
    """

    severity: DiagnosticSeverity
    code: str
    message: str
    span: Span
    suggestion: str | None = field(default=None)
    rule: str = field(default="")

    def __str__(self) -> str:
        loc = f"{self.span.line}:{self.span.col}"
        prefix = f"[{self.code}] {self.severity.name}"
        suggestion_part = f" (hint: {self.suggestion})" if self.suggestion else ""
        return f"{prefix} at {loc}: {self.message}{suggestion_part}"

    @property
    def is_error(self) -> bool:
        """Return True if this diagnostic blocks code generation."""
        return self.severity == DiagnosticSeverity.ERROR

    @property
    def line(self) -> int:
        return self.span.line

    @property
    def column(self) -> int:
        return self.span.col

    def with_prefix(self, sprite_name: str) -> "Diagnostic":
        """Return a copy whose message is prefixed with ``[sprite_name]``."""
        return replace(self, message=f"[{sprite_name}] {self.message}")

    def to_dict(self) -> dict[str, object]:
        """Return the JSON-compatible wire representation."""
        data: dict[str, object] = {
            "code": self.code,
            "message": self.message,
            "line": self.span.line,
            "column": self.span.col,
            "severity": self.severity.name.lower(),
        }
        if self.suggestion:
            data["suggestion"] = self.suggestion
        return data


def error(
    code: str,
    message: str,
    span: Span,
    suggestion: str | None = None,
    rule: str = "",
) -> Diagnostic:
    """Shorthand for an ERROR-severity ``Diagnostic``."""
    return Diagnostic(DiagnosticSeverity.ERROR, code, message, span, suggestion, rule)


def warning(
    code: str,
    message: str,
    span: Span,
    suggestion: str | None = None,
    rule: str = "",
) -> Diagnostic:
    """Shorthand for a WARNING-severity ``Diagnostic``."""
    return Diagnostic(DiagnosticSeverity.WARNING, code, message, span, suggestion, rule)


def has_errors(diagnostics: list[Diagnostic]) -> bool:
    """Return True if any diagnostic in *diagnostics* is an error."""
    return any(d.is_error for d in diagnostics)
