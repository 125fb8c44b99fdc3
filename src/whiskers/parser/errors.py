"""Parse error types for the Whiskers parser.

``ParseError`` is raised inside the parser when a statement cannot be
understood.  The parser catches it at statement granularity, records a
diagnostic and synchronizes, so callers of ``parse`` never see it.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from whiskers.ast.nodes import Span
from whiskers.diagnostics import Diagnostic, ErrorCode, error
from whiskers.grammar.tokens import Token


@dataclass(frozen=True)
class ParseError(Exception):
    """A single parse error with location and an optional fix hint.

    Parameters
    ----------
    message:
        Human-readable description of the error.
    span:
        Source location of the offending token or region.
    code:
        Diagnostic code reported for this error.
    suggestion:
        Optional example of valid syntax.
    found:
        The token that was encountered, if available.
    """

    message: str
    span: Span
    code: str = ErrorCode.INVALID_SYNTAX
    suggestion: str | None = None
    found: Token | None = None

    def __str__(self) -> str:
        loc = f"{self.span.line}:{self.span.col}"
        if self.found is not None:
            return (
                f"ParseError at {loc}: {self.message} "
                f"(found {self.found.type.name} {self.found.value!r})"
            )
        return f"ParseError at {loc}: {self.message}"

    # dataclass(frozen=True) doesn't call Exception.__init__ automatically
    def __post_init__(self) -> None:
        object.__setattr__(self, "args", (str(self),))

    def to_diagnostic(self) -> Diagnostic:
        """Convert this error into an ERROR diagnostic."""
        return error(self.code, self.message, self.span, self.suggestion, rule="parser")


@dataclass
class ParseErrorCollection(Exception):
    """Aggregates the ``ParseError`` instances from a single parse run.

    Parameters
    ----------
    errors:
        Ordered list of errors encountered during parsing.
    """

    errors: list[ParseError] = field(default_factory=list)

    def add(self, err: ParseError) -> None:
        """Append a new error to the collection."""
        self.errors.append(err)

    @property
    def has_errors(self) -> bool:
        """Return True if any errors were recorded."""
        return bool(self.errors)

    def to_diagnostics(self) -> list[Diagnostic]:
        """Return every collected error as a diagnostic, in order."""
        return [err.to_diagnostic() for err in self.errors]

    def __str__(self) -> str:
        if not self.errors:
            return "ParseErrorCollection (no errors)"
        lines = [f"ParseErrorCollection ({len(self.errors)} error(s)):"]
        for err in self.errors:
            lines.append(f"  {err}")
        return "\n".join(lines)
