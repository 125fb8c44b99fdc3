"""Detection of unfilled editor slots in raw source text.

The block palette inserts ``⬤`` for an empty value slot and ``⯁`` for an
empty condition slot.  Any marker left in the text means the program is
incomplete, so the scan runs before tokenizing and its findings block
every later stage.
"""
from __future__ import annotations

from typing import Final

from whiskers.ast.nodes import Span
from whiskers.diagnostics import Diagnostic, ErrorCode, error

VALUE_SLOT: Final[str] = "⬤"
CONDITION_SLOT: Final[str] = "⯁"

_MESSAGES: Final[dict[str, tuple[str, str]]] = {
    VALUE_SLOT: (
        "Empty value slot: this block still needs a value",
        "Type a number or text, or drop a reporter block into the slot",
    ),
    CONDITION_SLOT: (
        "Empty condition slot: this block still needs a condition",
        "Use a comparison such as score > 10, or drop a condition block into the slot",
    ),
}


def scan_placeholders(source: str) -> list[Diagnostic]:
    """Return one E301 diagnostic per unfilled slot marker in *source*."""
    diagnostics: list[Diagnostic] = []
    offset = 0
    for line_number, line in enumerate(source.split("\n"), start=1):
        for col, ch in enumerate(line, start=1):
            if ch in _MESSAGES:
                message, suggestion = _MESSAGES[ch]
                span = Span(offset + col - 1, offset + col, line_number, col)
                diagnostics.append(
                    error(
                        ErrorCode.UNFILLED_PLACEHOLDER,
                        message,
                        span,
                        suggestion,
                        rule="placeholders",
                    )
                )
        offset += len(line) + 1
    return diagnostics


def has_placeholders(source: str) -> bool:
    """Return True if *source* contains any slot marker."""
    return VALUE_SLOT in source or CONDITION_SLOT in source
