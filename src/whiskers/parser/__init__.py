"""Whiskers parser module.

Exports the ``Parser`` class, the ``parse``/``parse_source`` convenience
functions, the argument ``Shaper`` and the parse error types.
"""
from __future__ import annotations

from whiskers.parser.errors import ParseError, ParseErrorCollection
from whiskers.parser.parser import (
    MAX_EXPRESSION_DEPTH,
    MAX_NESTING_DEPTH,
    Parser,
    parse,
    parse_source,
)
from whiskers.parser.shaping import Scope, Shaper

__all__ = [
    "MAX_EXPRESSION_DEPTH",
    "MAX_NESTING_DEPTH",
    "Parser",
    "parse",
    "parse_source",
    "ParseError",
    "ParseErrorCollection",
    "Scope",
    "Shaper",
]
