"""Semantic validation of parsed Whiskers programs."""
from __future__ import annotations

from whiskers.validator.context import ValidationContext
from whiskers.validator.placeholders import has_placeholders, scan_placeholders
from whiskers.validator.rules import DEFAULT_RULES, Rule
from whiskers.validator.typos import closest_word, levenshtein
from whiskers.validator.validator import Validator, validate

__all__ = [
    "DEFAULT_RULES",
    "Rule",
    "ValidationContext",
    "Validator",
    "closest_word",
    "has_placeholders",
    "levenshtein",
    "scan_placeholders",
    "validate",
]
