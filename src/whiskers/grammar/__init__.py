"""Whiskers grammar module.

Exports token definitions, the block table and the surface form tables.
"""
from __future__ import annotations

from whiskers.grammar.blocks import (
    BLOCK_SPECS,
    CONTAINER_BLOCKS,
    ArgShape,
    BlockKind,
    BlockSpec,
    category_of,
    lookup,
)
from whiskers.grammar.forms import (
    FIXED_REPORTERS,
    REPORTER_FORMS,
    STATEMENT_FORMS,
    Form,
    compile_pattern,
)
from whiskers.grammar.tokens import KEYWORDS, TOP_LEVEL_KEYWORDS, Token, TokenType

__all__ = [
    # Token types
    "TokenType",
    "Token",
    "KEYWORDS",
    "TOP_LEVEL_KEYWORDS",
    # Block table
    "BLOCK_SPECS",
    "CONTAINER_BLOCKS",
    "ArgShape",
    "BlockKind",
    "BlockSpec",
    "category_of",
    "lookup",
    # Surface forms
    "FIXED_REPORTERS",
    "REPORTER_FORMS",
    "STATEMENT_FORMS",
    "Form",
    "compile_pattern",
]
