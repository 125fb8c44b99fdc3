"""Whiskers AST module.

Exports the AST node types, traversal helpers and the serializer for
converting parsed programs to and from JSON/YAML.
"""
from __future__ import annotations

from whiskers.ast.nodes import (
    ArgValue,
    Block,
    BlockCategory,
    Program,
    Script,
    Span,
    chain_length,
    iter_chain,
    walk,
)
from whiskers.ast.serializer import AstSerializer

__all__ = [
    "ArgValue",
    "Block",
    "BlockCategory",
    "Program",
    "Script",
    "Span",
    "chain_length",
    "iter_chain",
    "walk",
    "AstSerializer",
]
