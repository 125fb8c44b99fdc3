"""Whiskers lexer module.

Exports the ``Lexer`` class and the ``tokenize`` convenience function.
"""
from __future__ import annotations

from whiskers.lexer.lexer import TAB_WIDTH, Lexer, tokenize

__all__ = ["Lexer", "tokenize", "TAB_WIDTH"]
