"""Token definitions for the Whiskers block language.

Defines the token vocabulary produced by the lexer.  Unlike languages
with a handful of reserved words, Whiskers has well over a hundred
keywords (one per word that can appear in a block, such as ``move``,
``steps`` or ``mouse-pointer``), so every keyword shares the single
``TokenType.KEYWORD`` kind and the reserved words themselves live in the
``KEYWORDS`` set.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Final


class TokenType(Enum):
    """Exhaustive enumeration of Whiskers token kinds."""

    # -----------------------------------------------------------------
    # Words and literals
    # -----------------------------------------------------------------
    KEYWORD = auto()
    IDENT = auto()
    STRING = auto()
    NUMBER = auto()
    OPERATOR = auto()

    # -----------------------------------------------------------------
    # Punctuation
    # -----------------------------------------------------------------
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    COLON = auto()
    COMMA = auto()

    # -----------------------------------------------------------------
    # Structure (synthesized from indentation)
    # -----------------------------------------------------------------
    INDENT = auto()
    DEDENT = auto()
    NEWLINE = auto()

    # -----------------------------------------------------------------
    # Trivia / end of input
    # -----------------------------------------------------------------
    COMMENT = auto()
    EOF = auto()


# ---------------------------------------------------------------------------
# Keyword tables
# ---------------------------------------------------------------------------

KEYWORDS: Final[frozenset[str]] = frozenset({
    # events
    "when", "flag", "green", "clicked", "flagClicked", "broadcast", "receive",
    "clone", "myself", "key", "pressed", "this", "sprite",
    # control
    "forever", "if", "else", "then", "repeat", "until", "end",
    "wait", "stop", "all", "script", "scripts", "other", "create", "delete",
    "of", "times",
    # motion
    "move", "steps", "turn", "right", "left", "degrees", "go", "goto", "to",
    "glide", "secs", "point", "direction", "towards", "x", "y", "on", "edge",
    "bounce", "rotation", "style", "position", "random", "mouse-pointer",
    "left-right", "all-around", "dont-rotate",
    # looks
    "say", "think", "for", "seconds", "show", "hide", "switch", "costume",
    "backdrop", "next", "change", "set", "effect", "effects", "size",
    "clear", "graphic", "front", "back", "layer", "layers", "forward",
    "backward", "color",
    # sound
    "play", "sound", "sounds", "done", "volume",
    # sensing
    "ask", "answer", "touching", "distance", "mouse", "down", "reset",
    "timer", "loudness", "username",
    # variables and lists
    "var", "variable", "list", "by", "add", "insert", "at", "replace",
    "item", "with", "length", "contains",
    # operators
    "and", "or", "not", "join", "letter", "mod", "round", "abs", "floor",
    "ceiling", "sqrt", "sin", "cos", "tan", "asin", "acos", "atan", "ln",
    "log", "pick",
    # pen
    "pen", "up", "stamp", "erase",
    # procedures and literals
    "define", "call", "true", "false",
})

# Words that open a new top-level construct; parser synchronization
# stops in front of them.
TOP_LEVEL_KEYWORDS: Final[frozenset[str]] = frozenset({
    "when", "var", "variable", "list", "define",
})

# Operator characters recognised by the lexer.  Two-character forms are
# merged greedily before single characters are considered.
TWO_CHAR_OPERATORS: Final[frozenset[str]] = frozenset({"==", "!=", ">=", "<="})
SINGLE_CHAR_OPERATORS: Final[frozenset[str]] = frozenset("+-*/%=><&|!")


@dataclass(frozen=True, slots=True)
class Token:
    """A single scanned token with source-location metadata.

    Parameters
    ----------
    type:
        The ``TokenType`` variant for this token.
    value:
        The token text.  For strings this is the unescaped content
        without quotes; structural tokens carry an empty string.
    line:
        1-based line number in the source.
    col:
        1-based column number of the first character of the token.
    offset:
        0-based character offset from the start of the source string.
    """

    type: TokenType
    value: str
    line: int
    col: int
    offset: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.col})"

    @property
    def is_word(self) -> bool:
        """Return True for keyword and identifier tokens."""
        return self.type in (TokenType.KEYWORD, TokenType.IDENT)

    @property
    def is_structural(self) -> bool:
        """Return True for synthesized layout tokens and end of input."""
        return self.type in (
            TokenType.INDENT,
            TokenType.DEDENT,
            TokenType.NEWLINE,
            TokenType.EOF,
        )

    def is_keyword(self, *words: str) -> bool:
        """Return True if this is a keyword token matching any of *words*.

        With no arguments, return True for any keyword.
        """
        if self.type is not TokenType.KEYWORD:
            return False
        return not words or self.value in words
