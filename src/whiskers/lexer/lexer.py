"""Whiskers lexer: converts raw source text into a flat list of tokens.

The lexer is a single-pass character scanner that produces a
``list[Token]`` from a sprite's source text.  Nesting in Whiskers is
expressed purely through indentation (the off-side rule), so at the
start of every logical line the lexer measures the leading whitespace
(a tab counts as four spaces) and compares it with a stack of open
indentation widths:

* a deeper line pushes its width and emits ``INDENT``;
* a shallower line pops widths, emitting one ``DEDENT`` per pop, and
  reports inconsistent indentation if it lands between two levels;
* blank and comment-only lines leave the stack alone.

At end of input every open level is closed with a ``DEDENT`` before the
final ``EOF``, so INDENT and DEDENT counts always balance.

Lexing never fails.  Malformed input (unterminated strings, curly
braces, non-empty square brackets, empty parentheses, stray characters)
is reported as a ``Diagnostic`` and scanning continues, so later stages
can still report further problems from the same pass.

Strings are quoted with ``"`` or ``'`` and understand ``\\n``, ``\\t``
and ``\\r``; any other escaped character is kept as written.  Numbers
may carry a leading ``-`` when it cannot be a subtraction.  Identifiers
follow ``[A-Za-z_][A-Za-z0-9_]*``; a hyphenated suffix is glued on when
the combined word is a keyword (``mouse-pointer``).
"""
from __future__ import annotations

import re
from typing import Final

from whiskers.ast.nodes import Span
from whiskers.diagnostics import Diagnostic, ErrorCode, error
from whiskers.grammar.tokens import (
    KEYWORDS,
    SINGLE_CHAR_OPERATORS,
    TWO_CHAR_OPERATORS,
    Token,
    TokenType,
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_IDENT_START: Final[re.Pattern[str]] = re.compile(r"[A-Za-z_]")
_IDENT_CONT: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9_]")
_DIGIT: Final[re.Pattern[str]] = re.compile(r"[0-9]")

TAB_WIDTH: Final[int] = 4

_ESCAPE_MAP: Final[dict[str, str]] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    '"': '"',
    "'": "'",
}

# A ``-`` directly after one of these is subtraction, not a sign.
_VALUE_TOKENS: Final[frozenset[TokenType]] = frozenset({
    TokenType.NUMBER,
    TokenType.STRING,
    TokenType.IDENT,
    TokenType.RPAREN,
})


class Lexer:
    """Single-pass Whiskers lexer with indentation tracking.

    Parameters
    ----------
    source:
        The complete sprite source text to tokenize.
    """

    __slots__ = (
        "_source",
        "_pos",
        "_line",
        "_col",
        "_tokens",
        "_token_line",
        "_token_col",
        "_indents",
        "_at_line_start",
        "_diagnostics",
    )

    def __init__(self, source: str) -> None:
        self._source: str = source + "\n"
        self._pos: int = 0
        self._line: int = 1
        self._col: int = 1
        self._tokens: list[Token] = []
        self._token_line: int = 1
        self._token_col: int = 1
        self._indents: list[int] = [0]
        self._at_line_start: bool = True
        self._diagnostics: list[Diagnostic] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def tokenize(self) -> list[Token]:
        """Scan the entire source and return the complete token list.

        The list always ends with the DEDENTs closing every open
        indentation level followed by an ``EOF`` token.

        Returns
        -------
        list[Token]
            Ordered list of tokens (COMMENT tokens are included).
        """
        while self._pos < len(self._source):
            if self._at_line_start:
                self._scan_indentation()
                continue
            self._scan_one()
        self._token_line = self._line
        self._token_col = self._col
        while len(self._indents) > 1:
            self._indents.pop()
            self._emit(TokenType.DEDENT, "", self._pos)
        self._emit(TokenType.EOF, "", self._pos)
        return self._tokens

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """Lexical diagnostics recorded by the last ``tokenize`` call."""
        return list(self._diagnostics)

    # ------------------------------------------------------------------
    # Internal scanner
    # ------------------------------------------------------------------

    def _current(self) -> str:
        """Return the character at the current position without advancing."""
        return self._source[self._pos] if self._pos < len(self._source) else ""

    def _peek(self, offset: int = 1) -> str:
        """Return the character at ``pos + offset`` without advancing."""
        idx = self._pos + offset
        return self._source[idx] if idx < len(self._source) else ""

    def _advance(self) -> str:
        """Consume and return the current character, updating line/col."""
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _emit(self, token_type: TokenType, value: str, start_offset: int) -> None:
        """Append a token using the recorded start position."""
        self._tokens.append(
            Token(
                type=token_type,
                value=value,
                line=self._token_line,
                col=self._token_col,
                offset=start_offset,
            )
        )

    def _report(
        self,
        code: str,
        message: str,
        start: int,
        length: int = 1,
        suggestion: str | None = None,
    ) -> None:
        span = Span(start=start, end=start + length, line=self._token_line, col=self._token_col)
        self._diagnostics.append(error(code, message, span, suggestion, rule="lexer"))

    def _scan_indentation(self) -> None:
        """Measure leading whitespace and emit INDENT/DEDENT tokens."""
        self._at_line_start = False
        width = 0
        while self._current() in (" ", "\t"):
            width += TAB_WIDTH if self._current() == "\t" else 1
            self._advance()

        ch = self._current()
        if ch in ("\n", "\r", "") or (ch == "/" and self._peek() == "/"):
            # Blank or comment-only line: indentation is irrelevant.
            return

        self._token_line = self._line
        self._token_col = self._col
        top = self._indents[-1]
        if width > top:
            self._indents.append(width)
            self._emit(TokenType.INDENT, "", self._pos)
            return
        if width == top:
            return

        # An unmatched width snaps to the nearest open level, deeper on a tie.
        assumed = min(self._indents, key=lambda level: (abs(level - width), -level))
        while self._indents[-1] > assumed:
            self._indents.pop()
            self._emit(TokenType.DEDENT, "", self._pos)
        if assumed != width:
            self._report(
                ErrorCode.INCONSISTENT_INDENT,
                f"Inconsistent indentation: {width} space(s) does not match any "
                f"enclosing level; treating it as {assumed}",
                self._pos,
                suggestion=(
                    f"Indent this line by {assumed} space(s) to match "
                    f"the surrounding blocks"
                ),
            )

    def _scan_one(self) -> None:
        """Scan exactly one token (or skip whitespace)."""
        self._token_line = self._line
        self._token_col = self._col
        start = self._pos
        ch = self._current()

        if ch in (" ", "\t", "\r"):
            self._advance()
            return

        if ch == "\n":
            self._advance()
            self._emit(TokenType.NEWLINE, "", start)
            self._at_line_start = True
            return

        if ch == "/" and self._peek() == "/":
            self._scan_line_comment(start)
            return

        if ch in ('"', "'"):
            self._scan_string(start, ch)
            return

        if _DIGIT.match(ch) or (ch == "-" and self._is_sign()):
            self._scan_number(start)
            return

        if _IDENT_START.match(ch):
            self._scan_ident_or_keyword(start)
            return

        if ch == "(":
            self._scan_open_paren(start)
            return
        if ch == ")":
            self._advance()
            self._emit(TokenType.RPAREN, ")", start)
            return
        if ch == "[":
            self._scan_open_bracket(start)
            return
        if ch == "]":
            self._advance()
            self._emit(TokenType.RBRACKET, "]", start)
            return
        if ch in ("{", "}"):
            self._advance()
            self._report(
                ErrorCode.INVALID_CURLY_BRACKET,
                f"Curly braces are not used in this language (found {ch!r})",
                start,
                suggestion="Use indentation to put blocks inside other blocks",
            )
            return
        if ch == ":":
            self._advance()
            self._emit(TokenType.COLON, ":", start)
            return
        if ch == ",":
            self._advance()
            self._emit(TokenType.COMMA, ",", start)
            return

        pair = ch + self._peek()
        if pair in TWO_CHAR_OPERATORS:
            self._advance()
            self._advance()
            self._emit(TokenType.OPERATOR, pair, start)
            return
        if ch in SINGLE_CHAR_OPERATORS:
            self._advance()
            self._emit(TokenType.OPERATOR, ch, start)
            return

        self._advance()
        self._report(
            ErrorCode.UNEXPECTED_CHARACTER,
            f"Unexpected character {ch!r}",
            start,
            suggestion="Remove this character or put it inside quotes",
        )

    # ------------------------------------------------------------------
    # Token-specific scanners
    # ------------------------------------------------------------------

    def _is_sign(self) -> bool:
        """Return True if a ``-`` at the current position starts a number."""
        if not _DIGIT.match(self._peek()):
            return False
        if not self._tokens:
            return True
        previous = self._tokens[-1]
        return previous.type not in _VALUE_TOKENS

    def _scan_line_comment(self, start: int) -> None:
        """Consume a ``//`` comment through the end of the line."""
        while self._pos < len(self._source) and self._current() != "\n":
            self._advance()
        self._emit(TokenType.COMMENT, self._source[start : self._pos], start)

    def _scan_string(self, start: int, quote: str) -> None:
        """Consume a quoted string literal with backslash escape support.

        An unterminated string still produces a STRING token holding the
        text read so far.
        """
        self._advance()  # opening quote
        buf: list[str] = []
        while self._pos < len(self._source):
            ch = self._current()
            if ch == quote:
                self._advance()
                self._emit(TokenType.STRING, "".join(buf), start)
                return
            if ch == "\n":
                break
            if ch == "\\":
                self._advance()
                esc = self._current()
                if esc in ("\n", ""):
                    buf.append("\\")
                    break
                buf.append(_ESCAPE_MAP.get(esc, esc))
                self._advance()
            else:
                buf.append(self._advance())
        self._report(
            ErrorCode.UNTERMINATED_STRING,
            "Unterminated string: missing closing quote",
            start,
            length=self._pos - start,
            suggestion=f"Add a closing {quote} at the end of the text",
        )
        self._emit(TokenType.STRING, "".join(buf), start)

    def _scan_number(self, start: int) -> None:
        """Consume an integer or decimal literal, with an optional sign."""
        buf: list[str] = []
        if self._current() == "-":
            buf.append(self._advance())
        while _DIGIT.match(self._current()):
            buf.append(self._advance())
        if self._current() == "." and _DIGIT.match(self._peek()):
            buf.append(self._advance())
            while _DIGIT.match(self._current()):
                buf.append(self._advance())
        self._emit(TokenType.NUMBER, "".join(buf), start)

    def _scan_ident_or_keyword(self, start: int) -> None:
        """Consume an identifier, then classify it as KEYWORD or IDENT."""
        buf: list[str] = []
        while _IDENT_CONT.match(self._current()):
            buf.append(self._advance())
        word = "".join(buf)

        # Glue ``word-word`` when the hyphenated form is a keyword.
        if self._current() == "-" and _IDENT_START.match(self._peek()):
            end = self._pos + 1
            while end < len(self._source) and _IDENT_CONT.match(self._source[end]):
                end += 1
            glued = f"{word}-{self._source[self._pos + 1 : end]}"
            if glued in KEYWORDS:
                while self._pos < end:
                    self._advance()
                word = glued

        token_type = TokenType.KEYWORD if word in KEYWORDS else TokenType.IDENT
        self._emit(token_type, word, start)

    def _scan_open_paren(self, start: int) -> None:
        """Consume ``(``, reporting an empty ``()`` pair."""
        self._advance()
        self._emit(TokenType.LPAREN, "(", start)
        idx = self._pos
        while idx < len(self._source) and self._source[idx] in (" ", "\t"):
            idx += 1
        if idx < len(self._source) and self._source[idx] == ")":
            self._report(
                ErrorCode.EMPTY_PARENTHESES,
                "Empty parentheses '()' are not allowed",
                start,
                length=idx - start + 1,
                suggestion="Put a value inside the parentheses, e.g. (10), or remove them",
            )

    def _scan_open_bracket(self, start: int) -> None:
        """Consume ``[``; only the empty list constructor ``[]`` is allowed."""
        self._advance()
        self._emit(TokenType.LBRACKET, "[", start)
        idx = self._pos
        while idx < len(self._source) and self._source[idx] in (" ", "\t"):
            idx += 1
        if idx < len(self._source) and self._source[idx] == "]":
            return
        self._report(
            ErrorCode.INVALID_BRACKET,
            "Square brackets can only be used for an empty list '[]'",
            start,
            suggestion=(
                "Use parentheses ( ) around values, or declare an empty list "
                "with 'list name = []' and fill it with 'add ... to name'"
            ),
        )


# ---------------------------------------------------------------------------
# Module-level convenience function
# ---------------------------------------------------------------------------


def tokenize(source: str) -> tuple[list[Token], list[Diagnostic]]:
    """Tokenize a sprite's source text.

    Parameters
    ----------
    source:
        Whiskers source text.

    Returns
    -------
    tuple[list[Token], list[Diagnostic]]
        All tokens (including COMMENT, NEWLINE, INDENT and DEDENT tokens,
        terminated by EOF) and the lexical diagnostics.  Lexing always
        completes, so the token list is usable even when diagnostics
        were reported.

    Example
    -------
    ::

        from whiskers.lexer import tokenize
        tokens, diagnostics = tokenize("when flag clicked\\n    move 10 steps\\n")
    """
    lexer = Lexer(source)
    tokens = lexer.tokenize()
    return tokens, lexer.diagnostics
