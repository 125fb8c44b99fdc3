"""Whiskers recursive-descent parser.

Converts the flat token list produced by the lexer into a ``Program``.

Nesting in Whiskers is signalled only by INDENT/DEDENT tokens, so script
bodies are rebuilt with an explicit level table rather than by recursion:
for every indentation level the parser remembers the last block placed
there (new siblings chain onto it through ``next``) and the slot that
receives the first block of the next deeper level (a ``body`` or an
``else_body``).  Statements themselves are parsed one line at a time:
the leading word and its argument items are handed to a ``Shaper``,
which matches them against the surface form tables.

Error recovery
--------------
A statement that cannot be understood raises ``ParseError``.  The error
is recorded and the parser synchronizes by discarding the rest of the
line (stopping early in front of ``when`` or ``define``).  INDENT and
DEDENT tokens are never discarded, so the level table stays consistent
and the statements around a bad line still land in the right place.

Depth bounds
------------
Parenthesized expressions deeper than ``max_expression_depth`` and
statements nested deeper than ``max_nesting_depth`` are reported as
E110 instead of exhausting the interpreter stack.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from whiskers.ast.nodes import Block, BlockCategory, Program, Script, Span
from whiskers.diagnostics import Diagnostic, ErrorCode
from whiskers.grammar.blocks import CONTAINER_BLOCKS
from whiskers.grammar.forms import INLINE_BODY_MARKERS, STATEMENT_FORMS
from whiskers.grammar.tokens import TOP_LEVEL_KEYWORDS, Token, TokenType
from whiskers.lexer.lexer import tokenize
from whiskers.parser.errors import ParseError, ParseErrorCollection
from whiskers.parser.shaping import (
    Item,
    Operand,
    Scope,
    Shaper,
    Symbol,
    Word,
    make_block,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MAX_EXPRESSION_DEPTH = 32
MAX_NESTING_DEPTH = 48

_LINE_END = frozenset({TokenType.NEWLINE, TokenType.EOF, TokenType.INDENT, TokenType.DEDENT})
_SYNC_KEYWORDS = frozenset({"when", "define"})
_SYMBOL_TOKENS = frozenset({TokenType.OPERATOR, TokenType.COLON, TokenType.COMMA})

Opener = tuple[Block, str]


# ---------------------------------------------------------------------------
# Level table
# ---------------------------------------------------------------------------


@dataclass
class _Nesting:
    """Per-level bookkeeping for one script body.

    ``last[level]`` is the most recent block placed at ``level``;
    ``openers[level]`` is the ``(block, field)`` slot receiving the first
    block at ``level + 1``, or ``None`` when that block failed to parse
    and its children are parsed but discarded.
    """

    root: Block
    last: dict[int, Block] = field(default_factory=dict)
    openers: dict[int, Opener | None] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.last[0] = self.root
        self.openers[0] = (self.root, "body")

    def forget_below(self, level: int) -> None:
        """Drop entries for levels deeper than *level*."""
        for deeper in [k for k in self.last if k > level]:
            del self.last[deeper]
        for deeper in [k for k in self.openers if k > level]:
            del self.openers[deeper]

    def discard_children(self, level: int) -> None:
        self.openers[level] = None
        self.forget_below(level)

    def attach(self, block: Block, level: int, opener: Opener) -> ParseError | None:
        """Place *block* at *level*; return an E111 error if it cannot nest."""
        problem: ParseError | None = None
        previous = self.last.get(level)
        if previous is not None:
            previous.next = block
        elif level - 1 in self.openers:
            parent = self.openers[level - 1]
            if parent is not None:
                owner, slot = parent
                if slot == "body" and owner.name not in CONTAINER_BLOCKS:
                    problem = ParseError(
                        message=f"'{owner.name}' cannot contain other blocks",
                        span=block.span,
                        code=ErrorCode.UNEXPECTED_INDENT,
                        suggestion="Remove the extra indentation from this line",
                    )
                else:
                    existing: Block | None = getattr(owner, slot)
                    if existing is None:
                        setattr(owner, slot, block)
                    else:
                        existing.last().next = block
        else:
            problem = ParseError(
                message="Unexpected indentation",
                span=block.span,
                code=ErrorCode.UNEXPECTED_INDENT,
                suggestion="Line this block up with the block above it",
            )
        self.last[level] = block
        self.openers[level] = opener
        self.forget_below(level)
        return problem


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class Parser:
    """Recursive descent parser that produces a ``Program`` from tokens.

    Parameters
    ----------
    tokens:
        The token list produced by the lexer.  Must end with ``EOF``.
    max_expression_depth:
        Deepest allowed parenthesis nesting.
    max_nesting_depth:
        Deepest allowed statement nesting inside a script.
    """

    def __init__(
        self,
        tokens: list[Token],
        *,
        max_expression_depth: int = MAX_EXPRESSION_DEPTH,
        max_nesting_depth: int = MAX_NESTING_DEPTH,
    ) -> None:
        # Comments never influence structure.
        self._tokens: list[Token] = [t for t in tokens if t.type is not TokenType.COMMENT]
        if not self._tokens or self._tokens[-1].type is not TokenType.EOF:
            last = self._tokens[-1] if self._tokens else None
            self._tokens.append(
                Token(
                    TokenType.EOF,
                    "",
                    last.line if last else 1,
                    last.col if last else 1,
                    last.offset if last else 0,
                )
            )
        self._pos: int = 0
        self._errors: ParseErrorCollection = ParseErrorCollection()
        self._program: Program = Program()
        self._scope: Scope = Scope()
        self._shaper: Shaper = Shaper(self._scope)
        self._procedure_names: set[str] = set()
        self._expression_depth: int = 0
        self._max_expression_depth = max_expression_depth
        self._max_nesting_depth = max_nesting_depth
        self._prescan()

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """Structural diagnostics recorded so far, in source order."""
        return self._errors.to_diagnostics()

    # ------------------------------------------------------------------
    # Navigation helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        """Return the current token without consuming it."""
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return self._tokens[-1]  # EOF

    def _peek(self, offset: int = 1) -> Token:
        """Return the token ``offset`` positions ahead without consuming."""
        idx = self._pos + offset
        if idx < len(self._tokens):
            return self._tokens[idx]
        return self._tokens[-1]

    def _advance(self) -> Token:
        """Consume and return the current token."""
        tok = self._current()
        if tok.type != TokenType.EOF:
            self._pos += 1
        return tok

    def _check(self, *types: TokenType) -> bool:
        """Return True if the current token matches any of the given types."""
        return self._current().type in types

    def _match(self, *types: TokenType) -> Token | None:
        """Consume and return the current token if it matches; else None."""
        if self._check(*types):
            return self._advance()
        return None

    def _at_line_end(self) -> bool:
        return self._current().type in _LINE_END

    def _span_from(self, tok: Token) -> Span:
        """Build a ``Span`` anchored at the given token."""
        length = len(tok.value) + (2 if tok.type is TokenType.STRING else 0)
        return Span(start=tok.offset, end=tok.offset + max(length, 1), line=tok.line, col=tok.col)

    def _span_between(self, start_tok: Token, end_tok: Token) -> Span:
        """Build a ``Span`` covering from ``start_tok`` to ``end_tok``."""
        return self._span_from(start_tok).merge(self._span_from(end_tok))

    # ------------------------------------------------------------------
    # Error handling
    # ------------------------------------------------------------------

    def _record_error(self, err: ParseError) -> None:
        logger.debug("%s", err)
        self._errors.add(err)

    def _synchronize(self) -> None:
        """Discard the rest of the line, stopping before ``when``/``define``."""
        while not self._at_line_end():
            if self._current().is_keyword(*_SYNC_KEYWORDS):
                return
            self._advance()
        self._match(TokenType.NEWLINE)

    def _skip_line(self) -> None:
        while not self._at_line_end():
            self._advance()
        self._match(TokenType.NEWLINE)

    def _skip_region(self) -> None:
        """Skip an indented region that has no valid owner."""
        if not self._check(TokenType.INDENT):
            return
        depth = 0
        while not self._check(TokenType.EOF):
            tok = self._advance()
            if tok.type is TokenType.INDENT:
                depth += 1
            elif tok.type is TokenType.DEDENT:
                depth -= 1
                if depth == 0:
                    return

    def _finish_line(self) -> None:
        """Require the end of the current line and consume its NEWLINE."""
        if not self._at_line_end():
            tok = self._current()
            raise ParseError(
                message=f"Unexpected '{tok.value}' at the end of the line",
                span=self._span_from(tok),
                code=ErrorCode.UNEXPECTED_TOKEN,
                found=tok,
            )
        self._match(TokenType.NEWLINE)

    # ------------------------------------------------------------------
    # Pre-scan
    # ------------------------------------------------------------------

    def _prescan(self) -> None:
        """Collect declared names so references may precede declarations."""
        line_start = True
        for index, tok in enumerate(self._tokens[:-1]):
            following = self._tokens[index + 1]
            if line_start and following.type is TokenType.IDENT:
                if tok.is_keyword("define"):
                    self._procedure_names.add(following.value)
                elif tok.is_keyword("var", "variable"):
                    self._scope.variables.add(following.value)
                elif tok.is_keyword("list"):
                    self._scope.lists.add(following.value)
            line_start = tok.type in (TokenType.NEWLINE, TokenType.INDENT, TokenType.DEDENT)

    # ------------------------------------------------------------------
    # Top-level parse
    # ------------------------------------------------------------------

    def parse(self) -> Program:
        """Parse the token stream and return the ``Program``.

        Never raises on malformed input; inspect ``diagnostics``.
        """
        while not self._check(TokenType.EOF):
            tok = self._current()
            if tok.type in (TokenType.NEWLINE, TokenType.DEDENT):
                self._advance()
                continue
            if tok.type is TokenType.INDENT:
                self._record_error(
                    ParseError(
                        message="Unexpected indentation at the top level",
                        span=self._span_from(self._peek()),
                        code=ErrorCode.UNEXPECTED_INDENT,
                        suggestion="Scripts start at the left edge, e.g. 'when flag clicked'",
                    )
                )
                self._skip_region()
                continue
            try:
                self._parse_top_level(tok)
            except ParseError as exc:
                self._record_error(exc)
                self._synchronize()
        logger.debug(
            "Parsed %d script(s) with %d error(s)",
            len(self._program.scripts),
            len(self._errors.errors),
        )
        return self._program

    def _parse_top_level(self, tok: Token) -> None:
        if tok.is_keyword("when"):
            self._parse_script()
        elif tok.is_keyword("var", "variable"):
            self._parse_variable()
        elif tok.is_keyword("list"):
            self._parse_list()
        elif tok.is_keyword("define"):
            self._parse_procedure()
        elif tok.is_keyword("end"):
            self._skip_line()
        else:
            self._record_error(
                ParseError(
                    message=f"'{tok.value or tok.type.name}' must be inside a script",
                    span=self._span_from(tok),
                    code=ErrorCode.UNEXPECTED_TOKEN,
                    suggestion=(
                        "Start a script with 'when flag clicked' and indent the "
                        "blocks under it"
                    ),
                    found=tok,
                )
            )
            self._skip_line()
            self._skip_region()

    # ------------------------------------------------------------------
    # Scripts and procedures
    # ------------------------------------------------------------------

    def _parse_script(self) -> None:
        """Parse: ``when ... NEWLINE body``"""
        try:
            hat, _ = self._parse_statement_line()
            self._finish_line()
        except ParseError as exc:
            self._record_error(exc)
            self._skip_line()
            self._skip_region()
            return
        self._parse_body(hat)
        self._program.scripts.append(Script(blocks=[hat]))

    def _parse_procedure(self) -> None:
        """Parse: ``define name (p1, p2) NEWLINE body``"""
        define_tok = self._advance()
        name = self._declared_name(define_tok, "procedure")
        params: list[str] = []
        while not self._at_line_end():
            tok = self._advance()
            if tok.type in (TokenType.LPAREN, TokenType.RPAREN, TokenType.COMMA):
                continue
            if tok.type is TokenType.IDENT:
                params.append(tok.value)
                continue
            if tok.type is TokenType.KEYWORD:
                raise ParseError(
                    message=f"'{tok.value}' is a reserved word and cannot be a parameter name",
                    span=self._span_from(tok),
                    code=ErrorCode.RESERVED_KEYWORD,
                    suggestion=f"Rename the parameter, e.g. '{tok.value}_value'",
                    found=tok,
                )
            raise ParseError(
                message=f"Unexpected '{tok.value}' in the parameters of '{name}'",
                span=self._span_from(tok),
                code=ErrorCode.INVALID_SYNTAX,
                suggestion="Try: define jump (height)",
                found=tok,
            )
        self._finish_line()

        block = Block(
            category=BlockCategory.PROCEDURE,
            name="defineFunction",
            args=[name, *params],
            span=self._span_from(define_tok),
        )
        self._program.procedures[name] = params
        saved = self._scope.params
        self._scope.params = set(params)
        try:
            self._parse_body(block)
        finally:
            self._scope.params = saved
        self._program.scripts.append(Script(blocks=[block]))

    def _parse_body(self, root: Block) -> None:
        """Parse the statements belonging to *root* into its ``body``.

        The body is normally indented.  Statements written at the left
        edge directly under the header also join the body, up to the
        next top-level keyword.
        """
        while self._match(TokenType.NEWLINE):
            pass
        nesting = _Nesting(root)
        offset = 0 if self._check(TokenType.INDENT) else 1
        raw = 0
        too_deep = False
        while not self._check(TokenType.EOF):
            tok = self._current()
            if tok.type is TokenType.NEWLINE:
                self._advance()
                continue
            if tok.type is TokenType.INDENT:
                self._advance()
                raw += 1
                continue
            if tok.type is TokenType.DEDENT:
                self._advance()
                raw -= 1
                if raw < 0 or (raw == 0 and offset == 0):
                    return
                nesting.forget_below(raw + offset)
                continue
            if raw == 0 and (offset == 0 or tok.is_keyword(*TOP_LEVEL_KEYWORDS)):
                return
            level = raw + offset
            if level > self._max_nesting_depth:
                if too_deep:
                    # One E110 covers the whole over-deep region.
                    self._skip_line()
                    continue
                too_deep = True
            else:
                too_deep = False
            self._parse_body_line(nesting, level)

    def _parse_body_line(self, nesting: _Nesting, level: int) -> None:
        tok = self._current()
        if tok.is_keyword("end"):
            self._skip_line()
            return
        if tok.is_keyword(*TOP_LEVEL_KEYWORDS):
            self._record_error(
                ParseError(
                    message=f"'{tok.value}' must start at the top level, not inside a script",
                    span=self._span_from(tok),
                    code=ErrorCode.UNEXPECTED_TOKEN,
                    suggestion="Move this line to the left edge",
                    found=tok,
                )
            )
            nesting.discard_children(level)
            self._skip_line()
            return
        if level > self._max_nesting_depth:
            self._record_error(
                ParseError(
                    message=(
                        f"Blocks are nested too deeply (more than "
                        f"{self._max_nesting_depth} levels)"
                    ),
                    span=self._span_from(tok),
                    code=ErrorCode.NESTING_TOO_DEEP,
                    suggestion="Move part of this script into a procedure with 'define'",
                )
            )
            nesting.discard_children(level)
            self._skip_line()
            return
        if tok.is_keyword("else"):
            self._parse_else_line(nesting, level)
            return
        try:
            block, opener = self._parse_statement_line()
            self._finish_line()
        except ParseError as exc:
            self._record_error(exc)
            self._synchronize()
            nesting.discard_children(level)
            return
        problem = nesting.attach(block, level, opener)
        if problem is not None:
            self._record_error(problem)

    def _parse_else_line(self, nesting: _Nesting, level: int) -> None:
        else_tok = self._advance()
        target = nesting.last.get(level)
        if target is None or target.name != "if":
            self._record_error(
                ParseError(
                    message="'else' without a matching 'if'",
                    span=self._span_from(else_tok),
                    code=ErrorCode.UNEXPECTED_TOKEN,
                    suggestion="Put 'else' at the same indentation as its 'if'",
                    found=else_tok,
                )
            )
            nesting.discard_children(level)
            self._skip_line()
            return
        target.name = "ifElse"
        if self._at_line_end():
            self._match(TokenType.NEWLINE)
            nesting.openers[level] = (target, "else_body")
            nesting.forget_below(level)
            return
        try:
            inner, opener = self._parse_statement_line(depth=1)
            self._finish_line()
        except ParseError as exc:
            self._record_error(exc)
            self._synchronize()
            nesting.discard_children(level)
            return
        target.else_body = inner
        nesting.openers[level] = opener
        nesting.forget_below(level)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _parse_statement_line(self, depth: int = 0) -> tuple[Block, Opener]:
        """Parse one statement plus any inline ``then``/``else`` bodies.

        Returns the block and the slot that receives an indented region
        following the line.
        """
        if depth > self._max_nesting_depth:
            tok = self._current()
            raise ParseError(
                message="Too many inline blocks on one line",
                span=self._span_from(tok),
                code=ErrorCode.NESTING_TOO_DEEP,
            )
        block = self._parse_block()
        opener: Opener = (block, "body")

        if not self._at_line_end() and not self._current().is_keyword("else"):
            # The argument scan stopped after ``then``: an inline body follows.
            inner, opener = self._parse_statement_line(depth + 1)
            block.body = inner

        if self._current().is_keyword("else"):
            if block.name != "if":
                if depth > 0:
                    # Belongs to the enclosing inline ``if``.
                    return block, opener
                else_tok = self._current()
                raise ParseError(
                    message="'else' must follow an 'if' block",
                    span=self._span_from(else_tok),
                    code=ErrorCode.UNEXPECTED_TOKEN,
                    suggestion="Try: if x > 10 then say \"big\" else say \"small\"",
                    found=else_tok,
                )
            self._advance()
            block.name = "ifElse"
            if self._at_line_end():
                opener = (block, "else_body")
            else:
                inner, opener = self._parse_statement_line(depth + 1)
                block.else_body = inner
        return block, opener

    def _parse_block(self) -> Block:
        """Parse one block: a leading word followed by its argument items."""
        tok = self._current()
        if not tok.is_word:
            raise ParseError(
                message=f"Unexpected {_token_label(tok)} at the start of a block",
                span=self._span_from(tok),
                code=ErrorCode.UNEXPECTED_TOKEN,
                suggestion="Each line starts with a block name, e.g. 'move 10 steps'",
                found=tok,
            )
        self._advance()
        leader = Word(tok.value, tok.type is TokenType.KEYWORD, self._span_from(tok))
        items = self._gather_items()
        if leader.keyword and leader.text in STATEMENT_FORMS:
            return self._shaper.shape_statement(leader, items)

        args = self._shaper.split_arguments(items)
        span = self._span_from(tok)
        if items:
            span = span.merge(items[-1].span)
        if leader.text in self._procedure_names:
            return Block(BlockCategory.CUSTOM, "call", [leader.text, *args], span)
        # Unknown words are kept; the validator suggests a correction.
        return Block(BlockCategory.CUSTOM, leader.text, args, span)

    def _gather_items(self) -> list[Item]:
        """Collect argument items up to the end of the block.

        Stops at the end of the line, at ``else``, or right after a
        ``then`` that is followed by an inline statement.
        """
        items: list[Item] = []
        while not self._at_line_end():
            if self._current().is_keyword("else"):
                break
            if items and isinstance(items[-1], Word) and items[-1].keyword:
                if items[-1].text in INLINE_BODY_MARKERS:
                    break
            items.append(self._parse_item())
        return items

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def _parse_item(self) -> Item:
        tok = self._advance()
        span = self._span_from(tok)
        if tok.type in (TokenType.KEYWORD, TokenType.IDENT):
            return Word(tok.value, tok.type is TokenType.KEYWORD, span)
        if tok.type is TokenType.NUMBER:
            return Operand(_number(tok.value), span)
        if tok.type is TokenType.STRING:
            return Operand(tok.value, span)
        if tok.type in _SYMBOL_TOKENS:
            return Symbol(tok.value, span)
        if tok.type is TokenType.LPAREN:
            return self._parse_parenthesized(tok)
        if tok.type is TokenType.LBRACKET:
            return self._parse_list_literal(tok)
        raise ParseError(
            message=f"Unexpected '{tok.value}'",
            span=span,
            code=ErrorCode.UNEXPECTED_TOKEN,
            suggestion="Check that every '(' has a matching ')'",
            found=tok,
        )

    def _parse_parenthesized(self, open_tok: Token) -> Operand:
        """Parse ``( items )`` into one value."""
        self._expression_depth += 1
        try:
            if self._expression_depth > self._max_expression_depth:
                raise ParseError(
                    message=(
                        f"Expression is nested too deeply (more than "
                        f"{self._max_expression_depth} levels of parentheses)"
                    ),
                    span=self._span_from(open_tok),
                    code=ErrorCode.NESTING_TOO_DEEP,
                    suggestion="Split the calculation into several 'set' blocks",
                )
            items: list[Item] = []
            while not self._check(TokenType.RPAREN):
                if self._at_line_end():
                    raise ParseError(
                        message="Missing closing parenthesis ')'",
                        span=self._span_from(open_tok),
                        code=ErrorCode.UNEXPECTED_TOKEN,
                        suggestion="Add ')' to close the expression",
                    )
                items.append(self._parse_item())
            close_tok = self._advance()
        finally:
            self._expression_depth -= 1
        span = self._span_between(open_tok, close_tok)
        if not items:
            # Already reported by the lexer as empty parentheses.
            return Operand("", span)
        return Operand(self._shaper.fold(items), span)

    def _parse_list_literal(self, open_tok: Token) -> Operand:
        """Parse ``[ ... ]`` into a ``list`` reporter block."""
        items: list[Item] = []
        while not self._check(TokenType.RBRACKET):
            if self._at_line_end():
                raise ParseError(
                    message="Missing closing bracket ']'",
                    span=self._span_from(open_tok),
                    code=ErrorCode.UNEXPECTED_TOKEN,
                    suggestion="Write an empty list as []",
                )
            items.append(self._parse_item())
        close_tok = self._advance()
        span = self._span_between(open_tok, close_tok)
        values = self._shaper.split_arguments(items)
        return Operand(make_block("list", values, span), span)

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _declared_name(self, keyword_tok: Token, kind: str) -> str:
        tok = self._current()
        if tok.type is TokenType.KEYWORD:
            raise ParseError(
                message=f"'{tok.value}' is a reserved word and cannot be used as a {kind} name",
                span=self._span_from(tok),
                code=ErrorCode.RESERVED_KEYWORD,
                suggestion=f"Choose another name, e.g. 'my_{tok.value}'",
                found=tok,
            )
        if tok.type is not TokenType.IDENT:
            raise ParseError(
                message=f"Expected a {kind} name after '{keyword_tok.value}'",
                span=self._span_from(tok),
                code=ErrorCode.INVALID_SYNTAX,
                suggestion=_DECLARATION_EXAMPLES[kind],
                found=tok,
            )
        self._advance()
        return tok.value

    def _parse_variable(self) -> None:
        """Parse: ``var name`` or ``var name = value``"""
        keyword_tok = self._advance()
        name = self._declared_name(keyword_tok, "variable")
        value: int | float | str | bool = 0
        if self._current().type is TokenType.OPERATOR and self._current().value == "=":
            equals_tok = self._advance()
            value = self._parse_initial_value(equals_tok)
        self._finish_line()
        self._program.variables[name] = value

    def _parse_initial_value(self, equals_tok: Token) -> int | float | str | bool:
        items = self._gather_items()
        if not items:
            raise ParseError(
                message="Missing initial value after '='",
                span=self._span_from(equals_tok),
                code=ErrorCode.MISSING_VALUE,
                suggestion=_DECLARATION_EXAMPLES["variable"],
            )
        if len(items) == 1:
            literal = _literal_of(items[0])
            if literal is not None:
                return literal
        raise ParseError(
            message="A variable's initial value must be a number, text or true/false",
            span=items[0].span,
            code=ErrorCode.INVALID_SYNTAX,
            suggestion=_DECLARATION_EXAMPLES["variable"],
        )

    def _parse_list(self) -> None:
        """Parse: ``list name`` or ``list name = [ ... ]``"""
        keyword_tok = self._advance()
        name = self._declared_name(keyword_tok, "list")
        values: list[int | float | str | bool] = []
        if self._current().type is TokenType.OPERATOR and self._current().value == "=":
            equals_tok = self._advance()
            if not self._check(TokenType.LBRACKET):
                raise ParseError(
                    message="A list's initial value must be written in square brackets",
                    span=self._span_from(self._current() if not self._at_line_end() else equals_tok),
                    code=ErrorCode.INVALID_SYNTAX,
                    suggestion=_DECLARATION_EXAMPLES["list"],
                )
            literal = self._parse_list_literal(self._advance())
            items = literal.value.args if isinstance(literal.value, Block) else []
            for arg in items:
                if isinstance(arg, Block) or arg is None:
                    raise ParseError(
                        message="List items in a declaration must be numbers, text or true/false",
                        span=literal.span,
                        code=ErrorCode.INVALID_SYNTAX,
                        suggestion=_DECLARATION_EXAMPLES["list"],
                    )
                values.append(arg)
        self._finish_line()
        self._program.lists[name] = values


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_DECLARATION_EXAMPLES: dict[str, str] = {
    "variable": "Try: var score = 0",
    "list": "Try: list fruits = []",
    "procedure": "Try: define jump (height)",
}


def _number(text: str) -> int | float:
    return float(text) if "." in text else int(text)


def _literal_of(item: Item) -> int | float | str | bool | None:
    if isinstance(item, Operand) and isinstance(item.value, (int, float, str)):
        return item.value
    if isinstance(item, Word) and item.keyword and item.text in ("true", "false"):
        return item.text == "true"
    return None


def _token_label(tok: Token) -> str:
    if tok.type is TokenType.STRING:
        return f'text "{tok.value}"'
    if tok.type is TokenType.NUMBER:
        return f"number {tok.value}"
    if tok.value:
        return f"'{tok.value}'"
    return tok.type.name.lower()


# ---------------------------------------------------------------------------
# Module-level convenience functions
# ---------------------------------------------------------------------------


def parse(tokens: list[Token]) -> Program:
    """Parse a token list into a ``Program``.

    Structural problems are recorded on the ``Parser``; use
    ``parse_source`` or a ``Parser`` instance to collect them.
    """
    return Parser(tokens).parse()


def parse_source(
    source: str,
    *,
    max_expression_depth: int = MAX_EXPRESSION_DEPTH,
    max_nesting_depth: int = MAX_NESTING_DEPTH,
) -> tuple[Program, list[Diagnostic]]:
    """Tokenize and parse a sprite's source text.

    Returns
    -------
    tuple[Program, list[Diagnostic]]
        The program and the combined lexical and structural diagnostics,
        sorted by position.

    Example
    -------
    ::

        from whiskers.parser import parse_source
        program, diagnostics = parse_source('''
        when flag clicked
            repeat 3
                move 10 steps
        ''')
    """
    tokens, lex_diagnostics = tokenize(source)
    parser = Parser(
        tokens,
        max_expression_depth=max_expression_depth,
        max_nesting_depth=max_nesting_depth,
    )
    program = parser.parse()
    diagnostics = sorted(
        [*lex_diagnostics, *parser.diagnostics],
        key=lambda d: (d.span.line, d.span.col),
    )
    return program, diagnostics

