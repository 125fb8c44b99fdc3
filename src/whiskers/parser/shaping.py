"""Argument shaping: from flat argument items to canonical block arguments.

The parser reduces the tokens following a statement's leading word to a
flat list of *items*:

``Word``
    A bare keyword or identifier (``right``, ``score``).
``Symbol``
    An operator or punctuation mark (``+``, ``=``, ``:``, ``,``).
``Operand``
    A finished value: a number, a string, an empty list literal or a
    parenthesized sub-expression already parsed into a reporter block.

A ``Shaper`` matches those items against the surface forms in
``whiskers.grammar.forms`` and folds infix expressions into nested
operator blocks.  Precedence, lowest first::

    or  <  and  <  not  <  comparison  <  + -  <  * / mod  <  unary -
"""
from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from whiskers.ast.nodes import ArgValue, Block, BlockCategory, Span
from whiskers.diagnostics import ErrorCode
from whiskers.grammar.blocks import category_of, lookup
from whiskers.grammar.forms import (
    ADDITIVE_OPERATORS,
    AND_OPERATORS,
    BINARY_OPERATOR_WORDS,
    COMPARISON_OPERATORS,
    FIXED_REPORTERS,
    MULTIPLICATIVE_OPERATORS,
    NOT_OPERATORS,
    OR_OPERATORS,
    REORDERED_ARGS,
    REPORTER_FORMS,
    STATEMENT_FORMS,
    Form,
    Literal,
    Slot,
)
from whiskers.parser.errors import ParseError

# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Word:
    """A bare word: keyword (``keyword=True``) or identifier."""

    text: str
    keyword: bool
    span: Span


@dataclass(frozen=True, slots=True)
class Symbol:
    """An operator or punctuation mark."""

    text: str
    span: Span


@dataclass(frozen=True, slots=True)
class Operand:
    """A finished argument value."""

    value: ArgValue
    span: Span


Item = Word | Symbol | Operand

_BINARY_SYMBOLS: frozenset[str] = frozenset(
    text
    for table in (OR_OPERATORS, AND_OPERATORS, COMPARISON_OPERATORS,
                  ADDITIVE_OPERATORS, MULTIPLICATIVE_OPERATORS)
    for text in table
    if text not in BINARY_OPERATOR_WORDS
)


def item_text(item: Item) -> str | None:
    """Return the text a literal pattern element can match, if any."""
    if isinstance(item, (Word, Symbol)):
        return item.text
    return None


def items_span(items: Sequence[Item]) -> Span:
    """Return a span covering *items* (which must not be empty)."""
    span = items[0].span
    for item in items[1:]:
        span = span.merge(item.span)
    return span


def describe(item: Item) -> str:
    """Return a short source-like rendering of *item* for messages."""
    if isinstance(item, Operand):
        value = item.value
        if isinstance(value, Block):
            return f"({value.name} ...)"
        if isinstance(value, str):
            return f'"{value}"'
        return str(value)
    return item.text


def make_block(name: str, args: list[ArgValue], span: Span) -> Block:
    """Create a block of the category registered for *name*."""
    return Block(category=category_of(name), name=name, args=args, span=span)


# ---------------------------------------------------------------------------
# Name scope
# ---------------------------------------------------------------------------


@dataclass
class Scope:
    """Names visible while shaping arguments.

    ``variables`` and ``lists`` come from a pre-scan of the whole sprite,
    so references may precede declarations.  ``params`` holds the
    parameters of the procedure currently being parsed.
    """

    variables: set[str] = field(default_factory=set)
    lists: set[str] = field(default_factory=set)
    params: set[str] = field(default_factory=set)

    def reference(self, name: str) -> str:
        """Return the argument string for an identifier used as a value."""
        if name in self.lists and name not in self.params and name not in self.variables:
            return f"#{name}"
        return f"${name}"

    def is_value_name(self, name: str) -> bool:
        return name in self.variables or name in self.params or name in self.lists


# ---------------------------------------------------------------------------
# Shaper
# ---------------------------------------------------------------------------


class Shaper:
    """Matches argument items against surface forms.

    Parameters
    ----------
    scope:
        Names used to resolve identifiers into references.
    """

    def __init__(self, scope: Scope) -> None:
        self.scope = scope

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def shape_statement(self, leader: Word, items: list[Item]) -> Block:
        """Return the block for ``leader`` followed by ``items``.

        Raises
        ------
        ParseError
            If no surface form of the leading word accepts the items.
        """
        forms = STATEMENT_FORMS.get(leader.text, ())
        span = leader.span if not items else leader.span.merge(items_span(items))
        args, form = self._first_match(forms, items, leader)
        return make_block(form.block, args, span)

    def _first_match(
        self, forms: Sequence[Form], items: list[Item], leader: Word
    ) -> tuple[list[ArgValue], Form]:
        first_error: ParseError | None = None
        for form in forms:
            try:
                args = self.match_form(form, items)
            except ParseError as exc:
                first_error = first_error or exc
                continue
            if args is not None:
                return args, form
        if first_error is not None:
            raise first_error
        written = " ".join([leader.text, *(describe(i) for i in items)])
        raise ParseError(
            message=f"Could not understand '{written}'",
            span=leader.span,
            code=ErrorCode.INVALID_SYNTAX,
            suggestion=_form_example(forms),
        )

    # ------------------------------------------------------------------
    # Pattern matching
    # ------------------------------------------------------------------

    def match_form(self, form: Form, items: Sequence[Item]) -> list[ArgValue] | None:
        """Match *items* against *form*.

        Returns the canonical argument list, or ``None`` if the form does
        not apply.  An empty ``<value>`` slot yields ``None`` as its
        argument; the validator reports it.
        """
        elements = form.pattern
        captured: list[ArgValue] = []
        pos = 0
        for index, element in enumerate(elements):
            if isinstance(element, Literal):
                text = item_text(items[pos]) if pos < len(items) else None
                if text is not None and element.accepts(text):
                    pos += 1
                elif not element.optional:
                    return None
                continue
            end = _slot_end(elements, index, items, pos)
            outcome = self._fill_slot(element, items[pos:end])
            if outcome is None:
                return None
            values, used = outcome
            captured.extend(values)
            pos += used
        if pos != len(items):
            return None
        order = REORDERED_ARGS.get(form.block)
        if order is not None and len(captured) == len(order):
            captured = [captured[i] for i in order]
        return [*form.fixed, *captured]

    def _fill_slot(
        self, slot: Slot, segment: Sequence[Item]
    ) -> tuple[list[ArgValue], int] | None:
        kind = slot.kind
        if kind == "value":
            return [self.fold(segment) if segment else None], len(segment)
        if kind == "rest":
            return self.split_arguments(segment), len(segment)
        if not segment:
            return None
        first = segment[0]
        if kind == "name":
            if isinstance(first, Word) and not first.keyword:
                return [first.text], 1
            return None
        if kind == "word":
            text = _plain_text(first)
            return ([text], 1) if text is not None else None
        if kind == "words":
            texts = [_plain_text(item) for item in segment]
            if any(t is None for t in texts):
                return None
            return [" ".join(texts)], len(segment)  # type: ignore[arg-type]
        if kind == "item":
            value, used = self._single_operand(segment)
            return [value], used
        if kind == "target":
            if len(segment) == 1 and isinstance(first, Word):
                if first.keyword and (first.text,) not in FIXED_REPORTERS:
                    if first.text not in ("true", "false"):
                        return [first.text], 1
                if not first.keyword and not self.scope.is_value_name(first.text):
                    return [first.text], 1
            return [self.fold(segment)], len(segment)
        return None

    def _single_operand(self, segment: Sequence[Item]) -> tuple[ArgValue, int]:
        reader = _ExpressionReader(self, segment)
        value = reader.operand()
        return value, reader.pos

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def fold(self, items: Sequence[Item]) -> ArgValue:
        """Fold *items* into one argument value.

        Raises
        ------
        ParseError
            If the items do not form a single well-formed expression.
        """
        reader = _ExpressionReader(self, items)
        value = reader.expression()
        if reader.pos < len(items):
            stray = items[reader.pos]
            raise ParseError(
                message=f"Unexpected '{describe(stray)}' in expression",
                span=stray.span,
                code=ErrorCode.UNEXPECTED_TOKEN,
                suggestion="Wrap sub-expressions in parentheses, e.g. (x + 1)",
            )
        return value

    def split_arguments(self, items: Sequence[Item]) -> list[ArgValue]:
        """Split procedure-call arguments.

        With commas the items are split on them; otherwise each complete
        expression becomes one argument (``jump 10 20`` has two).
        """
        if not items:
            return []
        if any(isinstance(i, Symbol) and i.text == "," for i in items):
            groups: list[list[Item]] = [[]]
            for item in items:
                if isinstance(item, Symbol) and item.text == ",":
                    groups.append([])
                else:
                    groups[-1].append(item)
            return [self.fold(group) if group else None for group in groups]
        reader = _ExpressionReader(self, items)
        values: list[ArgValue] = []
        while reader.pos < len(items):
            values.append(reader.expression())
        return values

    def shape_reporter(self, leader: Word, items: Sequence[Item]) -> Block:
        """Return the reporter block introduced by *leader*."""
        forms = REPORTER_FORMS.get(leader.text, ())
        span = leader.span if not items else leader.span.merge(items_span(items))
        args, form = self._first_match(forms, list(items), leader)
        if form.block == "length" and _is_list_reference(args[0]):
            return make_block("lengthOfList", [str(args[0])[1:]], span)
        return make_block(form.block, args, span)

    def word_value(self, word: Word) -> ArgValue:
        """Return the value of a lone word used as an operand."""
        if word.keyword:
            if word.text in ("true", "false"):
                return word.text == "true"
            fixed = FIXED_REPORTERS.get((word.text,))
            if fixed is not None:
                return make_block(fixed, [], word.span)
            return word.text
        return self.scope.reference(word.text)


# ---------------------------------------------------------------------------
# Expression reader
# ---------------------------------------------------------------------------


class _ExpressionReader:
    """Precedence-climbing reader over a fixed item sequence."""

    def __init__(self, shaper: Shaper, items: Sequence[Item]) -> None:
        self.shaper = shaper
        self.items = items
        self.pos = 0

    def _peek_text(self) -> str | None:
        if self.pos < len(self.items):
            return item_text(self.items[self.pos])
        return None

    def _binary(
        self,
        table: dict[str, str],
        operand: Callable[[], ArgValue],
    ) -> ArgValue:
        left = operand()
        while self._peek_text() in table:
            op_item = self.items[self.pos]
            self.pos += 1
            right = operand()
            left = _combine(table[op_item.text], left, right, op_item.span)
        return left

    def expression(self) -> ArgValue:
        return self._binary(OR_OPERATORS, self._and)

    def _and(self) -> ArgValue:
        return self._binary(AND_OPERATORS, self._not)

    def _not(self) -> ArgValue:
        if self._peek_text() in NOT_OPERATORS:
            op_item = self.items[self.pos]
            self.pos += 1
            operand = self._not()
            return make_block("not", [operand], op_item.span)
        return self._comparison()

    def _comparison(self) -> ArgValue:
        return self._binary(COMPARISON_OPERATORS, self._additive)

    def _additive(self) -> ArgValue:
        return self._binary(ADDITIVE_OPERATORS, self._multiplicative)

    def _multiplicative(self) -> ArgValue:
        return self._binary(MULTIPLICATIVE_OPERATORS, self._unary)

    def _unary(self) -> ArgValue:
        if self._peek_text() == "-" and isinstance(self.items[self.pos], Symbol):
            op_item = self.items[self.pos]
            self.pos += 1
            operand = self._unary()
            if isinstance(operand, (int, float)) and not isinstance(operand, bool):
                return -operand
            return make_block("subtract", [0, operand], op_item.span)
        return self.operand()

    def operand(self) -> ArgValue:
        """Read one operand: a value, a reporter phrase or a bare word."""
        if self.pos >= len(self.items):
            anchor = self.items[-1].span if self.items else Span.unknown()
            raise ParseError(
                message="Expected a value",
                span=anchor,
                code=ErrorCode.MISSING_VALUE,
            )
        item = self.items[self.pos]
        if isinstance(item, Operand):
            self.pos += 1
            return item.value
        if isinstance(item, Symbol):
            raise ParseError(
                message=f"Unexpected '{item.text}' in expression",
                span=item.span,
                code=ErrorCode.UNEXPECTED_TOKEN,
            )
        following = self.items[self.pos + 1] if self.pos + 1 < len(self.items) else None
        if following is not None and isinstance(following, Word):
            fixed = FIXED_REPORTERS.get((item.text, following.text))
            if fixed is not None:
                self.pos += 2
                return make_block(fixed, [], item.span.merge(following.span))
        if item.keyword and item.text in REPORTER_FORMS:
            end = self._run_end(self.pos + 1)
            run = self.items[self.pos + 1:end]
            self.pos = end
            return self.shaper.shape_reporter(item, run)
        self.pos += 1
        return self.shaper.word_value(item)

    def _run_end(self, start: int) -> int:
        """Return the index where a reporter phrase's items end."""
        index = start
        while index < len(self.items):
            item = self.items[index]
            if isinstance(item, Symbol) and item.text in _BINARY_SYMBOLS:
                break
            if isinstance(item, Word) and item.text in BINARY_OPERATOR_WORDS:
                break
            index += 1
        return index


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _combine(name: str, left: ArgValue, right: ArgValue, span: Span) -> Block:
    left_span = left.span if isinstance(left, Block) else span
    right_span = right.span if isinstance(right, Block) else span
    merged = left_span.merge(span).merge(right_span)
    if name == "contains" and _is_list_reference(left):
        return make_block("listContains", [str(left)[1:], right], merged)
    return make_block(name, [left, right], merged)


def _is_list_reference(value: ArgValue) -> bool:
    return isinstance(value, str) and value.startswith("#") and len(value) > 1


def _plain_text(item: Item) -> str | None:
    if isinstance(item, Word):
        return item.text
    if isinstance(item, Operand) and not isinstance(item.value, (Block, bool)):
        if item.value is None:
            return None
        return str(item.value)
    return None


def _slot_end(
    elements: Sequence[Literal | Slot], index: int, items: Sequence[Item], pos: int
) -> int:
    """Return where the slot at ``elements[index]`` stops consuming items.

    The slot runs up to the first item matching one of the literals that
    follow it (through the first required one), or to the end.
    """
    stops: set[str] = set()
    for element in elements[index + 1:]:
        if isinstance(element, Slot):
            break
        stops |= element.words
        if not element.optional:
            break
    if not stops:
        return len(items)
    for i in range(pos, len(items)):
        text = item_text(items[i])
        if text is not None and text in stops:
            return i
    return len(items)


def _form_example(forms: Sequence[Form]) -> str | None:
    for form in forms:
        spec = lookup(form.block)
        if spec is not None and spec.example:
            return f"Try: {spec.example}"
    return None


def category_block(category: BlockCategory, name: str, args: list[ArgValue], span: Span) -> Block:
    """Create a block with an explicit category (custom and procedure blocks)."""
    return Block(category=category, name=name, args=args, span=span)
