"""AST node definitions for the Whiskers block language.

A parsed sprite is a ``Program``: declarations plus a list of ``Script``
objects, each holding top-level ``Block`` entry points (hat blocks and
procedure definitions).  Blocks form a tree through three links:

``next``
    The following statement in the same sequential flow.
``body``
    The first statement nested inside a hat, C-block or procedure
    definition.
``else_body``
    The first statement of the ``else`` branch of an ``ifElse`` block.

``args`` only ever holds values: numbers, strings, booleans, or nested
reporter/boolean ``Block`` objects.  By convention a string starting
with ``$`` is a variable reference and one starting with ``#`` is a list
reference; every other string is a literal.

Blocks are mutable (the parser links them together as it reads the
indentation structure) and compare by identity.  All traversal helpers
here walk ``next`` chains iteratively so long scripts never exhaust the
interpreter stack.
"""
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

# ---------------------------------------------------------------------------
# Source location
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open character range ``[start, end)`` within the source text.

    Parameters
    ----------
    start:
        0-based offset of the first character.
    end:
        0-based offset *past* the last character.
    line:
        1-based line number of the first character.
    col:
        1-based column number of the first character.
    """

    start: int
    end: int
    line: int
    col: int

    def __repr__(self) -> str:
        return f"Span({self.line}:{self.col})"

    @classmethod
    def unknown(cls) -> "Span":
        """Return a sentinel span used when position info is unavailable."""
        return cls(start=0, end=0, line=0, col=0)

    def merge(self, other: "Span") -> "Span":
        """Return a span that covers both ``self`` and ``other``."""
        return Span(
            start=min(self.start, other.start),
            end=max(self.end, other.end),
            line=min(self.line, other.line),
            col=self.col if self.line <= other.line else other.col,
        )


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class BlockCategory(Enum):
    """Palette category of a block; drives code-generation dispatch."""

    EVENT = "event"
    MOTION = "motion"
    LOOKS = "looks"
    SOUND = "sound"
    CONTROL = "control"
    SENSING = "sensing"
    OPERATOR = "operator"
    VARIABLE = "variable"
    PEN = "pen"
    PROCEDURE = "procedure"
    CUSTOM = "custom"


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------

ArgValue = Union[int, float, str, bool, "Block", None]


@dataclass(eq=False, repr=False, slots=True)
class Block:
    """One executable or value-producing block.

    Parameters
    ----------
    category:
        Palette category.
    name:
        Canonical block name, e.g. ``"move"``, ``"ifElse"``,
        ``"defineFunction"``.
    args:
        Ordered argument values.  ``None`` marks a slot the source left
        empty; the validator reports it before generation.
    span:
        Location of the block's leading word.
    body:
        First nested statement (hats, C-blocks, procedure definitions).
    else_body:
        First statement of the ``else`` branch (``ifElse`` only).
    next:
        The following sibling statement.
    """

    category: BlockCategory
    name: str
    args: list[ArgValue] = field(default_factory=list)
    span: Span = field(default_factory=Span.unknown)
    body: "Block | None" = None
    else_body: "Block | None" = None
    next: "Block | None" = None

    def __repr__(self) -> str:
        return (
            f"Block({self.category.value}:{self.name}, args={len(self.args)}, "
            f"at {self.span.line}:{self.span.col})"
        )

    @property
    def is_hat(self) -> bool:
        """Return True for event entry points (``when ...`` blocks)."""
        return self.category is BlockCategory.EVENT and self.name.startswith("when")

    def chain(self) -> Iterator["Block"]:
        """Yield this block and every block reachable through ``next``."""
        return iter_chain(self)

    def nested_blocks(self) -> Iterator["Block"]:
        """Yield reporter/boolean blocks that appear directly in ``args``."""
        for arg in self.args:
            if isinstance(arg, Block):
                yield arg

    def last(self) -> "Block":
        """Return the final block of the ``next`` chain starting here."""
        tail = self
        while tail.next is not None:
            tail = tail.next
        return tail


@dataclass(slots=True)
class Script:
    """One compilation entry point.

    ``blocks`` holds top-level hats or procedure definitions; each
    element's nested statements hang off its ``body``.
    """

    blocks: list[Block] = field(default_factory=list)


@dataclass(slots=True)
class Program:
    """One parsed sprite: declarations plus scripts.

    Parameters
    ----------
    scripts:
        All scripts in source order.
    variables:
        Declared variable names mapped to their initial values.
    lists:
        Declared list names mapped to their initial items.
    procedures:
        Procedure names mapped to their parameter names, in the order the
        ``define`` blocks appear.
    """

    scripts: list[Script] = field(default_factory=list)
    variables: dict[str, int | float | str | bool] = field(default_factory=dict)
    lists: dict[str, list[int | float | str | bool]] = field(default_factory=dict)
    procedures: dict[str, list[str]] = field(default_factory=dict)

    def top_level_blocks(self) -> Iterator[Block]:
        """Yield every top-level block of every script."""
        for script in self.scripts:
            yield from script.blocks

    def walk(self) -> Iterator[Block]:
        """Yield every block in the program, statements and reporters."""
        for block in self.top_level_blocks():
            yield from walk(block)


# ---------------------------------------------------------------------------
# Traversal helpers
# ---------------------------------------------------------------------------


def iter_chain(block: Block | None) -> Iterator[Block]:
    """Yield *block* and its ``next`` successors, stopping on a cycle."""
    seen: set[int] = set()
    current = block
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.next


def walk(block: Block | None) -> Iterator[Block]:
    """Depth-first walk over statements, nested bodies and argument blocks.

    Uses an explicit stack; the order is source order (a block before its
    arguments, its body, its else branch, then its successor).
    """
    if block is None:
        return
    stack: list[Block] = [block]
    seen: set[int] = set()
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        # Push in reverse so the natural order pops first.
        if current.next is not None:
            stack.append(current.next)
        if current.else_body is not None:
            stack.append(current.else_body)
        if current.body is not None:
            stack.append(current.body)
        stack.extend(reversed(list(current.nested_blocks())))


def chain_length(block: Block | None) -> int:
    """Return the number of blocks in the ``next`` chain from *block*."""
    return sum(1 for _ in iter_chain(block))
