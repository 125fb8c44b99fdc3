"""Block dispatch: routes each block to its category emitter.

``BlockEmitter`` walks statement chains iteratively and looks each block
up in the per-category ``STATEMENT_EMITTERS`` tables; value positions go
through ``format_arg``, the single place where an AST leaf becomes a
JavaScript fragment.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from whiskers.ast.nodes import ArgValue, Block, BlockCategory, iter_chain
from whiskers.compiler.emitters import EXPRESSION_EMITTERS, STATEMENT_EMITTERS, custom
from whiskers.compiler.expressions import (
    EmitterInvariantError,
    is_identifier,
    js_literal,
    js_string,
    param_name,
)
from whiskers.compiler.state import GeneratorState

logger = logging.getLogger(__name__)

StatementEmitter = Callable[["BlockEmitter", Block], None]
ExpressionEmitter = Callable[["BlockEmitter", Block], str]


class BlockEmitter:
    """Emits statements and expressions into a ``GeneratorState``.

    Parameters
    ----------
    state:
        The generation state to write into.
    statements:
        Category-keyed statement tables; defaults to ``STATEMENT_EMITTERS``.
    expressions:
        Expression table; defaults to ``EXPRESSION_EMITTERS``.
    """

    def __init__(
        self,
        state: GeneratorState,
        statements: dict[BlockCategory, dict[str, StatementEmitter]] | None = None,
        expressions: dict[str, ExpressionEmitter] | None = None,
    ) -> None:
        self.state = state
        self._statements = statements if statements is not None else STATEMENT_EMITTERS
        self._expressions = expressions if expressions is not None else EXPRESSION_EMITTERS

    # ------------------------------------------------------------------
    # Output helpers
    # ------------------------------------------------------------------

    def write(self, text: str = "") -> None:
        self.state.write(text)

    def comment(self, text: str) -> None:
        self.state.comment(text)

    @contextmanager
    def indented(self) -> Iterator[None]:
        with self.state.indented():
            yield

    @property
    def sprite(self) -> str:
        return self.state.sprite_ref

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def emit(self, block: Block) -> None:
        """Emit one statement (and only that statement, not its successors).

        Raises
        ------
        EmitterInvariantError
            If no emitter handles the block.
        """
        handler = self._statements.get(block.category, {}).get(block.name)
        if (
            handler is None
            and block.category is BlockCategory.CUSTOM
            and block.name in self.state.procedures
        ):
            handler = custom.emit_bare_call
        if handler is None:
            raise EmitterInvariantError(
                f"No emitter for {block.category.value} block '{block.name}' "
                f"at {block.span.line}:{block.span.col}"
            )
        handler(self, block)

    def emit_chain(self, first: Block | None) -> None:
        """Emit *first* and every block after it in sequence."""
        for block in iter_chain(first):
            self.emit(block)

    def body(self, block: Block) -> None:
        """Emit the nested body of *block*, one level deeper."""
        with self.indented():
            self.emit_chain(block.body)

    def else_body(self, block: Block) -> None:
        with self.indented():
            self.emit_chain(block.else_body)

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def format_arg(self, value: ArgValue) -> str:
        """Translate one argument value into a JavaScript expression.

        ``$name`` reads a variable (or a parameter inside a procedure),
        ``#name`` reads a declared list, nested reporter blocks recurse,
        and everything else becomes a literal.

        Raises
        ------
        EmitterInvariantError
            For an empty slot or a nested block with no value form.
        """
        if value is None:
            raise EmitterInvariantError("An empty argument slot reached the code generator")
        if isinstance(value, Block):
            return self.expression(value)
        if isinstance(value, str) and len(value) > 1:
            prefix, name = value[0], value[1:]
            if prefix == "$" and is_identifier(name):
                if name in self.state.params:
                    return param_name(name)
                return f"scratchRuntime.variables[{js_string(name)}]"
            if prefix == "#" and name in self.state.lists:
                return f"scratchRuntime.lists[{js_string(name)}]"
        return js_literal(value)

    def expression(self, block: Block) -> str:
        """Translate a nested reporter or boolean block."""
        handler = self._expressions.get(block.name)
        if handler is None:
            raise EmitterInvariantError(
                f"'{block.name}' cannot be used as a value "
                f"(at {block.span.line}:{block.span.col})"
            )
        return handler(self, block)

    def arg(self, block: Block, index: int) -> str:
        """Format argument *index* of *block*."""
        value = block.args[index] if index < len(block.args) else None
        return self.format_arg(value)

    def number(self, block: Block, index: int) -> str:
        """Format argument *index* coerced to a number."""
        value = block.args[index] if index < len(block.args) else None
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return js_literal(value)
        return f"Number({self.format_arg(value)})"

    def message(self, block: Block, index: int) -> str:
        """Format a message or key name, where a bare word means itself.

        ``when I receive start`` names the message ``start`` unless a
        variable of that name exists.
        """
        value = block.args[index] if index < len(block.args) else None
        if isinstance(value, str) and value.startswith("$"):
            name = value[1:]
            if name not in self.state.variables and name not in self.state.params:
                return js_string(name)
        return self.format_arg(value)

    def name(self, block: Block, index: int) -> str:
        """Quote a plain name argument (variable, list or procedure name)."""
        return js_string(str(block.args[index]))


def format_arg(state: GeneratorState, value: ArgValue) -> str:
    """Translate *value* into a JavaScript fragment for *state*'s context."""
    return BlockEmitter(state).format_arg(value)
