"""Operator reporters.

Operators never appear as statements: each compiles to a parenthesized
JavaScript expression.  Arithmetic and ordering coerce both operands
with ``Number(...)``; ``equals`` uses loose equality so ``"5" = 5``
holds as it does in the block editor.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from whiskers.ast.nodes import Block
    from whiskers.compiler.dispatch import BlockEmitter, ExpressionEmitter, StatementEmitter


def _numbers(out: BlockEmitter, block: Block) -> tuple[str, str]:
    return f"Number({out.arg(block, 0)})", f"Number({out.arg(block, 1)})"


def _arithmetic(symbol: str) -> ExpressionEmitter:
    def emit(out: BlockEmitter, block: Block) -> str:
        left, right = _numbers(out, block)
        return f"({left} {symbol} {right})"

    return emit


def _loose(symbol: str) -> ExpressionEmitter:
    def emit(out: BlockEmitter, block: Block) -> str:
        return f"({out.arg(block, 0)} {symbol} {out.arg(block, 1)})"

    return emit


def _math(function: str) -> ExpressionEmitter:
    def emit(out: BlockEmitter, block: Block) -> str:
        return f"Math.{function}(Number({out.arg(block, 0)}))"

    return emit


def _trig(function: str) -> ExpressionEmitter:
    # Block trigonometry works in degrees.
    def emit(out: BlockEmitter, block: Block) -> str:
        return f"Math.{function}(Number({out.arg(block, 0)}) * Math.PI / 180)"

    return emit


def _inverse_trig(function: str) -> ExpressionEmitter:
    def emit(out: BlockEmitter, block: Block) -> str:
        return f"(Math.{function}(Number({out.arg(block, 0)})) * 180 / Math.PI)"

    return emit


def emit_not(out: BlockEmitter, block: Block) -> str:
    return f"!({out.arg(block, 0)})"


def emit_random(out: BlockEmitter, block: Block) -> str:
    low, high = _numbers(out, block)
    return f"scratchRuntime.pickRandom({low}, {high})"


def emit_join(out: BlockEmitter, block: Block) -> str:
    return f"('' + {out.arg(block, 0)} + {out.arg(block, 1)})"


def emit_letter_of(out: BlockEmitter, block: Block) -> str:
    return f"String({out.arg(block, 1)}).charAt(Number({out.arg(block, 0)}) - 1)"


def emit_length(out: BlockEmitter, block: Block) -> str:
    return f"String({out.arg(block, 0)}).length"


def emit_contains(out: BlockEmitter, block: Block) -> str:
    return f"String({out.arg(block, 0)}).includes(String({out.arg(block, 1)}))"


def emit_list(out: BlockEmitter, block: Block) -> str:
    return "[" + ", ".join(out.format_arg(item) for item in block.args) + "]"


STATEMENTS: dict[str, StatementEmitter] = {}

EXPRESSIONS: dict[str, ExpressionEmitter] = {
    "add": _arithmetic("+"),
    "subtract": _arithmetic("-"),
    "multiply": _arithmetic("*"),
    "divide": _arithmetic("/"),
    "mod": _arithmetic("%"),
    "greater": _arithmetic(">"),
    "less": _arithmetic("<"),
    "greaterOrEqual": _arithmetic(">="),
    "lessOrEqual": _arithmetic("<="),
    "equals": _loose("=="),
    "notEquals": _loose("!="),
    "and": _loose("&&"),
    "or": _loose("||"),
    "not": emit_not,
    "random": emit_random,
    "join": emit_join,
    "letterOf": emit_letter_of,
    "length": emit_length,
    "contains": emit_contains,
    "round": _math("round"),
    "abs": _math("abs"),
    "floor": _math("floor"),
    "ceiling": _math("ceil"),
    "sqrt": _math("sqrt"),
    "ln": _math("log"),
    "log": _math("log10"),
    "sin": _trig("sin"),
    "cos": _trig("cos"),
    "tan": _trig("tan"),
    "asin": _inverse_trig("asin"),
    "acos": _inverse_trig("acos"),
    "atan": _inverse_trig("atan"),
    "list": emit_list,
}
