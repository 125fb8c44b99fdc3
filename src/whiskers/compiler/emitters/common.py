"""Builders for the many emitters that are a single method call."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from whiskers.ast.nodes import Block
    from whiskers.compiler.dispatch import BlockEmitter, ExpressionEmitter, StatementEmitter


def call_arguments(out: BlockEmitter, block: Block, shapes: str) -> str:
    """Format the arguments of *block* by shape letter.

    ``n`` is a number, ``v`` any value and ``m`` a message or bare name.
    """
    formatters = {"n": out.number, "v": out.arg, "m": out.message}
    return ", ".join(formatters[shape](block, i) for i, shape in enumerate(shapes))


def sprite_method(method: str, shapes: str = "", awaited: bool = False) -> StatementEmitter:
    """Emitter for ``<current sprite>.<method>(...)``."""

    def emit(out: BlockEmitter, block: Block) -> None:
        prefix = "await " if awaited else ""
        out.write(f"{prefix}{out.sprite}.{method}({call_arguments(out, block, shapes)});")

    return emit


def runtime_method(method: str, shapes: str = "", awaited: bool = False) -> StatementEmitter:
    """Emitter for ``scratchRuntime.<method>(...)``."""

    def emit(out: BlockEmitter, block: Block) -> None:
        prefix = "await " if awaited else ""
        out.write(f"{prefix}scratchRuntime.{method}({call_arguments(out, block, shapes)});")

    return emit


def sprite_value(template: str) -> ExpressionEmitter:
    """Expression emitter reading from the current sprite.

    ``{sprite}`` in *template* is replaced by the sprite reference.
    """

    def emit(out: BlockEmitter, block: Block) -> str:
        return template.format(sprite=out.sprite)

    return emit


def fixed_value(expression: str) -> ExpressionEmitter:
    """Expression emitter that always yields *expression*."""

    def emit(out: BlockEmitter, block: Block) -> str:
        return expression

    return emit
