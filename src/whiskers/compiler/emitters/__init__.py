"""Category emitters and the dispatch tables built from them.

Each module covers one palette category and exposes a ``STATEMENTS``
table and, where the category has reporters, an ``EXPRESSIONS`` table.
Procedure definitions share the custom-block emitter.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from whiskers.ast.nodes import BlockCategory
from whiskers.compiler.emitters import (
    control,
    custom,
    event,
    looks,
    motion,
    operators,
    pen,
    sensing,
    sound,
    variables,
)

if TYPE_CHECKING:
    from whiskers.compiler.dispatch import ExpressionEmitter, StatementEmitter

STATEMENT_EMITTERS: dict[BlockCategory, dict[str, StatementEmitter]] = {
    BlockCategory.EVENT: event.STATEMENTS,
    BlockCategory.MOTION: motion.STATEMENTS,
    BlockCategory.LOOKS: looks.STATEMENTS,
    BlockCategory.SOUND: sound.STATEMENTS,
    BlockCategory.CONTROL: control.STATEMENTS,
    BlockCategory.SENSING: sensing.STATEMENTS,
    BlockCategory.OPERATOR: operators.STATEMENTS,
    BlockCategory.VARIABLE: variables.STATEMENTS,
    BlockCategory.PEN: pen.STATEMENTS,
    BlockCategory.PROCEDURE: custom.STATEMENTS,
    BlockCategory.CUSTOM: custom.STATEMENTS,
}

EXPRESSION_EMITTERS: dict[str, ExpressionEmitter] = {
    **motion.EXPRESSIONS,
    **looks.EXPRESSIONS,
    **sound.EXPRESSIONS,
    **sensing.EXPRESSIONS,
    **operators.EXPRESSIONS,
    **variables.EXPRESSIONS,
}

__all__ = ["EXPRESSION_EMITTERS", "STATEMENT_EMITTERS"]
