"""Variable and list blocks.

Variables and lists live in the shared ``scratchRuntime`` state and are
addressed by name, so every sprite sees the same values.  List blocks
take the list name as their first argument.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from whiskers.ast.nodes import Block
    from whiskers.compiler.dispatch import BlockEmitter, ExpressionEmitter, StatementEmitter


def _named_call(method: str, shapes: str = "", awaited: bool = False) -> StatementEmitter:
    """Emitter for ``scratchRuntime.<method>("<name>", ...)``; shapes start at args[1]."""

    def emit(out: BlockEmitter, block: Block) -> None:
        formatters = {"n": out.number, "v": out.arg}
        args = [out.name(block, 0)]
        args.extend(formatters[shape](block, i) for i, shape in enumerate(shapes, start=1))
        out.write(f"scratchRuntime.{method}({', '.join(args)});")

    return emit


def _named_value(method: str, shapes: str = "") -> ExpressionEmitter:
    def emit(out: BlockEmitter, block: Block) -> str:
        formatters = {"n": out.number, "v": out.arg}
        args = [out.name(block, 0)]
        args.extend(formatters[shape](block, i) for i, shape in enumerate(shapes, start=1))
        return f"scratchRuntime.{method}({', '.join(args)})"

    return emit


STATEMENTS: dict[str, StatementEmitter] = {
    "setVariable": _named_call("setVariable", "v"),
    "changeVariable": _named_call("changeVariable", "n"),
    "showVariable": _named_call("showVariable"),
    "hideVariable": _named_call("hideVariable"),
    "addToList": _named_call("addToList", "v"),
    "deleteOfList": _named_call("deleteOfList", "n"),
    "deleteAllOfList": _named_call("deleteAllOfList"),
    "insertAtList": _named_call("insertAtList", "nv"),
    "replaceItemOfList": _named_call("replaceItemOfList", "nv"),
}

EXPRESSIONS: dict[str, ExpressionEmitter] = {
    "itemOfList": _named_value("itemOfList", "n"),
    "lengthOfList": _named_value("lengthOfList"),
    "listContains": _named_value("listContains", "v"),
}
