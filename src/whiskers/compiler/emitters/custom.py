"""Procedure definitions and calls."""
from __future__ import annotations

from typing import TYPE_CHECKING

from whiskers.compiler.expressions import js_string, param_name

if TYPE_CHECKING:
    from whiskers.ast.nodes import Block
    from whiskers.compiler.dispatch import BlockEmitter, StatementEmitter


def emit_define(out: BlockEmitter, block: Block) -> None:
    name = str(block.args[0])
    params = [str(p) for p in block.args[1:]]
    out.comment(f"Define custom procedure: {name}")
    signature = ", ".join(param_name(p) for p in params)
    out.write(f"scratchRuntime.procedures[{js_string(name)}] = async function({signature}) {{")
    with out.state.procedure(params):
        out.body(block)
    out.write("};")
    out.write()


def emit_call(out: BlockEmitter, block: Block) -> None:
    name = str(block.args[0])
    args = ", ".join(out.format_arg(arg) for arg in block.args[1:])
    out.write(f"await scratchRuntime.procedures[{js_string(name)}]({args});")


def emit_bare_call(out: BlockEmitter, block: Block) -> None:
    """Call a procedure written by its bare name, as in ``jump 10``."""
    args = ", ".join(out.format_arg(arg) for arg in block.args)
    out.write(f"await scratchRuntime.procedures[{js_string(block.name)}]({args});")


STATEMENTS: dict[str, StatementEmitter] = {
    "defineFunction": emit_define,
    "call": emit_call,
}
