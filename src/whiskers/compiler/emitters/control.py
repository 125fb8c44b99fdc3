"""Control blocks: waits, loops, conditionals, stop and clones.

Generated scripts run as async functions on the browser's event loop, so
every construct that takes time must yield: ``wait`` awaits a timer,
``forever`` reschedules itself with ``setTimeout`` and ``repeat until``
sleeps briefly on each pass.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from whiskers.compiler.expressions import js_string

if TYPE_CHECKING:
    from whiskers.ast.nodes import Block
    from whiskers.compiler.dispatch import BlockEmitter, StatementEmitter

FOREVER_DELAY_MS = 10
REPEAT_UNTIL_DELAY_MS = 10
WAIT_UNTIL_POLL_MS = 50


def emit_wait(out: BlockEmitter, block: Block) -> None:
    seconds = out.number(block, 0)
    out.write(f"await new Promise(resolve => setTimeout(resolve, {seconds} * 1000));")


def emit_repeat(out: BlockEmitter, block: Block) -> None:
    count = out.number(block, 0)
    with out.state.counted_loop() as i:
        if count.startswith("Number("):
            # Evaluate the count once, as the block does.
            out.write(f"for (let {i} = 0, {i}End = {count}; {i} < {i}End; {i}++) {{")
        else:
            out.write(f"for (let {i} = 0; {i} < {count}; {i}++) {{")
        out.body(block)
        out.write("}")


def emit_forever(out: BlockEmitter, block: Block) -> None:
    out.write("(async function forever() {")
    with out.indented():
        out.write("if (!scratchRuntime.running) return;")
    out.body(block)
    with out.indented():
        out.write(f"setTimeout(forever, {FOREVER_DELAY_MS});")
    out.write("})();")


def emit_if(out: BlockEmitter, block: Block) -> None:
    out.write(f"if ({out.arg(block, 0)}) {{")
    out.body(block)
    out.write("}")


def emit_if_else(out: BlockEmitter, block: Block) -> None:
    out.write(f"if ({out.arg(block, 0)}) {{")
    out.body(block)
    out.write("} else {")
    out.else_body(block)
    out.write("}")


def emit_wait_until(out: BlockEmitter, block: Block) -> None:
    out.write("await new Promise(resolve => {")
    with out.indented():
        out.write("(function checkCondition() {")
        with out.indented():
            out.write(f"if ({out.arg(block, 0)}) {{")
            with out.indented():
                out.write("resolve();")
            out.write("} else {")
            with out.indented():
                out.write(f"setTimeout(checkCondition, {WAIT_UNTIL_POLL_MS});")
            out.write("}")
        out.write("})();")
    out.write("});")


def emit_repeat_until(out: BlockEmitter, block: Block) -> None:
    out.write(f"while (!({out.arg(block, 0)})) {{")
    out.body(block)
    with out.indented():
        out.write(
            f"await new Promise(resolve => setTimeout(resolve, {REPEAT_UNTIL_DELAY_MS}));"
        )
    out.write("}")


def emit_stop(out: BlockEmitter, block: Block) -> None:
    target = str(block.args[0]) if block.args else "all"
    if target == "all":
        out.write("scratchRuntime.stopAll();")
        out.write("return;")
    elif target == "this script":
        out.write("return;")
    else:
        # Stopping the sprite's other scripts is not supported by the runtime.
        out.write('scratchRuntime.log("Stop other scripts requested");')


def emit_create_clone(out: BlockEmitter, block: Block) -> None:
    target = block.args[0] if block.args else "myself"
    if target == "myself":
        name = js_string(out.state.sprite_name)
    else:
        name = out.message(block, 0)
    out.write(f"scratchRuntime.createClone({name});")


def emit_delete_this_clone(out: BlockEmitter, block: Block) -> None:
    out.write(f"scratchRuntime.deleteClone({out.sprite}.name);")
    out.write("return;")


STATEMENTS: dict[str, StatementEmitter] = {
    "wait": emit_wait,
    "repeat": emit_repeat,
    "forever": emit_forever,
    "if": emit_if,
    "ifElse": emit_if_else,
    "waitUntil": emit_wait_until,
    "repeatUntil": emit_repeat_until,
    "stop": emit_stop,
    "createClone": emit_create_clone,
    "deleteThisClone": emit_delete_this_clone,
}
