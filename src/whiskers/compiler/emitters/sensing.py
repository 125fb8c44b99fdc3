"""Sensing blocks."""
from __future__ import annotations

from typing import TYPE_CHECKING

from whiskers.compiler.emitters.common import fixed_value, runtime_method
from whiskers.compiler.emitters.event import key_name
from whiskers.compiler.expressions import js_string

if TYPE_CHECKING:
    from whiskers.ast.nodes import Block
    from whiskers.compiler.dispatch import BlockEmitter, ExpressionEmitter, StatementEmitter


def touching(out: BlockEmitter, block: Block) -> str:
    return f"{out.sprite}.isTouching({out.arg(block, 0)})"


def touching_color(out: BlockEmitter, block: Block) -> str:
    return f"{out.sprite}.isTouchingColor({out.arg(block, 0)})"


def distance_to(out: BlockEmitter, block: Block) -> str:
    return f"{out.sprite}.distanceTo({out.arg(block, 0)})"


def key_pressed(out: BlockEmitter, block: Block) -> str:
    key = block.args[0] if block.args else "any"
    if isinstance(key, str) and not key.startswith("$"):
        return f"scratchRuntime.isKeyPressed({js_string(key_name(key))})"
    return f"scratchRuntime.isKeyPressed({out.arg(block, 0)})"


STATEMENTS: dict[str, StatementEmitter] = {
    "ask": runtime_method("ask", "v", awaited=True),
    "resetTimer": runtime_method("resetTimer"),
}

EXPRESSIONS: dict[str, ExpressionEmitter] = {
    "answer": fixed_value("scratchRuntime.answer"),
    "timer": fixed_value("scratchRuntime.getTimer()"),
    "mouseX": fixed_value("scratchRuntime.mouse.x"),
    "mouseY": fixed_value("scratchRuntime.mouse.y"),
    "mouseDown": fixed_value("scratchRuntime.mouse.down"),
    "loudness": fixed_value("scratchRuntime.loudness"),
    "username": fixed_value("scratchRuntime.getUsername()"),
    "touching": touching,
    "touchingColor": touching_color,
    "distanceTo": distance_to,
    "keyPressed": key_pressed,
}
