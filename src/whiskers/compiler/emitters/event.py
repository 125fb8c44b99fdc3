"""Event blocks: script entry points and broadcasts."""
from __future__ import annotations

from typing import TYPE_CHECKING

from whiskers.compiler.emitters.common import runtime_method
from whiskers.compiler.expressions import js_string

if TYPE_CHECKING:
    from whiskers.ast.nodes import Block
    from whiskers.compiler.dispatch import BlockEmitter, StatementEmitter


def _listener(out: BlockEmitter, block: Block, label: str, registration: str) -> None:
    out.comment(label)
    out.write(f"{registration}async function() {{")
    out.body(block)
    out.write("});")
    out.write()


def _sprite_event(out: BlockEmitter, prefix: str) -> str:
    return js_string(f"{prefix}_{out.state.sprite_name}")


def key_name(value: object) -> str:
    """Normalize a key name as written in source (``Space``, ``up arrow``)."""
    return " ".join(str(value).split()).lower()


def emit_when_flag_clicked(out: BlockEmitter, block: Block) -> None:
    _listener(out, block, "When green flag clicked", "scratchRuntime.onGreenFlag(")


def emit_when_key_pressed(out: BlockEmitter, block: Block) -> None:
    key = key_name(block.args[0]) if block.args else "any"
    event = js_string(f"keyPressed_{key}")
    _listener(out, block, "When key pressed", f"scratchRuntime.onEvent({event}, ")


def emit_when_sprite_clicked(out: BlockEmitter, block: Block) -> None:
    event = _sprite_event(out, "spriteClicked")
    _listener(out, block, "When this sprite clicked", f"scratchRuntime.onEvent({event}, ")


def emit_when_received(out: BlockEmitter, block: Block) -> None:
    message = out.message(block, 0)
    _listener(out, block, "When I receive", f"scratchRuntime.onBroadcast({message}, ")


def emit_when_clone_starts(out: BlockEmitter, block: Block) -> None:
    event = _sprite_event(out, "cloneStart")
    _listener(out, block, "When I start as a clone", f"scratchRuntime.onEvent({event}, ")


STATEMENTS: dict[str, StatementEmitter] = {
    "whenFlagClicked": emit_when_flag_clicked,
    "whenKeyPressed": emit_when_key_pressed,
    "whenSpriteClicked": emit_when_sprite_clicked,
    "whenReceived": emit_when_received,
    "whenCloneStarts": emit_when_clone_starts,
    "broadcast": runtime_method("broadcast", "m"),
    "broadcastAndWait": runtime_method("broadcastAndWait", "m", awaited=True),
}
