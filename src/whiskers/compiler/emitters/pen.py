"""Pen blocks.

The drawing itself happens in the runtime's pen fragment, which the
target adds once when any sprite uses a pen block.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from whiskers.compiler.emitters.common import runtime_method, sprite_method

if TYPE_CHECKING:
    from whiskers.compiler.dispatch import StatementEmitter

STATEMENTS: dict[str, StatementEmitter] = {
    "penDown": sprite_method("penDown"),
    "penUp": sprite_method("penUp"),
    "setPenColor": sprite_method("setPenColor", "v"),
    "setPenSize": sprite_method("setPenSize", "n"),
    "changePenSize": sprite_method("changePenSize", "n"),
    "clear": runtime_method("clearPen"),
    "stamp": sprite_method("stamp"),
}
