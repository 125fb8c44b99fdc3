"""Motion blocks.

Every position change goes through a sprite method, and the runtime runs
its post-move hooks from there, so nothing here knows about the pen.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from whiskers.compiler.emitters.common import sprite_method, sprite_value

if TYPE_CHECKING:
    from whiskers.compiler.dispatch import ExpressionEmitter, StatementEmitter

STATEMENTS: dict[str, StatementEmitter] = {
    "move": sprite_method("move", "n"),
    "turnRight": sprite_method("turnRight", "n"),
    "turnLeft": sprite_method("turnLeft", "n"),
    "goToXY": sprite_method("goTo", "nn"),
    "goTo": sprite_method("goToTarget", "v"),
    "glide": sprite_method("glide", "nnn", awaited=True),
    "glideTo": sprite_method("glideTo", "nv", awaited=True),
    "pointInDirection": sprite_method("pointInDirection", "n"),
    "pointTowards": sprite_method("pointTowards", "v"),
    "setX": sprite_method("setX", "n"),
    "setY": sprite_method("setY", "n"),
    "changeX": sprite_method("changeX", "n"),
    "changeY": sprite_method("changeY", "n"),
    "ifOnEdgeBounce": sprite_method("ifOnEdgeBounce"),
    "setRotationStyle": sprite_method("setRotationStyle", "v"),
}

EXPRESSIONS: dict[str, ExpressionEmitter] = {
    "xPosition": sprite_value("{sprite}.x"),
    "yPosition": sprite_value("{sprite}.y"),
    "direction": sprite_value("{sprite}.direction"),
}
