"""Looks blocks."""
from __future__ import annotations

from typing import TYPE_CHECKING

from whiskers.compiler.emitters.common import (
    fixed_value,
    runtime_method,
    sprite_method,
    sprite_value,
)

if TYPE_CHECKING:
    from whiskers.compiler.dispatch import ExpressionEmitter, StatementEmitter

STATEMENTS: dict[str, StatementEmitter] = {
    "say": sprite_method("say", "v"),
    "sayFor": sprite_method("sayFor", "vn", awaited=True),
    "think": sprite_method("think", "v"),
    "thinkFor": sprite_method("thinkFor", "vn", awaited=True),
    "show": sprite_method("show"),
    "hide": sprite_method("hide"),
    "switchCostume": sprite_method("switchCostume", "v"),
    "nextCostume": sprite_method("nextCostume"),
    "switchBackdrop": runtime_method("switchBackdrop", "v"),
    "nextBackdrop": runtime_method("nextBackdrop"),
    "setSize": sprite_method("setSize", "n"),
    "changeSize": sprite_method("changeSize", "n"),
    "setEffect": sprite_method("setEffect", "vn"),
    "changeEffect": sprite_method("changeEffect", "vn"),
    "clearEffects": sprite_method("clearEffects"),
    "goToFrontLayer": sprite_method("goToFrontLayer"),
    "goToBackLayer": sprite_method("goToBackLayer"),
    "goForwardLayers": sprite_method("goForwardLayers", "n"),
    "goBackwardLayers": sprite_method("goBackwardLayers", "n"),
}

EXPRESSIONS: dict[str, ExpressionEmitter] = {
    "size": sprite_value("{sprite}.size"),
    "costumeNumber": sprite_value("({sprite}.currentCostume + 1)"),
    "costumeName": sprite_value("{sprite}.costumeName()"),
    "backdropNumber": fixed_value("(scratchRuntime.stage.currentBackdrop + 1)"),
    "backdropName": fixed_value("scratchRuntime.backdropName()"),
}
