"""Sound blocks."""
from __future__ import annotations

from typing import TYPE_CHECKING

from whiskers.compiler.emitters.common import fixed_value, runtime_method

if TYPE_CHECKING:
    from whiskers.compiler.dispatch import ExpressionEmitter, StatementEmitter

STATEMENTS: dict[str, StatementEmitter] = {
    "playSound": runtime_method("playSound", "v"),
    "playSoundUntilDone": runtime_method("playSoundUntilDone", "v", awaited=True),
    "stopAllSounds": runtime_method("stopAllSounds"),
    "setVolume": runtime_method("setVolume", "n"),
    "changeVolume": runtime_method("changeVolume", "n"),
}

EXPRESSIONS: dict[str, ExpressionEmitter] = {
    "volume": fixed_value("scratchRuntime.stage.volume"),
}
