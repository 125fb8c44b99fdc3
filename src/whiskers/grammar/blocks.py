"""Block table: every canonical block the language knows about.

Each entry of ``BLOCK_SPECS`` records a block's category, its shape
(hat, statement, C-block, reporter ...), the expected type of each
argument slot and a short example used in diagnostics.  The parser looks
up a block's category here, the validator checks argument types against
``arg_shapes``, and the code generator dispatches on ``category`` and
``name``.  Adding a block means adding one row here, one surface form in
``whiskers.grammar.forms`` and one emitter.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Final

from whiskers.ast.nodes import BlockCategory


class BlockKind(Enum):
    """Structural role of a block."""

    HAT = auto()
    STATEMENT = auto()
    C_BLOCK = auto()
    CAP = auto()
    REPORTER = auto()
    BOOLEAN = auto()


class ArgShape(Enum):
    """Expected type of one argument slot."""

    NUMBER = auto()
    BOOLEAN = auto()
    TEXT = auto()
    NAME = auto()
    ANY = auto()


@dataclass(frozen=True, slots=True)
class BlockSpec:
    """Static description of one canonical block.

    Parameters
    ----------
    name:
        Canonical block name.
    category:
        Palette category used for code-generation dispatch.
    kind:
        Structural role.
    arg_shapes:
        Expected type of each positional argument.
    example:
        A valid source line using the block.
    variadic:
        True if the block takes a variable number of trailing arguments
        (procedure definitions and calls).
    """

    name: str
    category: BlockCategory
    kind: BlockKind
    arg_shapes: tuple[ArgShape, ...] = ()
    example: str = ""
    variadic: bool = False

    @property
    def is_expression(self) -> bool:
        """Return True for reporter and boolean blocks."""
        return self.kind in (BlockKind.REPORTER, BlockKind.BOOLEAN)

    @property
    def has_body(self) -> bool:
        """Return True if the block can contain nested statements."""
        return self.kind in (BlockKind.HAT, BlockKind.C_BLOCK)


_N = ArgShape.NUMBER
_B = ArgShape.BOOLEAN
_T = ArgShape.TEXT
_NAME = ArgShape.NAME
_ANY = ArgShape.ANY


def _specs(category: BlockCategory, *rows: tuple) -> list[BlockSpec]:
    return [
        BlockSpec(name, category, kind, shapes, example, *rest)
        for name, kind, shapes, example, *rest in rows
    ]


_ALL: list[BlockSpec] = [
    *_specs(
        BlockCategory.EVENT,
        ("whenFlagClicked", BlockKind.HAT, (), "when flag clicked"),
        ("whenKeyPressed", BlockKind.HAT, (_T,), "when space key pressed"),
        ("whenSpriteClicked", BlockKind.HAT, (), "when this sprite clicked"),
        ("whenReceived", BlockKind.HAT, (_T,), 'when I receive "start"'),
        ("whenCloneStarts", BlockKind.HAT, (), "when I start as a clone"),
        ("broadcast", BlockKind.STATEMENT, (_T,), 'broadcast "start"'),
        ("broadcastAndWait", BlockKind.STATEMENT, (_T,), 'broadcast "start" and wait'),
    ),
    *_specs(
        BlockCategory.MOTION,
        ("move", BlockKind.STATEMENT, (_N,), "move 10 steps"),
        ("turnRight", BlockKind.STATEMENT, (_N,), "turn right 15 degrees"),
        ("turnLeft", BlockKind.STATEMENT, (_N,), "turn left 15 degrees"),
        ("goToXY", BlockKind.STATEMENT, (_N, _N), "go to x: 0 y: 0"),
        ("goTo", BlockKind.STATEMENT, (_T,), "go to mouse-pointer"),
        ("glide", BlockKind.STATEMENT, (_N, _N, _N), "glide 1 secs to x: 100 y: 50"),
        ("glideTo", BlockKind.STATEMENT, (_N, _T), "glide 1 secs to random position"),
        ("pointInDirection", BlockKind.STATEMENT, (_N,), "point in direction 90"),
        ("pointTowards", BlockKind.STATEMENT, (_T,), "point towards mouse-pointer"),
        ("setX", BlockKind.STATEMENT, (_N,), "set x to 0"),
        ("setY", BlockKind.STATEMENT, (_N,), "set y to 0"),
        ("changeX", BlockKind.STATEMENT, (_N,), "change x by 10"),
        ("changeY", BlockKind.STATEMENT, (_N,), "change y by 10"),
        ("ifOnEdgeBounce", BlockKind.STATEMENT, (), "if on edge, bounce"),
        ("setRotationStyle", BlockKind.STATEMENT, (_T,), "set rotation style left-right"),
        ("xPosition", BlockKind.REPORTER, (), "x position"),
        ("yPosition", BlockKind.REPORTER, (), "y position"),
        ("direction", BlockKind.REPORTER, (), "direction"),
    ),
    *_specs(
        BlockCategory.LOOKS,
        ("say", BlockKind.STATEMENT, (_ANY,), 'say "Hello!"'),
        ("sayFor", BlockKind.STATEMENT, (_ANY, _N), 'say "Hello!" for 2 seconds'),
        ("think", BlockKind.STATEMENT, (_ANY,), 'think "Hmm..."'),
        ("thinkFor", BlockKind.STATEMENT, (_ANY, _N), 'think "Hmm..." for 2 seconds'),
        ("show", BlockKind.STATEMENT, (), "show"),
        ("hide", BlockKind.STATEMENT, (), "hide"),
        ("switchCostume", BlockKind.STATEMENT, (_ANY,), 'switch costume to "costume2"'),
        ("nextCostume", BlockKind.STATEMENT, (), "next costume"),
        ("switchBackdrop", BlockKind.STATEMENT, (_ANY,), 'switch backdrop to "backdrop1"'),
        ("nextBackdrop", BlockKind.STATEMENT, (), "next backdrop"),
        ("setSize", BlockKind.STATEMENT, (_N,), "set size to 100 %"),
        ("changeSize", BlockKind.STATEMENT, (_N,), "change size by 10"),
        ("setEffect", BlockKind.STATEMENT, (_T, _N), "set ghost effect to 50"),
        ("changeEffect", BlockKind.STATEMENT, (_T, _N), "change color effect by 25"),
        ("clearEffects", BlockKind.STATEMENT, (), "clear graphic effects"),
        ("goToFrontLayer", BlockKind.STATEMENT, (), "go to front layer"),
        ("goToBackLayer", BlockKind.STATEMENT, (), "go to back layer"),
        ("goForwardLayers", BlockKind.STATEMENT, (_N,), "go forward 1 layers"),
        ("goBackwardLayers", BlockKind.STATEMENT, (_N,), "go backward 1 layers"),
        ("size", BlockKind.REPORTER, (), "size"),
        ("costumeNumber", BlockKind.REPORTER, (), "costume number"),
        ("costumeName", BlockKind.REPORTER, (), "costume name"),
        ("backdropNumber", BlockKind.REPORTER, (), "backdrop number"),
        ("backdropName", BlockKind.REPORTER, (), "backdrop name"),
    ),
    *_specs(
        BlockCategory.SOUND,
        ("playSound", BlockKind.STATEMENT, (_ANY,), 'play sound "Meow"'),
        ("playSoundUntilDone", BlockKind.STATEMENT, (_ANY,), 'play sound "Meow" until done'),
        ("stopAllSounds", BlockKind.STATEMENT, (), "stop all sounds"),
        ("setVolume", BlockKind.STATEMENT, (_N,), "set volume to 100 %"),
        ("changeVolume", BlockKind.STATEMENT, (_N,), "change volume by -10"),
        ("volume", BlockKind.REPORTER, (), "volume"),
    ),
    *_specs(
        BlockCategory.CONTROL,
        ("wait", BlockKind.STATEMENT, (_N,), "wait 1 seconds"),
        ("waitUntil", BlockKind.STATEMENT, (_B,), "wait until mouse down"),
        ("repeat", BlockKind.C_BLOCK, (_N,), "repeat 10"),
        ("repeatUntil", BlockKind.C_BLOCK, (_B,), "repeat until touching edge"),
        ("forever", BlockKind.C_BLOCK, (), "forever"),
        ("if", BlockKind.C_BLOCK, (_B,), "if x position > 100 then"),
        ("ifElse", BlockKind.C_BLOCK, (_B,), "if touching edge then ... else ..."),
        ("stop", BlockKind.CAP, (_T,), "stop all"),
        ("createClone", BlockKind.STATEMENT, (_T,), "create clone of myself"),
        ("deleteThisClone", BlockKind.CAP, (), "delete this clone"),
    ),
    *_specs(
        BlockCategory.SENSING,
        ("ask", BlockKind.STATEMENT, (_ANY,), 'ask "What is your name?" and wait'),
        ("resetTimer", BlockKind.STATEMENT, (), "reset timer"),
        ("answer", BlockKind.REPORTER, (), "answer"),
        ("timer", BlockKind.REPORTER, (), "timer"),
        ("mouseX", BlockKind.REPORTER, (), "mouse x"),
        ("mouseY", BlockKind.REPORTER, (), "mouse y"),
        ("loudness", BlockKind.REPORTER, (), "loudness"),
        ("username", BlockKind.REPORTER, (), "username"),
        ("distanceTo", BlockKind.REPORTER, (_T,), "distance to mouse-pointer"),
        ("touching", BlockKind.BOOLEAN, (_T,), "touching edge"),
        ("touchingColor", BlockKind.BOOLEAN, (_ANY,), 'touching color "#ff0000"'),
        ("keyPressed", BlockKind.BOOLEAN, (_T,), "key space pressed"),
        ("mouseDown", BlockKind.BOOLEAN, (), "mouse down"),
    ),
    *_specs(
        BlockCategory.OPERATOR,
        ("add", BlockKind.REPORTER, (_N, _N), "(1 + 2)"),
        ("subtract", BlockKind.REPORTER, (_N, _N), "(5 - 2)"),
        ("multiply", BlockKind.REPORTER, (_N, _N), "(2 * 3)"),
        ("divide", BlockKind.REPORTER, (_N, _N), "(6 / 2)"),
        ("mod", BlockKind.REPORTER, (_N, _N), "(7 mod 3)"),
        ("random", BlockKind.REPORTER, (_N, _N), "(pick random 1 to 10)"),
        ("join", BlockKind.REPORTER, (_ANY, _ANY), '(join "a" "b")'),
        ("letterOf", BlockKind.REPORTER, (_N, _ANY), '(letter 1 of "apple")'),
        ("length", BlockKind.REPORTER, (_ANY,), '(length of "apple")'),
        ("round", BlockKind.REPORTER, (_N,), "(round 2.5)"),
        *[
            (op, BlockKind.REPORTER, (_N,), f"({op} of 9)")
            for op in ("abs", "floor", "ceiling", "sqrt", "sin", "cos", "tan",
                       "asin", "acos", "atan", "ln", "log")
        ],
        ("list", BlockKind.REPORTER, (), "[]", True),
        ("greater", BlockKind.BOOLEAN, (_ANY, _ANY), "(x > 5)"),
        ("less", BlockKind.BOOLEAN, (_ANY, _ANY), "(x < 5)"),
        ("equals", BlockKind.BOOLEAN, (_ANY, _ANY), "(x = 5)"),
        ("notEquals", BlockKind.BOOLEAN, (_ANY, _ANY), "(x != 5)"),
        ("greaterOrEqual", BlockKind.BOOLEAN, (_ANY, _ANY), "(x >= 5)"),
        ("lessOrEqual", BlockKind.BOOLEAN, (_ANY, _ANY), "(x <= 5)"),
        ("and", BlockKind.BOOLEAN, (_B, _B), "(touching edge and mouse down)"),
        ("or", BlockKind.BOOLEAN, (_B, _B), "(touching edge or mouse down)"),
        ("not", BlockKind.BOOLEAN, (_B,), "(not touching edge)"),
        ("contains", BlockKind.BOOLEAN, (_ANY, _ANY), '("apple" contains "a")'),
    ),
    *_specs(
        BlockCategory.VARIABLE,
        ("setVariable", BlockKind.STATEMENT, (_NAME, _ANY), "set score to 0"),
        ("changeVariable", BlockKind.STATEMENT, (_NAME, _N), "change score by 1"),
        ("showVariable", BlockKind.STATEMENT, (_NAME,), "show variable score"),
        ("hideVariable", BlockKind.STATEMENT, (_NAME,), "hide variable score"),
        ("addToList", BlockKind.STATEMENT, (_NAME, _ANY), 'add "apple" to fruits'),
        ("deleteOfList", BlockKind.STATEMENT, (_NAME, _N), "delete 1 of fruits"),
        ("deleteAllOfList", BlockKind.STATEMENT, (_NAME,), "delete all of fruits"),
        ("insertAtList", BlockKind.STATEMENT, (_NAME, _N, _ANY), 'insert "kiwi" at 1 of fruits'),
        ("replaceItemOfList", BlockKind.STATEMENT, (_NAME, _N, _ANY),
         'replace item 1 of fruits with "pear"'),
        ("itemOfList", BlockKind.REPORTER, (_NAME, _N), "(item 1 of fruits)"),
        ("lengthOfList", BlockKind.REPORTER, (_NAME,), "(length of fruits)"),
        ("listContains", BlockKind.BOOLEAN, (_NAME, _ANY), '(fruits contains "apple")'),
    ),
    *_specs(
        BlockCategory.PEN,
        ("penDown", BlockKind.STATEMENT, (), "pen down"),
        ("penUp", BlockKind.STATEMENT, (), "pen up"),
        ("setPenColor", BlockKind.STATEMENT, (_ANY,), 'set pen color to "#ff0000"'),
        ("setPenSize", BlockKind.STATEMENT, (_N,), "set pen size to 3"),
        ("changePenSize", BlockKind.STATEMENT, (_N,), "change pen size by 1"),
        ("clear", BlockKind.STATEMENT, (), "erase all"),
        ("stamp", BlockKind.STATEMENT, (), "stamp"),
    ),
    *_specs(
        BlockCategory.PROCEDURE,
        ("defineFunction", BlockKind.HAT, (_NAME,), "define jump (height)", True),
    ),
    *_specs(
        BlockCategory.CUSTOM,
        ("call", BlockKind.STATEMENT, (_NAME,), "call jump 10", True),
    ),
]

BLOCK_SPECS: Final[dict[str, BlockSpec]] = {spec.name: spec for spec in _ALL}

# Statement and hat blocks whose bodies hold nested statements.
CONTAINER_BLOCKS: Final[frozenset[str]] = frozenset(
    spec.name for spec in _ALL if spec.has_body
)


def lookup(name: str) -> BlockSpec | None:
    """Return the ``BlockSpec`` for *name*, or ``None`` if unknown."""
    return BLOCK_SPECS.get(name)


def category_of(name: str) -> BlockCategory:
    """Return the category for *name*, defaulting to ``CUSTOM``."""
    spec = BLOCK_SPECS.get(name)
    return spec.category if spec is not None else BlockCategory.CUSTOM
