"""Surface forms: how source words map onto canonical blocks.

A statement is written as a leading word followed by argument items,
e.g. ``turn right 90 degrees`` or ``go to x: 10 y: 20``.  Each leading
word owns an ordered tuple of ``Form`` patterns; the parser tries them in
order and the first pattern that matches the argument items decides the
canonical block name and extracts its arguments.

Pattern notation (space separated):

    ``word``        literal word (or ``:`` ``,`` ``%``) that must be present
    ``a|b``         any one of several literal words
    ``word?``       optional literal
    ``<value>``     an expression running up to the next literal
    ``<item>``      exactly one operand (literal, variable or sub-expression)
    ``<name>``      a bare identifier, kept as its plain name
    ``<word>``      one bare word or string, kept as text
    ``<words>``     one or more bare words joined with spaces (key names)
    ``<target>``    a bare keyword (``mouse-pointer``, ``edge``) kept as
                    text, otherwise an expression
    ``<rest>``      every remaining item, one argument each

``REPORTER_FORMS`` uses the same notation for value-producing blocks,
keyed by their first word.  ``FIXED_REPORTERS`` lists the reporters that
take no input and may therefore be written without parentheses.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final

SLOT_KINDS: Final[frozenset[str]] = frozenset({
    "value", "item", "name", "word", "words", "target", "rest",
})


@dataclass(frozen=True, slots=True)
class Literal:
    """A literal pattern element matching one of ``words``."""

    words: frozenset[str]
    optional: bool = False

    def accepts(self, text: str) -> bool:
        return text in self.words


@dataclass(frozen=True, slots=True)
class Slot:
    """A pattern element capturing one argument."""

    kind: str


PatternElement = Literal | Slot


@dataclass(frozen=True, slots=True)
class Form:
    """One surface form of a block.

    Parameters
    ----------
    pattern:
        Compiled pattern elements following the leading word.
    block:
        Canonical block name produced on a match.
    fixed:
        Constant arguments placed before the captured ones.
    source:
        The pattern text, kept for error messages.
    """

    pattern: tuple[PatternElement, ...]
    block: str
    fixed: tuple[str, ...] = ()
    source: str = ""


def compile_pattern(text: str) -> tuple[PatternElement, ...]:
    """Compile pattern notation into pattern elements.

    Raises
    ------
    ValueError
        If the pattern names an unknown slot kind.
    """
    elements: list[PatternElement] = []
    for part in text.split():
        if part.startswith("<") and part.endswith(">"):
            kind = part[1:-1]
            if kind not in SLOT_KINDS:
                raise ValueError(f"Unknown slot kind {kind!r} in pattern {text!r}")
            elements.append(Slot(kind))
            continue
        optional = part.endswith("?") and len(part) > 1
        words = part[:-1] if optional else part
        elements.append(Literal(frozenset(words.split("|")), optional))
    return tuple(elements)


def _forms(*rows: tuple) -> tuple[Form, ...]:
    return tuple(
        Form(compile_pattern(pattern), block, tuple(fixed), pattern)
        for pattern, block, *fixed in rows
    )


# ---------------------------------------------------------------------------
# Statements (keyed by leading word)
# ---------------------------------------------------------------------------

_GO_FORMS = _forms(
    ("to x : <value> y : <value>", "goToXY"),
    ("to front layer", "goToFrontLayer"),
    ("to back layer", "goToBackLayer"),
    ("to <target> position?", "goTo"),
    ("forward <value> layers|layer?", "goForwardLayers"),
    ("backward <value> layers|layer?", "goBackwardLayers"),
)

STATEMENT_FORMS: Final[dict[str, tuple[Form, ...]]] = {
    # events
    "when": _forms(
        ("green? flag clicked", "whenFlagClicked"),
        ("flagClicked", "whenFlagClicked"),
        ("this? sprite clicked", "whenSpriteClicked"),
        ("clicked", "whenSpriteClicked"),
        ("I|i? receive <value>", "whenReceived"),
        ("I|i? start as a clone", "whenCloneStarts"),
        ("<words> key? pressed", "whenKeyPressed"),
    ),
    "broadcast": _forms(
        ("<value> and wait", "broadcastAndWait"),
        ("<value>", "broadcast"),
    ),
    # motion
    "move": _forms(("<value> steps|step?", "move")),
    "turn": _forms(
        ("right <value> degrees?", "turnRight"),
        ("left <value> degrees?", "turnLeft"),
        ("<value> degrees?", "turnRight"),
    ),
    "go": _GO_FORMS,
    "goto": _forms(
        ("x : <value> y : <value>", "goToXY"),
        ("<target> position?", "goTo"),
    ),
    "glide": _forms(
        ("<value> secs|seconds? to x : <value> y : <value>", "glide"),
        ("<value> secs|seconds? to <target> position?", "glideTo"),
    ),
    "point": _forms(
        ("in direction <value>", "pointInDirection"),
        ("towards <target>", "pointTowards"),
    ),
    "if": _forms(
        ("on edge ,? bounce", "ifOnEdgeBounce"),
        ("<value> then?", "if"),
    ),
    # looks
    "say": _forms(
        ("<value> for <value> secs|seconds?", "sayFor"),
        ("<value>", "say"),
    ),
    "think": _forms(
        ("<value> for <value> secs|seconds?", "thinkFor"),
        ("<value>", "think"),
    ),
    "show": _forms(
        ("variable <name>", "showVariable"),
        ("", "show"),
    ),
    "hide": _forms(
        ("variable <name>", "hideVariable"),
        ("", "hide"),
    ),
    "switch": _forms(
        ("costume to <target>", "switchCostume"),
        ("backdrop to <target>", "switchBackdrop"),
    ),
    "next": _forms(
        ("costume", "nextCostume"),
        ("backdrop", "nextBackdrop"),
    ),
    "set": _forms(
        ("x to <value>", "setX"),
        ("y to <value>", "setY"),
        ("size to <value> %?", "setSize"),
        ("volume to <value> %?", "setVolume"),
        ("pen color to <value>", "setPenColor"),
        ("pen size to <value>", "setPenSize"),
        ("rotation style <word>", "setRotationStyle"),
        ("<word> effect to <value>", "setEffect"),
        ("<name> to <value>", "setVariable"),
    ),
    "change": _forms(
        ("x by <value>", "changeX"),
        ("y by <value>", "changeY"),
        ("size by <value>", "changeSize"),
        ("volume by <value>", "changeVolume"),
        ("pen size by <value>", "changePenSize"),
        ("<word> effect by <value>", "changeEffect"),
        ("<name> by <value>", "changeVariable"),
    ),
    "clear": _forms(
        ("graphic effects", "clearEffects"),
        ("", "clear"),
    ),
    # sound
    "play": _forms(
        ("sound <target> until done", "playSoundUntilDone"),
        ("sound <target>", "playSound"),
    ),
    "start": _forms(("sound <target>", "playSound")),
    # control
    "wait": _forms(
        ("until <value>", "waitUntil"),
        ("<value> secs|seconds|second?", "wait"),
    ),
    "repeat": _forms(
        ("until <value>", "repeatUntil"),
        ("<value> times?", "repeat"),
    ),
    "forever": _forms(("", "forever")),
    "stop": _forms(
        ("all sounds", "stopAllSounds"),
        ("all", "stop", "all"),
        ("this script", "stop", "this script"),
        ("other scripts in? sprite?", "stop", "other scripts"),
    ),
    "create": _forms(("clone of <target>", "createClone")),
    "delete": _forms(
        ("this clone", "deleteThisClone"),
        ("all of <name>", "deleteAllOfList"),
        ("<value> of <name>", "deleteOfList"),
    ),
    # sensing
    "ask": _forms(("<value> and wait", "ask"), ("<value>", "ask")),
    "reset": _forms(("timer", "resetTimer")),
    # lists
    "add": _forms(("<value> to <name>", "addToList")),
    "insert": _forms(("<value> at <value> of <name>", "insertAtList")),
    "replace": _forms(("item <value> of <name> with <value>", "replaceItemOfList")),
    # pen
    "pen": _forms(
        ("down", "penDown"),
        ("up", "penUp"),
    ),
    "erase": _forms(("all", "clear")),
    "stamp": _forms(("", "stamp")),
    # procedures
    "call": _forms(("<name> <rest>", "call")),
}

# Argument order for list blocks puts the list name first.
REORDERED_ARGS: Final[dict[str, tuple[int, ...]]] = {
    "addToList": (1, 0),
    "deleteOfList": (1, 0),
    "insertAtList": (2, 1, 0),
    "replaceItemOfList": (1, 0, 2),
    "itemOfList": (1, 0),
}

# Words after which a block-starting keyword opens an inline body, as in
# ``if touching edge then bounce`` or ``... else say "no"``.
INLINE_BODY_MARKERS: Final[frozenset[str]] = frozenset({"then", "else"})


# ---------------------------------------------------------------------------
# Reporters (keyed by first word)
# ---------------------------------------------------------------------------

REPORTER_FORMS: Final[dict[str, tuple[Form, ...]]] = {
    "join": _forms(("<item> <item>", "join")),
    "letter": _forms(("<value> of <value>", "letterOf")),
    "length": _forms(("of <value>", "length")),
    "item": _forms(("<value> of <name>", "itemOfList")),
    "pick": _forms(("random <value> to <value>", "random")),
    "round": _forms(("<value>", "round")),
    **{
        op: _forms(("of? <value>", op))
        for op in ("abs", "floor", "ceiling", "sqrt", "sin", "cos", "tan",
                   "asin", "acos", "atan", "ln", "log")
    },
    "touching": _forms(
        ("color <value>", "touchingColor"),
        ("<target>", "touching"),
    ),
    "key": _forms(("<words> pressed", "keyPressed")),
    "distance": _forms(("to <target>", "distanceTo")),
}

# Reporters without inputs, written as one or two bare words.
FIXED_REPORTERS: Final[dict[tuple[str, ...], str]] = {
    ("answer",): "answer",
    ("timer",): "timer",
    ("loudness",): "loudness",
    ("username",): "username",
    ("mouse", "x"): "mouseX",
    ("mouse", "y"): "mouseY",
    ("mouse", "down"): "mouseDown",
    ("x", "position"): "xPosition",
    ("y", "position"): "yPosition",
    ("direction",): "direction",
    ("size",): "size",
    ("volume",): "volume",
    ("costume", "number"): "costumeNumber",
    ("costume", "name"): "costumeName",
    ("backdrop", "number"): "backdropNumber",
    ("backdrop", "name"): "backdropName",
}

# Infix operators by precedence tier (lowest first) and their block names.
OR_OPERATORS: Final[dict[str, str]] = {"or": "or", "|": "or"}
AND_OPERATORS: Final[dict[str, str]] = {"and": "and", "&": "and"}
NOT_OPERATORS: Final[frozenset[str]] = frozenset({"not", "!"})
COMPARISON_OPERATORS: Final[dict[str, str]] = {
    ">": "greater",
    "<": "less",
    "=": "equals",
    "==": "equals",
    "!=": "notEquals",
    ">=": "greaterOrEqual",
    "<=": "lessOrEqual",
    "contains": "contains",
}
ADDITIVE_OPERATORS: Final[dict[str, str]] = {"+": "add", "-": "subtract"}
MULTIPLICATIVE_OPERATORS: Final[dict[str, str]] = {
    "*": "multiply",
    "/": "divide",
    "%": "mod",
    "mod": "mod",
}

BINARY_OPERATOR_WORDS: Final[frozenset[str]] = frozenset({"and", "or", "contains", "mod"})


def statement_words() -> frozenset[str]:
    """Return every word that can start a statement."""
    return frozenset(STATEMENT_FORMS) | {"define", "else", "end"}
