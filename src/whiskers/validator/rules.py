"""Individual validation rules for the Whiskers validator.

Each rule is a callable that accepts a ``ValidationContext`` and returns
a list of ``Diagnostic`` objects.  Rules are composed into the
``Validator`` class which runs them all and aggregates results.

    E103  Missing value (empty slot, incomplete coordinates)
    E108  Unknown block or procedure (with typo suggestion)
    E109  Procedure call with the wrong number of arguments
    E112  List block naming an undeclared list
    E202  Number required
    E204  Condition required
    E205  Literal operand of and/or/not
    E302  Bare ``=`` inside a ``set ... to`` value
    E303  Motion block on the Stage
    W101  Undeclared variable
    W107  C-block with an empty body
    W401  Unknown costume
    W402  Unknown sound
    W403  Procedure defined more than once
"""
from __future__ import annotations

import re
from collections import Counter
from dataclasses import replace
from typing import Callable, Final

from whiskers.ast.nodes import ArgValue, Block, BlockCategory
from whiskers.diagnostics import Diagnostic, ErrorCode, error, warning
from whiskers.grammar.blocks import BLOCK_SPECS, ArgShape, BlockKind, lookup
from whiskers.grammar.tokens import KEYWORDS
from whiskers.validator.context import ValidationContext
from whiskers.validator.typos import KNOWN_BLOCK_WORDS, closest_word

Rule = Callable[[ValidationContext], list[Diagnostic]]

LIST_BLOCKS: Final[frozenset[str]] = frozenset({
    "addToList", "deleteOfList", "deleteAllOfList", "insertAtList",
    "replaceItemOfList", "itemOfList", "lengthOfList", "listContains",
})

VARIABLE_BLOCKS: Final[frozenset[str]] = frozenset({
    "setVariable", "changeVariable", "showVariable", "hideVariable",
})

BOOLEAN_OPERATORS: Final[frozenset[str]] = frozenset({"and", "or", "not"})

# Statements written "set <name> to <value>" whose value may hide an "=".
SET_VALUE_BLOCKS: Final[frozenset[str]] = frozenset({
    "setVariable", "setX", "setY", "setSize", "setVolume",
})

# Labels of coordinate slots, by argument index.
COORDINATE_LABELS: Final[dict[str, tuple[str | None, ...]]] = {
    "goToXY": ("x", "y"),
    "glide": (None, "x", "y"),
}

# Blocks whose first argument may be a bare message word.
MESSAGE_BLOCKS: Final[frozenset[str]] = frozenset({
    "whenReceived", "broadcast", "broadcastAndWait",
})

COSTUME_BLOCKS: Final[frozenset[str]] = frozenset({"switchCostume"})
SOUND_BLOCKS: Final[frozenset[str]] = frozenset({"playSound", "playSoundUntilDone"})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def is_reference(value: ArgValue) -> bool:
    """Return True if *value* is a ``$variable`` or ``#list`` reference."""
    return isinstance(value, str) and len(value) > 1 and value[0] in "$#"


def _is_numeric_text(text: str) -> bool:
    try:
        float(text)
    except ValueError:
        return False
    return True


def describe_value(value: ArgValue) -> str:
    """Describe an argument value the way a learner would read it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Block):
        return f"a '{value.name}' block"
    if isinstance(value, str):
        return f'a string "{value}"'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _example(name: str) -> str:
    spec = lookup(name)
    return spec.example if spec is not None else name


def _example_for_word(word: str) -> str | None:
    for spec in BLOCK_SPECS.values():
        if spec.example.split(" ", 1)[0] == word:
            return spec.example
    return None


def _statement_using_word(word: str) -> str | None:
    """Return the first statement example that uses keyword *word* past its start."""
    if word not in KEYWORDS:
        return None
    for spec in BLOCK_SPECS.values():
        if spec.kind is not BlockKind.STATEMENT:
            continue
        words = spec.example.replace(",", " ").split()
        if word in words[1:]:
            return spec.example
    return None


def _is_condition(value: ArgValue) -> bool:
    if isinstance(value, bool):
        return True
    if isinstance(value, Block):
        spec = lookup(value.name)
        return spec is not None and spec.kind is BlockKind.BOOLEAN
    return False


def _is_plain_literal(value: ArgValue) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return isinstance(value, str) and not is_reference(value)


# ---------------------------------------------------------------------------
# E103 — missing values
# ---------------------------------------------------------------------------


def rule_missing_values(ctx: ValidationContext) -> list[Diagnostic]:
    """E103: Every argument slot must be filled."""
    diagnostics: list[Diagnostic] = []
    for block in ctx.blocks():
        labels = COORDINATE_LABELS.get(block.name, ())
        for index, arg in enumerate(block.args):
            if arg is not None:
                continue
            label = labels[index] if index < len(labels) else None
            if label is not None:
                span = block.span
                text = ctx.line(span.line)
                position = text.find(f"{label}:")
                if position >= 0:
                    span = replace(span, col=position + 1)
                diagnostics.append(error(
                    ErrorCode.MISSING_VALUE,
                    f"Missing value after '{label}:'. You need to provide a number.",
                    span,
                    suggestion=f"For example: {_example(block.name)}",
                    rule="missing_values",
                ))
            else:
                diagnostics.append(error(
                    ErrorCode.MISSING_VALUE,
                    f"'{block.name}' is missing a value.",
                    block.span,
                    suggestion=f"For example: {_example(block.name)}",
                    rule="missing_values",
                ))
    return diagnostics


# ---------------------------------------------------------------------------
# E202 / E204 — argument types
# ---------------------------------------------------------------------------


def rule_argument_types(ctx: ValidationContext) -> list[Diagnostic]:
    """E202/E204: Numeric slots need numbers, condition slots need conditions."""
    diagnostics: list[Diagnostic] = []
    for block in ctx.blocks():
        spec = lookup(block.name)
        if spec is None or block.name in BOOLEAN_OPERATORS:
            continue
        if _assignment_in_value(ctx, block) is not None:
            # Reported as E302 instead.
            continue
        for shape, arg in zip(spec.arg_shapes, block.args):
            if arg is None:
                continue
            if shape is ArgShape.NUMBER:
                if _is_condition(arg) or (
                    isinstance(arg, str) and not is_reference(arg) and not _is_numeric_text(arg)
                ):
                    got = "a condition" if _is_condition(arg) else describe_value(arg)
                    diagnostics.append(error(
                        ErrorCode.NUMBER_REQUIRED,
                        f"'{block.name}' requires a number, but got {got}.",
                        block.span,
                        suggestion=f"Use a number instead. For example: {spec.example}",
                        rule="argument_types",
                    ))
            elif shape is ArgShape.BOOLEAN and _is_plain_literal(arg):
                diagnostics.append(error(
                    ErrorCode.BOOLEAN_REQUIRED,
                    f"'{block.name}' requires a condition (true/false), "
                    f"but got {describe_value(arg)}.",
                    block.span,
                    suggestion=f"Use a comparison like: {spec.example}",
                    rule="argument_types",
                ))
    return diagnostics


# ---------------------------------------------------------------------------
# E205 — literal operands of boolean operators
# ---------------------------------------------------------------------------


def rule_boolean_operations(ctx: ValidationContext) -> list[Diagnostic]:
    """E205: ``and``/``or``/``not`` only combine conditions."""
    diagnostics: list[Diagnostic] = []
    for block in ctx.blocks():
        if block.name not in BOOLEAN_OPERATORS:
            continue
        sides = ("left", "right") if block.name != "not" else ("",)
        for side, arg in zip(sides, block.args):
            if arg is None or not _is_plain_literal(arg):
                continue
            where = f"The {side} side" if side else "Its input"
            diagnostics.append(error(
                ErrorCode.INVALID_BOOLEAN_OPERATION,
                f"Cannot use '{block.name}' with {describe_value(arg)}. "
                f"{where} should be a condition.",
                block.span,
                suggestion="Use a comparison such as (score > 10) or a condition "
                           "block such as (touching edge)",
                rule="boolean_operations",
            ))
    return diagnostics


# ---------------------------------------------------------------------------
# E302 — assignment inside an expression
# ---------------------------------------------------------------------------

_SET_TO = re.compile(r"^\s*set\s+(?P<name>\S+)\s+to\s+(?P<value>.*)$")
_QUOTED = re.compile(r"\"[^\"]*\"?|'[^']*'?")


def _lone_equals(value: str) -> int | None:
    """Return the index of a bare ``=`` outside parentheses, if any."""
    # Blank out quoted text so '=' inside strings is ignored.
    masked = _QUOTED.sub(lambda m: " " * len(m.group()), value)
    depth = 0
    for index, ch in enumerate(masked):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(depth - 1, 0)
        elif ch in "<>" and depth == 0:
            return None
        elif ch == "=" and depth == 0:
            before = masked[index - 1] if index else ""
            after = masked[index + 1] if index + 1 < len(masked) else ""
            if before not in "=!<>" and after != "=":
                return index
            return None
    return None


def _assignment_in_value(ctx: ValidationContext, block: Block) -> tuple[str, int] | None:
    """Return the target name and 1-based column of a bare ``=`` in a ``set`` line."""
    if block.name not in SET_VALUE_BLOCKS:
        return None
    match = _SET_TO.match(ctx.line(block.span.line))
    if match is None:
        return None
    index = _lone_equals(match.group("value"))
    if index is None:
        return None
    return match.group("name"), match.start("value") + index + 1


def rule_assignment_in_expression(ctx: ValidationContext) -> list[Diagnostic]:
    """E302: ``=`` inside a ``set ... to`` value is never an assignment."""
    diagnostics: list[Diagnostic] = []
    for block in ctx.blocks():
        found = _assignment_in_value(ctx, block)
        if found is None:
            continue
        name, col = found
        diagnostics.append(error(
            ErrorCode.ASSIGNMENT_IN_EXPRESSION,
            "Unexpected '=' in expression. Did you mean to assign a value directly?",
            replace(block.span, col=col),
            suggestion=f"Write 'set {name} to 5', or put a comparison in "
                       "parentheses: (a = b)",
            rule="assignment_in_expression",
        ))
    return diagnostics


# ---------------------------------------------------------------------------
# E108 — unknown blocks and procedures
# ---------------------------------------------------------------------------


def rule_unknown_blocks(ctx: ValidationContext) -> list[Diagnostic]:
    """E108: Unknown leading words and calls to undefined procedures."""
    diagnostics: list[Diagnostic] = []
    for block in ctx.blocks():
        if block.category is not BlockCategory.CUSTOM:
            continue
        if block.name == "call":
            name = str(block.args[0]) if block.args else ""
            if name in ctx.procedures:
                continue
            guess = closest_word(name, ctx.procedures) if ctx.procedures else None
            message = f"Unknown procedure '{name}'."
            if guess is not None:
                message += f" Did you mean '{guess}'?"
            diagnostics.append(error(
                ErrorCode.UNKNOWN_BLOCK,
                message,
                block.span,
                suggestion=f"Define it first with 'define {name}'",
                rule="unknown_blocks",
            ))
            continue
        if block.name in ctx.procedures:
            # called by bare name; defined in another sprite
            continue
        guess = closest_word(block.name, KNOWN_BLOCK_WORDS | set(ctx.procedures))
        message = f"Unknown block '{block.name}'."
        suggestion: str | None = f"Check the spelling, or define it with 'define {block.name}'"
        if guess is not None:
            message += f" Did you mean '{guess}'?"
            example = _example_for_word(guess)
            suggestion = f"For example: {example}" if example else f"Did you mean '{guess}'?"
        else:
            example = _statement_using_word(block.name)
            if example is not None:
                message += f" '{block.name}' is part of the block '{example}'."
                suggestion = f"For example: {example}"
        diagnostics.append(error(
            ErrorCode.UNKNOWN_BLOCK,
            message,
            block.span,
            suggestion=suggestion,
            rule="unknown_blocks",
        ))
    return diagnostics


# ---------------------------------------------------------------------------
# E109 — procedure arity
# ---------------------------------------------------------------------------


def _procedure_call(block: Block) -> tuple[str | None, list[ArgValue]]:
    """Return ``(name, args)`` for a procedure call, or ``(None, [])``."""
    if block.name == "call" and block.args:
        return str(block.args[0]), list(block.args[1:])
    if block.category is BlockCategory.CUSTOM and block.name != "call":
        return block.name, list(block.args)
    return None, []


def rule_procedure_arity(ctx: ValidationContext) -> list[Diagnostic]:
    """E109: Calls must pass one argument per procedure parameter."""
    diagnostics: list[Diagnostic] = []
    for block in ctx.blocks():
        name, args = _procedure_call(block)
        params = ctx.procedures.get(name) if name is not None else None
        if params is None:
            continue
        got = len(args)
        if got == len(params):
            continue
        plural = "argument" if len(params) == 1 else "arguments"
        needs = ", ".join(params) if params else "no inputs"
        diagnostics.append(error(
            ErrorCode.PROCEDURE_ARG_MISMATCH,
            f"'{name}' expects {len(params)} {plural} but got {got}.",
            block.span,
            suggestion=f"The procedure '{name}' needs: {needs}",
            rule="procedure_arity",
        ))
    return diagnostics


# ---------------------------------------------------------------------------
# W403 — duplicate procedure definitions
# ---------------------------------------------------------------------------


def rule_duplicate_procedures(ctx: ValidationContext) -> list[Diagnostic]:
    """W403: Each procedure should be defined once."""
    diagnostics: list[Diagnostic] = []
    counts: Counter[str] = Counter()
    for top in ctx.program.top_level_blocks():
        if top.name != "defineFunction" or not top.args:
            continue
        name = str(top.args[0])
        counts[name] += 1
        if counts[name] > 1:
            diagnostics.append(warning(
                ErrorCode.DUPLICATE_PROCEDURE,
                f"Procedure '{name}' is defined more than once; "
                "the last definition is used.",
                top.span,
                suggestion=f"Rename or remove one of the '{name}' definitions",
                rule="duplicate_procedures",
            ))
    return diagnostics


# ---------------------------------------------------------------------------
# E303 — motion on the Stage
# ---------------------------------------------------------------------------


def rule_stage_motion(ctx: ValidationContext) -> list[Diagnostic]:
    """E303: The Stage has no position, so motion blocks cannot run there."""
    if not ctx.is_stage:
        return []
    return [
        error(
            ErrorCode.STAGE_MOTION,
            f"'{block.name}' cannot be used here: motion blocks are not allowed "
            "on the Stage.",
            block.span,
            suggestion="The Stage cannot move. Put this script in a sprite instead",
            rule="stage_motion",
        )
        for block in ctx.blocks()
        if block.category is BlockCategory.MOTION
    ]


# ---------------------------------------------------------------------------
# W401 / W402 — asset references
# ---------------------------------------------------------------------------


def _asset_suggestion(name: str, available: tuple[str, ...], kind: str) -> str:
    guess = closest_word(name, available, max_distance=max(2, len(name) // 3))
    if guess is not None:
        return f"Did you mean '{guess}'?"
    return f"Available {kind}s: {', '.join(available)}"


def rule_asset_references(ctx: ValidationContext) -> list[Diagnostic]:
    """W401/W402: Literal costume and sound names should exist."""
    diagnostics: list[Diagnostic] = []
    costumes = {n.lower() for n in ctx.costume_names}
    sounds = {n.lower() for n in ctx.sound_names}
    for block in ctx.blocks():
        if not block.args:
            continue
        target = block.args[0]
        if not isinstance(target, str) or is_reference(target):
            continue
        if block.name in COSTUME_BLOCKS and costumes and target.lower() not in costumes:
            diagnostics.append(warning(
                ErrorCode.UNKNOWN_COSTUME,
                f"Costume '{target}' was not found in {ctx.sprite_name}'s costumes.",
                block.span,
                suggestion=_asset_suggestion(target, ctx.costume_names, "costume"),
                rule="asset_references",
            ))
        elif block.name in SOUND_BLOCKS and sounds and target.lower() not in sounds:
            diagnostics.append(warning(
                ErrorCode.UNKNOWN_SOUND,
                f"Sound '{target}' was not found in {ctx.sprite_name}'s sounds.",
                block.span,
                suggestion=_asset_suggestion(target, ctx.sound_names, "sound"),
                rule="asset_references",
            ))
    return diagnostics


# ---------------------------------------------------------------------------
# W101 — undeclared variables
# ---------------------------------------------------------------------------


def rule_undeclared_variables(ctx: ValidationContext) -> list[Diagnostic]:
    """W101: Variables should be declared with ``var`` before use."""
    diagnostics: list[Diagnostic] = []
    declared = ctx.variable_names
    reported: set[str] = set()
    for block, params in ctx.blocks_with_params():
        names: list[str] = []
        if block.name in VARIABLE_BLOCKS and block.args and isinstance(block.args[0], str):
            names.append(block.args[0])
        args = block.args[1:] if block.name in MESSAGE_BLOCKS else block.args
        names.extend(
            arg[1:] for arg in args
            if isinstance(arg, str) and arg.startswith("$") and len(arg) > 1
        )
        for name in names:
            if name in declared or name in params or name in reported:
                continue
            reported.add(name)
            diagnostics.append(warning(
                ErrorCode.UNDECLARED_VARIABLE,
                f"Variable '{name}' is used but never declared.",
                block.span,
                suggestion=f"Add 'var {name} = 0' at the top of the sprite",
                rule="undeclared_variables",
            ))
    return diagnostics


# ---------------------------------------------------------------------------
# E112 — undeclared lists
# ---------------------------------------------------------------------------


def rule_undeclared_lists(ctx: ValidationContext) -> list[Diagnostic]:
    """E112: List blocks must name a declared list."""
    diagnostics: list[Diagnostic] = []
    declared = ctx.list_names
    for block in ctx.blocks():
        if block.name not in LIST_BLOCKS or not block.args:
            continue
        name = block.args[0]
        if not isinstance(name, str) or name in declared:
            continue
        guess = closest_word(name, declared) if declared else None
        suggestion = (
            f"Did you mean '{guess}'?" if guess is not None
            else f"Declare it first: list {name} = []"
        )
        diagnostics.append(error(
            ErrorCode.UNDECLARED_LIST,
            f"List '{name}' is used but never declared.",
            block.span,
            suggestion=suggestion,
            rule="undeclared_lists",
        ))
    return diagnostics


# ---------------------------------------------------------------------------
# W107 — empty C-blocks
# ---------------------------------------------------------------------------


def rule_empty_bodies(ctx: ValidationContext) -> list[Diagnostic]:
    """W107: A loop or ``if`` with nothing inside is likely a mistake."""
    diagnostics: list[Diagnostic] = []
    for block in ctx.blocks():
        spec = lookup(block.name)
        if spec is None or spec.kind is not BlockKind.C_BLOCK or block.body is not None:
            continue
        diagnostics.append(warning(
            ErrorCode.EMPTY_BODY,
            f"'{block.name}' has no blocks inside it.",
            block.span,
            suggestion="Indent the blocks that should run inside it",
            rule="empty_bodies",
        ))
    return diagnostics


# ---------------------------------------------------------------------------
# Default rule set
# ---------------------------------------------------------------------------

DEFAULT_RULES: list[Rule] = [
    rule_missing_values,
    rule_argument_types,
    rule_boolean_operations,
    rule_assignment_in_expression,
    rule_unknown_blocks,
    rule_procedure_arity,
    rule_duplicate_procedures,
    rule_stage_motion,
    rule_asset_references,
    rule_undeclared_variables,
    rule_undeclared_lists,
    rule_empty_bodies,
]
