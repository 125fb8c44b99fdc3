"""Unit tests for whiskers.validator — semantic rules and the Validator class."""
from __future__ import annotations

import pytest

from whiskers.diagnostics import Diagnostic, DiagnosticSeverity, has_errors
from whiskers.parser.parser import parse_source
from whiskers.validator.context import ValidationContext
from whiskers.validator.rules import DEFAULT_RULES
from whiskers.validator.validator import Validator, validate


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def script(*lines: str) -> str:
    body = "".join(f"    {line}\n" for line in lines)
    return f"when flag clicked\n{body}"


def check(source: str, procedures: dict[str, list[str]] | None = None, **kwargs) -> list[Diagnostic]:
    """Parse *source* (which must parse cleanly) and validate it."""
    program, diagnostics = parse_source(source)
    assert not has_errors(diagnostics), [str(d) for d in diagnostics]
    return validate(program, source, procedures, **kwargs)


def codes(diagnostics: list[Diagnostic]) -> list[str]:
    return [d.code for d in diagnostics]


def only(diagnostics: list[Diagnostic], code: str) -> Diagnostic:
    found = [d for d in diagnostics if d.code == code]
    assert len(found) == 1, [str(d) for d in diagnostics]
    return found[0]


# ===========================================================================
# Clean programs
# ===========================================================================


class TestCleanPrograms:
    def test_flag_script_is_clean(self, flag_script: str) -> None:
        assert check(flag_script) == []

    def test_declared_names_are_clean(self) -> None:
        source = (
            "var score = 0\n"
            "list fruits = []\n"
            + script("set score to score + 1", 'add "apple" to fruits', "say (item 1 of fruits)")
        )
        assert check(source) == []

    def test_numeric_text_accepted_for_number_slot(self) -> None:
        assert check(script('wait "2" seconds')) == []

    def test_bare_message_word_is_not_a_variable(self) -> None:
        source = "when I receive start\n    broadcast go\n"
        assert check(source) == []


# ===========================================================================
# E103 — missing values
# ===========================================================================


class TestMissingValues:
    def test_empty_slot(self) -> None:
        d = only(check(script("move")), "E103")
        assert d.message == "'move' is missing a value."
        assert d.suggestion == "For example: move 10 steps"

    def test_missing_coordinate_points_at_label(self) -> None:
        d = only(check(script("go to x: y: 5")), "E103")
        assert d.message == "Missing value after 'x:'. You need to provide a number."
        assert d.column == 11


# ===========================================================================
# E202 / E204 / E205 — types
# ===========================================================================


class TestArgumentTypes:
    def test_string_where_number_required(self) -> None:
        d = only(check(script('wait "hello" seconds')), "E202")
        assert d.message == "'wait' requires a number, but got a string \"hello\"."
        assert d.is_error

    def test_condition_where_number_required(self) -> None:
        d = only(check(script("move (mouse down)")), "E202")
        assert "but got a condition" in d.message

    def test_number_where_condition_required(self) -> None:
        d = only(check(script("if 5 then", "    hide")), "E204")
        assert d.message == "'if' requires a condition (true/false), but got 5."

    def test_string_where_condition_required(self) -> None:
        d = only(check(script('repeat until "yes"', "    hide")), "E204")
        assert 'a string "yes"' in d.message

    def test_literal_operand_of_and(self) -> None:
        d = only(check(script("if true and 5 then", "    hide")), "E205")
        assert d.message == "Cannot use 'and' with 5. The right side should be a condition."

    def test_literal_operand_of_not(self) -> None:
        d = only(check(script('if not "x" then', "    hide")), "E205")
        assert "Its input should be a condition" in d.message


# ===========================================================================
# E302 — assignment inside expression
# ===========================================================================


class TestAssignmentInExpression:
    def test_bare_equals_in_set_value(self) -> None:
        source = "var score = 0\nvar a = 1\n" + script("set score to a = 5")
        d = only(check(source), "E302")
        assert d.message.startswith("Unexpected '=' in expression.")

    @pytest.mark.parametrize("line", ["set x to x = 5", "set y to y = 1"])
    def test_bare_equals_in_motion_set(self, line: str) -> None:
        diagnostics = check(script(line))
        assert codes(diagnostics) == ["E302"]
        assert diagnostics[0].column == 16

    @pytest.mark.parametrize("value", ["(a = 5)", "a >= 5", '"a = 5"'])
    def test_equals_that_is_not_an_assignment(self, value: str) -> None:
        source = "var score = 0\nvar a = 1\n" + script(f"set score to {value}")
        assert "E302" not in codes(check(source))


# ===========================================================================
# E108 / E109 / W403 — blocks and procedures
# ===========================================================================


class TestBlocksAndProcedures:
    def test_unknown_block_with_suggestion(self) -> None:
        d = only(check(script("mvoe 10")), "E108")
        assert d.message == "Unknown block 'mvoe'. Did you mean 'move'?"
        assert d.suggestion == "For example: move 10 steps"

    def test_unknown_block_without_suggestion(self) -> None:
        d = only(check(script("xylophone")), "E108")
        assert d.message == "Unknown block 'xylophone'."

    def test_keyword_from_another_block_points_to_it(self) -> None:
        d = only(check(script("if touching edge then", "    bounce")), "E108")
        assert d.message == (
            "Unknown block 'bounce'. 'bounce' is part of the block 'if on edge, bounce'."
        )
        assert d.suggestion == "For example: if on edge, bounce"

    def test_unknown_procedure_in_call(self) -> None:
        source = "define jump (height)\n    change y by height\n" + script("call jmp 10")
        d = only(check(source), "E108")
        assert d.message == "Unknown procedure 'jmp'. Did you mean 'jump'?"

    def test_procedure_from_another_sprite_is_known(self) -> None:
        diagnostics = check(script("jump 10"), {"jump": ["height"]})
        assert diagnostics == []

    def test_wrong_argument_count(self) -> None:
        source = "define jump (height)\n    change y by height\n" + script("jump 10 20")
        d = only(check(source), "E109")
        assert d.message == "'jump' expects 1 argument but got 2."
        assert d.suggestion == "The procedure 'jump' needs: height"

    def test_wrong_argument_count_for_bare_call_from_other_sprite(self) -> None:
        d = only(check(script("jump"), {"jump": ["height"]}), "E109")
        assert d.message == "'jump' expects 1 argument but got 0."

    def test_duplicate_definition_warns(self) -> None:
        source = (
            "define jump (height)\n    change y by height\n"
            "define jump (height)\n    change y by height\n"
        )
        d = only(check(source), "W403")
        assert d.message == "Procedure 'jump' is defined more than once; the last definition is used."
        assert not d.is_error
        assert d.line == 3


# ===========================================================================
# E303 / W401 / W402 — sprite context
# ===========================================================================


class TestSpriteContext:
    def test_motion_on_stage(self) -> None:
        d = only(check(script("move 10"), is_stage=True), "E303")
        assert d.message == "'move' cannot be used here: motion blocks are not allowed on the Stage."

    def test_motion_on_sprite_is_fine(self) -> None:
        assert check(script("move 10"), is_stage=False) == []

    def test_looks_on_stage_is_fine(self) -> None:
        assert check(script("next backdrop"), is_stage=True) == []

    def test_unknown_costume(self) -> None:
        diagnostics = check(
            script('switch costume to "dgo"'),
            sprite_name="Cat",
            costume_names=("dog", "cat"),
        )
        d = only(diagnostics, "W401")
        assert d.message == "Costume 'dgo' was not found in Cat's costumes."
        assert d.suggestion == "Did you mean 'dog'?"

    def test_costume_match_is_case_insensitive(self) -> None:
        assert check(script('switch costume to "DOG"'), costume_names=("dog",)) == []

    def test_asset_checks_skipped_without_declared_names(self) -> None:
        assert check(script('switch costume to "anything"', 'play sound "bark"')) == []

    def test_unknown_sound(self) -> None:
        diagnostics = check(script('play sound "bark"'), sound_names=("meow",))
        d = only(diagnostics, "W402")
        assert d.suggestion == "Available sounds: meow"


# ===========================================================================
# W101 / E112 — declarations
# ===========================================================================


class TestDeclarations:
    def test_undeclared_variable_warns_once(self) -> None:
        diagnostics = check(script("say score", "think score"))
        d = only(diagnostics, "W101")
        assert d.message == "Variable 'score' is used but never declared."
        assert d.suggestion == "Add 'var score = 0' at the top of the sprite"

    def test_variable_declared_by_another_sprite(self) -> None:
        assert check(script("say score"), known_variables={"score"}) == []

    def test_parameter_is_not_undeclared(self) -> None:
        assert check("define jump (height)\n    change y by height\n") == []

    def test_set_undeclared_variable_warns(self) -> None:
        only(check(script("set lives to 3")), "W101")

    def test_undeclared_list_is_error(self) -> None:
        d = only(check(script('add "apple" to fruits')), "E112")
        assert d.message == "List 'fruits' is used but never declared."
        assert d.is_error

    def test_undeclared_list_suggests_close_name(self) -> None:
        d = only(check("list fruits = []\n" + script('add "apple" to fruit')), "E112")
        assert d.suggestion == "Did you mean 'fruits'?"

    def test_list_declared_by_another_sprite(self) -> None:
        assert check(script('add "apple" to fruits'), known_lists={"fruits"}) == []


# ===========================================================================
# W107 — empty bodies
# ===========================================================================


class TestEmptyBodies:
    @pytest.mark.parametrize("header, name", [
        ("repeat 3", "repeat"),
        ("forever", "forever"),
        ("if mouse down then", "if"),
    ])
    def test_empty_c_block(self, header: str, name: str) -> None:
        d = only(check(script(header)), "W107")
        assert d.message == f"'{name}' has no blocks inside it."
        assert d.severity is DiagnosticSeverity.WARNING


# ===========================================================================
# Validator
# ===========================================================================


class TestValidator:
    def test_default_rule_count(self) -> None:
        assert Validator().rule_count == len(DEFAULT_RULES)

    def test_strict_promotes_warnings(self) -> None:
        diagnostics = check(script("repeat 3"), strict=True)
        d = only(diagnostics, "W107")
        assert d.severity is DiagnosticSeverity.ERROR

    def test_results_sorted_by_position(self) -> None:
        diagnostics = check(script("say score", "mvoe 10", 'wait "x"'))
        positions = [(d.line, d.column) for d in diagnostics]
        assert positions == sorted(positions)
        assert codes(diagnostics) == ["W101", "E108", "E202"]

    def test_failing_rule_becomes_internal_error(self) -> None:
        def broken_rule(ctx: ValidationContext) -> list[Diagnostic]:
            raise RuntimeError("boom")

        program, _ = parse_source(script("mvoe 10"))
        validator = Validator()
        validator.add_rule(broken_rule)
        diagnostics = validator.validate(ValidationContext(program=program))
        internal = only(diagnostics, "E999")
        assert "broken_rule" in internal.message
        assert "boom" in internal.message
        assert "E108" in codes(diagnostics)

    def test_custom_rule_list(self) -> None:
        program, _ = parse_source(script("mvoe 10"))
        assert Validator(rules=[]).validate(ValidationContext(program=program)) == []
