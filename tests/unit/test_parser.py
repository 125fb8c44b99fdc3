"""Unit tests for whiskers.parser — indentation-driven parser producing a Program."""
from __future__ import annotations

import pytest

from whiskers.ast.nodes import Block, BlockCategory, Program, chain_length
from whiskers.diagnostics import Diagnostic
from whiskers.lexer.lexer import tokenize
from whiskers.parser.parser import Parser, parse, parse_source


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def parse_ok(source: str) -> Program:
    """Parse *source* and assert that it produced no diagnostics."""
    program, diagnostics = parse_source(source)
    assert diagnostics == [], [str(d) for d in diagnostics]
    return program


def first_hat(program: Program) -> Block:
    return program.scripts[0].blocks[0]


def codes(diagnostics: list[Diagnostic]) -> list[str]:
    return [d.code for d in diagnostics]


def script(*lines: str) -> str:
    """Build a green-flag script with *lines* as its indented body."""
    body = "".join(f"    {line}\n" for line in lines)
    return f"when flag clicked\n{body}"


# ---------------------------------------------------------------------------
# Scripts and nesting
# ---------------------------------------------------------------------------


class TestScripts:
    def test_flag_repeat_move(self, flag_script: str) -> None:
        program = parse_ok(flag_script)
        hat = first_hat(program)
        assert hat.name == "whenFlagClicked"
        assert hat.category is BlockCategory.EVENT
        loop = hat.body
        assert loop is not None and loop.name == "repeat"
        assert loop.args == [3]
        assert loop.body is not None
        assert loop.body.name == "move"
        assert loop.body.args == [10]

    def test_sequential_statements_chain_through_next(self) -> None:
        program = parse_ok(script("move 10", "turn right 15 degrees", 'say "hi"'))
        body = first_hat(program).body
        assert chain_length(body) == 3
        assert [b.name for b in body.chain()] == ["move", "turnRight", "say"]

    def test_each_hat_is_its_own_script(self) -> None:
        source = script("move 1") + "when this sprite clicked\n    hide\n"
        program = parse_ok(source)
        assert len(program.scripts) == 2
        assert program.scripts[1].blocks[0].name == "whenSpriteClicked"

    def test_statements_at_left_edge_join_the_body(self) -> None:
        program = parse_ok("when flag clicked\nmove 10\nsay \"hi\"\n")
        assert [b.name for b in first_hat(program).body.chain()] == ["move", "say"]

    def test_blocks_after_nested_body_continue_outer_chain(self) -> None:
        program = parse_ok(script("repeat 2", "    move 5", 'say "done"'))
        body = first_hat(program).body
        assert [b.name for b in body.chain()] == ["repeat", "say"]
        assert chain_length(body.body) == 1

    @pytest.mark.parametrize("header, expected", [
        ("when flag clicked", "whenFlagClicked"),
        ("when green flag clicked", "whenFlagClicked"),
        ("when flagClicked", "whenFlagClicked"),
        ("when this sprite clicked", "whenSpriteClicked"),
        ("when I start as a clone", "whenCloneStarts"),
        ("when space key pressed", "whenKeyPressed"),
        ("when I receive start", "whenReceived"),
    ])
    def test_hat_forms(self, header: str, expected: str) -> None:
        program = parse_ok(f"{header}\n    show\n")
        assert first_hat(program).name == expected

    def test_receive_keeps_bare_message_as_reference(self) -> None:
        hat = first_hat(parse_ok("when I receive start\n    show\n"))
        assert hat.args == ["$start"]

    def test_key_name_captured(self) -> None:
        hat = first_hat(parse_ok("when space key pressed\n    show\n"))
        assert hat.args == ["space"]


# ---------------------------------------------------------------------------
# if / else
# ---------------------------------------------------------------------------


class TestConditionals:
    def test_else_line_turns_if_into_if_else(self) -> None:
        program = parse_ok(script(
            "if touching edge then",
            '    say "edge"',
            "else",
            '    say "free"',
        ))
        block = first_hat(program).body
        assert block.name == "ifElse"
        assert block.body.args == ["edge"]
        assert block.else_body.args == ["free"]
        condition = block.args[0]
        assert isinstance(condition, Block)
        assert condition.name == "touching"
        assert condition.args == ["edge"]

    def test_if_without_else_stays_if(self) -> None:
        program = parse_ok(script("if mouse down then", "    hide"))
        block = first_hat(program).body
        assert block.name == "if"
        assert block.else_body is None

    def test_inline_if_else(self) -> None:
        program = parse_ok(
            "var n = 10\n" + script('if n > 5 then say "big" else say "small"')
        )
        block = first_hat(program).body
        assert block.name == "ifElse"
        assert block.args[0].name == "greater"
        assert block.args[0].args == ["$n", 5]
        assert block.body.args == ["big"]
        assert block.else_body.args == ["small"]

    def test_else_without_if_is_e104(self) -> None:
        _, diagnostics = parse_source(script("move 1", "else"))
        assert codes(diagnostics) == ["E104"]
        assert "without a matching 'if'" in diagnostics[0].message

    def test_single_equals_in_condition_is_comparison(self) -> None:
        program = parse_ok("var n = 0\n" + script("if n = 1 then", "    hide"))
        assert first_hat(program).body.args[0].name == "equals"


# ---------------------------------------------------------------------------
# Statement shapes
# ---------------------------------------------------------------------------


class TestStatementShapes:
    @pytest.mark.parametrize("line, name, args", [
        ("move 10 steps", "move", [10]),
        ("move 10", "move", [10]),
        ("turn left 90 degrees", "turnLeft", [90]),
        ("go to x: 10 y: 20", "goToXY", [10, 20]),
        ("go to mouse-pointer", "goTo", ["mouse-pointer"]),
        ("glide 1 secs to x: 5 y: -5", "glide", [1, 5, -5]),
        ("point in direction 90", "pointInDirection", [90]),
        ('say "Hello!" for 2 seconds', "sayFor", ["Hello!", 2]),
        ("wait 1 seconds", "wait", [1]),
        ('wait "hello" seconds', "wait", ["hello"]),
        ("repeat 3", "repeat", [3]),
        ("set size to 50 %", "setSize", [50]),
        ("stop all", "stop", ["all"]),
        ("stop this script", "stop", ["this script"]),
        ("next costume", "nextCostume", []),
        ("pen down", "penDown", []),
        ("erase all", "clear", []),
    ])
    def test_statement(self, line: str, name: str, args: list) -> None:
        program, _ = parse_source(script(line))
        block = first_hat(program).body
        assert block.name == name
        assert block.args == args

    def test_set_variable(self) -> None:
        program = parse_ok("var score = 1\n" + script("set score to 0"))
        block = first_hat(program).body
        assert block.name == "setVariable"
        assert block.args == ["score", 0]
        assert block.category is BlockCategory.VARIABLE

    def test_change_variable(self) -> None:
        program = parse_ok("var score = 1\n" + script("change score by 1"))
        assert first_hat(program).body.args == ["score", 1]

    def test_add_to_list_puts_list_name_first(self) -> None:
        program = parse_ok("list fruits = []\n" + script('add "apple" to fruits'))
        block = first_hat(program).body
        assert block.name == "addToList"
        assert block.args == ["fruits", "apple"]

    def test_operator_precedence(self) -> None:
        program = parse_ok("var total = 0\n" + script("set total to 1 + 2 * 3"))
        value = first_hat(program).body.args[1]
        assert value.name == "add"
        assert value.args[0] == 1
        assert value.args[1].name == "multiply"
        assert value.args[1].args == [2, 3]

    def test_parentheses_group(self) -> None:
        program = parse_ok("var total = 0\n" + script("set total to (1 + 2) * 3"))
        value = first_hat(program).body.args[1]
        assert value.name == "multiply"
        assert value.args[0].name == "add"

    def test_reference_may_precede_declaration(self) -> None:
        program = parse_ok(script("say score") + "var score = 1\n")
        assert first_hat(program).body.args == ["$score"]

    def test_list_length_reporter(self) -> None:
        program = parse_ok(script("say (length of fruits)") + "list fruits = []\n")
        value = first_hat(program).body.args[0]
        assert value.name == "lengthOfList"
        assert value.args == ["fruits"]

    def test_unknown_word_kept_as_custom_block(self) -> None:
        program = parse_ok(script("jmup 10"))
        block = first_hat(program).body
        assert block.category is BlockCategory.CUSTOM
        assert block.name == "jmup"
        assert block.args == [10]


# ---------------------------------------------------------------------------
# Declarations and procedures
# ---------------------------------------------------------------------------


class TestDeclarations:
    def test_variables_with_and_without_values(self) -> None:
        program = parse_ok('var score = 5\nvar name = "cat"\nvar lives\nvar ready = true\n')
        assert program.variables == {"score": 5, "name": "cat", "lives": 0, "ready": True}

    def test_long_variable_keyword(self) -> None:
        assert parse_ok("variable speed = 2.5\n").variables == {"speed": 2.5}

    def test_lists_default_to_empty(self) -> None:
        program = parse_ok("list fruits = []\nlist names\n")
        assert program.lists == {"fruits": [], "names": []}

    @pytest.mark.parametrize("source", [
        "var when = 1\n",
        "var repeat\n",
        "list move = []\n",
        "define forever\n    hide\n",
    ])
    def test_keyword_as_name_is_e102(self, source: str) -> None:
        _, diagnostics = parse_source(source)
        assert "E102" in codes(diagnostics)

    def test_missing_initial_value_is_e103(self) -> None:
        _, diagnostics = parse_source("var score =\n")
        assert codes(diagnostics) == ["E103"]

    def test_procedure_definition(self) -> None:
        program = parse_ok("define jump (height)\n    change y by height\n")
        define = first_hat(program)
        assert define.category is BlockCategory.PROCEDURE
        assert define.name == "defineFunction"
        assert define.args == ["jump", "height"]
        assert define.body.name == "changeY"
        assert define.body.args == ["$height"]
        assert program.procedures == {"jump": ["height"]}

    def test_procedure_with_several_parameters(self) -> None:
        program = parse_ok("define walk (dx, dy)\n    change x by dx\n")
        assert program.procedures == {"walk": ["dx", "dy"]}

    def test_bare_name_call_to_defined_procedure(self) -> None:
        source = "define jump (height)\n    change y by height\n" + script("jump 10")
        program = parse_ok(source)
        call = program.scripts[1].blocks[0].body
        assert call.category is BlockCategory.CUSTOM
        assert call.name == "call"
        assert call.args == ["jump", 10]

    def test_explicit_call(self) -> None:
        source = script("call jump 10") + "define jump (height)\n    change y by height\n"
        call = first_hat(parse_ok(source)).body
        assert call.name == "call"
        assert call.args == ["jump", 10]


# ---------------------------------------------------------------------------
# Structural errors and recovery
# ---------------------------------------------------------------------------


class TestStructuralErrors:
    def test_statement_outside_script_is_e104(self) -> None:
        _, diagnostics = parse_source("move 10\n")
        assert codes(diagnostics) == ["E104"]
        assert "must be inside a script" in diagnostics[0].message

    def test_top_level_indentation_is_e111(self) -> None:
        _, diagnostics = parse_source("    move 10\n")
        assert codes(diagnostics) == ["E111"]

    def test_indent_under_non_container_is_e111(self) -> None:
        _, diagnostics = parse_source(script("move 10", "    turn right 5"))
        assert codes(diagnostics) == ["E111"]
        assert "'move' cannot contain other blocks" in diagnostics[0].message

    def test_bad_line_does_not_lose_its_neighbours(self) -> None:
        program, diagnostics = parse_source(script("move 10", "say )", "turn right 5"))
        assert codes(diagnostics) == ["E104"]
        assert [b.name for b in first_hat(program).body.chain()] == ["move", "turnRight"]

    def test_errors_in_several_scripts_all_reported(self) -> None:
        source = script("say )") + "when this sprite clicked\n    say )\n"
        _, diagnostics = parse_source(source)
        assert codes(diagnostics) == ["E104", "E104"]
        assert [d.line for d in diagnostics] == [2, 4]

    def test_nesting_limit_is_e110(self) -> None:
        source = script("forever", "    forever", "        forever", "            move 1")
        _, diagnostics = parse_source(source, max_nesting_depth=2)
        assert "E110" in codes(diagnostics)

    def test_expression_depth_limit_is_e110(self) -> None:
        _, diagnostics = parse_source(script("say ((((1))))"), max_expression_depth=2)
        assert "E110" in codes(diagnostics)

    def test_deep_nesting_within_limits_parses(self) -> None:
        lines = [("    " * depth) + "forever" for depth in range(10)]
        program = parse_ok(script(*lines))
        assert first_hat(program).body.name == "forever"

    def test_deep_region_reports_e110_once(self) -> None:
        lines = [("    " * depth) + "forever" for depth in range(60)]
        program, diagnostics = parse_source(script(*lines, "move 1"))
        assert codes(diagnostics) == ["E110"]
        assert [b.name for b in first_hat(program).body.chain()] == ["forever", "move"]

    def test_each_deep_region_is_reported(self) -> None:
        deep = ["forever", "    forever", "        forever", "            move 1"]
        _, diagnostics = parse_source(script(*deep, *deep), max_nesting_depth=2)
        assert codes(diagnostics) == ["E110", "E110"]

    def test_near_miss_dedent_keeps_script_intact(self) -> None:
        source = "when flag clicked\n    move 10\n   move 5\n    move 7\n"
        program, diagnostics = parse_source(source)
        assert codes(diagnostics) == ["E006"]
        assert [b.name for b in first_hat(program).body.chain()] == ["move", "move", "move"]

    def test_lexical_and_structural_diagnostics_are_merged_in_order(self) -> None:
        _, diagnostics = parse_source("move 1\n" + script("say @"))
        assert codes(diagnostics) == ["E104", "E007"]


# ---------------------------------------------------------------------------
# Parser class API
# ---------------------------------------------------------------------------


class TestParserApi:
    def test_parse_from_tokens(self, flag_script: str) -> None:
        tokens, _ = tokenize(flag_script)
        program = parse(tokens)
        assert len(program.scripts) == 1

    def test_parser_diagnostics_property(self) -> None:
        tokens, _ = tokenize("move 10\n")
        parser = Parser(tokens)
        parser.parse()
        assert codes(parser.diagnostics) == ["E104"]

    def test_empty_source_gives_empty_program(self) -> None:
        program = parse_ok("")
        assert program.scripts == []
        assert program.variables == {}
