"""Unit tests for whiskers.grammar and the argument shaper."""
from __future__ import annotations

import pytest

from whiskers.ast.nodes import Block, BlockCategory, Span
from whiskers.grammar.blocks import (
    BLOCK_SPECS,
    CONTAINER_BLOCKS,
    ArgShape,
    BlockKind,
    category_of,
    lookup,
)
from whiskers.grammar.forms import (
    STATEMENT_FORMS,
    Literal,
    Slot,
    compile_pattern,
    statement_words,
)
from whiskers.grammar.tokens import KEYWORDS, TOP_LEVEL_KEYWORDS, Token, TokenType
from whiskers.parser.errors import ParseError
from whiskers.parser.shaping import Operand, Scope, Shaper, Symbol, Word

_S = Span(0, 1, 1, 1)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def word(text: str) -> Word:
    return Word(text, text in KEYWORDS, _S)


def num(value: int) -> Operand:
    return Operand(value, _S)


def sym(text: str) -> Symbol:
    return Symbol(text, _S)


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


class TestTokens:
    def test_top_level_keywords_are_keywords(self) -> None:
        assert TOP_LEVEL_KEYWORDS <= KEYWORDS

    def test_is_keyword_with_and_without_words(self) -> None:
        tok = Token(TokenType.KEYWORD, "when", 1, 1, 0)
        assert tok.is_keyword()
        assert tok.is_keyword("when", "define")
        assert not tok.is_keyword("var")

    def test_ident_is_never_keyword(self) -> None:
        tok = Token(TokenType.IDENT, "when", 1, 1, 0)
        assert not tok.is_keyword("when")
        assert tok.is_word

    def test_structural_tokens(self) -> None:
        assert Token(TokenType.INDENT, "", 1, 1, 0).is_structural
        assert not Token(TokenType.NUMBER, "1", 1, 1, 0).is_structural


# ---------------------------------------------------------------------------
# Block table
# ---------------------------------------------------------------------------


class TestBlockTable:
    @pytest.mark.parametrize("name, category", [
        ("move", BlockCategory.MOTION),
        ("say", BlockCategory.LOOKS),
        ("playSound", BlockCategory.SOUND),
        ("repeat", BlockCategory.CONTROL),
        ("whenFlagClicked", BlockCategory.EVENT),
        ("setVariable", BlockCategory.VARIABLE),
        ("penDown", BlockCategory.PEN),
        ("defineFunction", BlockCategory.PROCEDURE),
        ("greater", BlockCategory.OPERATOR),
    ])
    def test_category_of(self, name: str, category: BlockCategory) -> None:
        assert category_of(name) is category

    def test_unknown_name_is_custom(self) -> None:
        assert category_of("jump") is BlockCategory.CUSTOM
        assert lookup("jump") is None

    def test_containers(self) -> None:
        assert {"repeat", "forever", "if", "ifElse", "whenFlagClicked", "defineFunction"} <= CONTAINER_BLOCKS
        assert "move" not in CONTAINER_BLOCKS

    def test_number_slots(self) -> None:
        assert lookup("wait").arg_shapes == (ArgShape.NUMBER,)
        assert lookup("if").arg_shapes == (ArgShape.BOOLEAN,)

    def test_every_spec_has_an_example(self) -> None:
        assert all(spec.example for spec in BLOCK_SPECS.values())

    def test_expression_kinds(self) -> None:
        assert lookup("touching").kind is BlockKind.BOOLEAN
        assert lookup("touching").is_expression
        assert not lookup("move").is_expression


# ---------------------------------------------------------------------------
# Surface forms
# ---------------------------------------------------------------------------


class TestForms:
    def test_compile_pattern(self) -> None:
        elements = compile_pattern("green? flag clicked|pressed <value>")
        assert elements[0] == Literal(frozenset({"green"}), optional=True)
        assert elements[1] == Literal(frozenset({"flag"}))
        assert elements[2] == Literal(frozenset({"clicked", "pressed"}))
        assert elements[3] == Slot("value")

    def test_unknown_slot_kind_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown slot kind"):
            compile_pattern("<bogus>")

    def test_every_form_names_a_known_block(self) -> None:
        for forms in STATEMENT_FORMS.values():
            for form in forms:
                assert lookup(form.block) is not None, form.source

    def test_statement_words_include_structure_words(self) -> None:
        words = statement_words()
        assert {"move", "define", "else", "end"} <= words


# ---------------------------------------------------------------------------
# Shaper
# ---------------------------------------------------------------------------


class TestShaper:
    def test_reference_prefers_variables(self) -> None:
        scope = Scope(variables={"score"}, lists={"fruits"})
        assert scope.reference("score") == "$score"
        assert scope.reference("fruits") == "#fruits"
        assert scope.reference("unknown") == "$unknown"

    def test_parameter_shadows_list(self) -> None:
        scope = Scope(lists={"items"}, params={"items"})
        assert scope.reference("items") == "$items"

    def test_shape_statement_move(self) -> None:
        block = Shaper(Scope()).shape_statement(word("move"), [num(10), word("steps")])
        assert block.name == "move"
        assert block.args == [10]

    def test_shape_statement_failure_raises_parse_error(self) -> None:
        with pytest.raises(ParseError) as info:
            Shaper(Scope()).shape_statement(word("point"), [word("sideways")])
        assert info.value.code == "E106"

    def test_empty_value_slot_is_none(self) -> None:
        block = Shaper(Scope()).shape_statement(word("move"), [])
        assert block.args == [None]

    def test_fold_precedence(self) -> None:
        value = Shaper(Scope()).fold([num(1), sym("+"), num(2), sym("*"), num(3)])
        assert isinstance(value, Block)
        assert value.name == "add"
        assert value.args[1].name == "multiply"

    def test_fold_unary_minus_on_literal(self) -> None:
        assert Shaper(Scope()).fold([sym("-"), num(4)]) == -4

    def test_fold_not_and_or(self) -> None:
        value = Shaper(Scope()).fold([word("not"), word("true"), word("or"), word("false")])
        assert value.name == "or"
        assert value.args[0].name == "not"
        assert value.args[1] is False

    def test_fold_trailing_operator_is_missing_value(self) -> None:
        with pytest.raises(ParseError) as info:
            Shaper(Scope()).fold([num(1), sym("+")])
        assert info.value.code == "E103"

    def test_list_contains(self) -> None:
        scope = Scope(lists={"fruits"})
        value = Shaper(scope).fold([word("fruits"), word("contains"), Operand("apple", _S)])
        assert value.name == "listContains"
        assert value.args == ["fruits", "apple"]

    def test_split_arguments_by_commas(self) -> None:
        values = Shaper(Scope()).split_arguments([num(1), sym(","), num(2), sym("+"), num(3)])
        assert values[0] == 1
        assert values[1].name == "add"

    def test_split_arguments_by_expressions(self) -> None:
        assert Shaper(Scope()).split_arguments([num(10), num(20)]) == [10, 20]

    def test_fixed_two_word_reporter(self) -> None:
        value = Shaper(Scope()).fold([word("mouse"), word("x")])
        assert value.name == "mouseX"
