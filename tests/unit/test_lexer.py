"""Unit tests for whiskers.lexer — tokenization of Whiskers source text."""
from __future__ import annotations

import pytest

from whiskers.grammar.tokens import TokenType
from whiskers.lexer.lexer import Lexer, tokenize


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def types_of(source: str) -> list[TokenType]:
    """Return the token types of *source*, excluding NEWLINE and EOF."""
    tokens, _ = tokenize(source)
    excluded = {TokenType.NEWLINE, TokenType.EOF}
    return [t.type for t in tokens if t.type not in excluded]


def codes_of(source: str) -> list[str]:
    _, diagnostics = tokenize(source)
    return [d.code for d in diagnostics]


# ---------------------------------------------------------------------------
# Empty and whitespace-only inputs
# ---------------------------------------------------------------------------


class TestEmptyInputs:
    def test_empty_string_ends_with_eof(self) -> None:
        tokens, diagnostics = tokenize("")
        assert tokens[-1].type is TokenType.EOF
        assert diagnostics == []

    def test_whitespace_only_has_no_indent(self) -> None:
        assert TokenType.INDENT not in types_of("   \t  ")

    def test_blank_lines_produce_no_words(self) -> None:
        assert types_of("\n\n\n") == []


# ---------------------------------------------------------------------------
# Words, numbers and strings
# ---------------------------------------------------------------------------


class TestWords:
    @pytest.mark.parametrize("source, expected", [
        ("move", TokenType.KEYWORD),
        ("forever", TokenType.KEYWORD),
        ("flagClicked", TokenType.KEYWORD),
        ("mouse-pointer", TokenType.KEYWORD),
        ("score", TokenType.IDENT),
        ("_hidden", TokenType.IDENT),
        ("player2", TokenType.IDENT),
    ])
    def test_word_classification(self, source: str, expected: TokenType) -> None:
        tokens, _ = tokenize(source)
        assert tokens[0].type is expected
        assert tokens[0].value == source

    def test_hyphen_not_glued_when_combination_is_not_a_keyword(self) -> None:
        tokens, _ = tokenize("left-foot")
        values = [t.value for t in tokens if t.type not in (TokenType.NEWLINE, TokenType.EOF)]
        assert values == ["left", "-", "foot"]


class TestNumbers:
    @pytest.mark.parametrize("source, expected", [
        ("10", "10"),
        ("3.14", "3.14"),
        ("-5", "-5"),
        ("0", "0"),
    ])
    def test_number_values(self, source: str, expected: str) -> None:
        tokens, _ = tokenize(source)
        assert tokens[0].type is TokenType.NUMBER
        assert tokens[0].value == expected

    def test_minus_after_value_is_subtraction(self) -> None:
        tokens, _ = tokenize("(a -1)")
        kinds = [t.type for t in tokens]
        assert TokenType.OPERATOR in kinds
        assert [t.value for t in tokens if t.type is TokenType.NUMBER] == ["1"]

    def test_minus_after_keyword_is_sign(self) -> None:
        tokens, _ = tokenize("move -10")
        assert tokens[1].type is TokenType.NUMBER
        assert tokens[1].value == "-10"


class TestStrings:
    def test_double_quoted(self) -> None:
        tokens, _ = tokenize('say "Hello!"')
        assert tokens[1].type is TokenType.STRING
        assert tokens[1].value == "Hello!"

    def test_single_quoted(self) -> None:
        tokens, _ = tokenize("say 'hi'")
        assert tokens[1].value == "hi"

    def test_escape_sequences(self) -> None:
        tokens, _ = tokenize(r'say "a\nb\tc"')
        assert tokens[1].value == "a\nb\tc"

    def test_unknown_escape_kept(self) -> None:
        tokens, _ = tokenize(r'say "a\qb"')
        assert tokens[1].value == "aqb"

    def test_unterminated_string_reports_e005(self) -> None:
        tokens, diagnostics = tokenize('say "oops')
        assert [d.code for d in diagnostics] == ["E005"]
        assert tokens[1].type is TokenType.STRING
        assert tokens[1].value == "oops"


# ---------------------------------------------------------------------------
# Operators and punctuation
# ---------------------------------------------------------------------------


class TestOperators:
    @pytest.mark.parametrize("op", ["==", "!=", ">=", "<="])
    def test_two_char_operators(self, op: str) -> None:
        tokens, _ = tokenize(f"a {op} b")
        assert tokens[1].type is TokenType.OPERATOR
        assert tokens[1].value == op

    @pytest.mark.parametrize("op", list("+*/%=><&|!"))
    def test_single_char_operators(self, op: str) -> None:
        tokens, _ = tokenize(f"a {op} b")
        assert tokens[1].value == op

    def test_punctuation(self) -> None:
        assert types_of("go to x: 1, (2)") == [
            TokenType.KEYWORD,
            TokenType.KEYWORD,
            TokenType.KEYWORD,
            TokenType.COLON,
            TokenType.NUMBER,
            TokenType.COMMA,
            TokenType.LPAREN,
            TokenType.NUMBER,
            TokenType.RPAREN,
        ]


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


class TestComments:
    def test_line_comment_token(self) -> None:
        tokens, _ = tokenize("move 10 // walk")
        comments = [t for t in tokens if t.type is TokenType.COMMENT]
        assert len(comments) == 1
        assert comments[0].value == "// walk"

    def test_comment_only_line_does_not_change_indentation(self) -> None:
        source = "when flag clicked\n        // note\n    move 10\n"
        kinds = types_of(source)
        assert kinds.count(TokenType.INDENT) == 1


# ---------------------------------------------------------------------------
# Indentation
# ---------------------------------------------------------------------------


class TestIndentation:
    def test_indent_and_dedent_balance(self) -> None:
        source = (
            "when flag clicked\n"
            "    repeat 3\n"
            "        move 10\n"
            "    say \"done\"\n"
            "when clicked\n"
            "    hide\n"
        )
        kinds = types_of(source)
        assert kinds.count(TokenType.INDENT) == kinds.count(TokenType.DEDENT) == 3

    def test_open_levels_closed_before_eof(self) -> None:
        tokens, _ = tokenize("when flag clicked\n    forever\n        move 1")
        tail = [t.type for t in tokens[-3:]]
        assert tail == [TokenType.DEDENT, TokenType.DEDENT, TokenType.EOF]

    def test_tab_counts_as_four_spaces(self) -> None:
        source = "when flag clicked\n\tmove 10\n    move 5\n"
        assert codes_of(source) == []
        assert types_of(source).count(TokenType.INDENT) == 1

    def test_inconsistent_dedent_reports_e006(self) -> None:
        source = "when flag clicked\n    move 10\n  move 5\n"
        assert codes_of(source) == ["E006"]

    def test_e006_suggestion_names_assumed_width(self) -> None:
        _, diagnostics = tokenize("when flag clicked\n    move 10\n move 5\n")
        assert diagnostics[0].suggestion is not None
        assert "0 space(s)" in diagnostics[0].suggestion

    @pytest.mark.parametrize("width, assumed", [(3, 4), (2, 4), (1, 0)])
    def test_unmatched_dedent_snaps_to_nearest_level(self, width: int, assumed: int) -> None:
        source = f"when flag clicked\n    move 10\n{' ' * width}move 5\n"
        tokens, diagnostics = tokenize(source)
        assert f"treating it as {assumed}" in diagnostics[0].message
        assert [t.type for t in tokens].count(TokenType.DEDENT) == 1

    def test_near_miss_keeps_following_lines_in_body(self) -> None:
        source = "when flag clicked\n    move 10\n   move 5\n    move 7\n"
        kinds = types_of(source)
        assert codes_of(source) == ["E006"]
        assert kinds.count(TokenType.INDENT) == kinds.count(TokenType.DEDENT) == 1


# ---------------------------------------------------------------------------
# Lexical errors
# ---------------------------------------------------------------------------


class TestLexicalErrors:
    @pytest.mark.parametrize("source, code", [
        ("say [1]", "E001"),
        ("if x {", "E003"),
        ("say ()", "E004"),
        ("say ( )", "E004"),
        ('say "x', "E005"),
        ("say @", "E007"),
    ])
    def test_error_codes(self, source: str, code: str) -> None:
        assert code in codes_of(source)

    def test_empty_list_literal_is_allowed(self) -> None:
        assert codes_of("list fruits = []") == []

    def test_scanning_continues_after_error(self) -> None:
        tokens, diagnostics = tokenize("say () \nmove 10\n")
        assert diagnostics[0].code == "E004"
        assert tokens[-1].type is TokenType.EOF
        assert any(t.value == "move" for t in tokens)

    def test_diagnostics_are_errors_with_lexer_rule(self) -> None:
        _, diagnostics = tokenize("say @")
        assert diagnostics[0].is_error
        assert diagnostics[0].rule == "lexer"

    def test_multiple_errors_all_reported(self) -> None:
        assert codes_of("say @ { ()") == ["E007", "E003", "E004"]


# ---------------------------------------------------------------------------
# Positions
# ---------------------------------------------------------------------------


class TestPositions:
    def test_line_and_column(self) -> None:
        tokens, _ = tokenize("when flag clicked\n    move 10\n")
        move = next(t for t in tokens if t.value == "move")
        assert (move.line, move.col) == (2, 5)

    def test_offsets_point_into_source(self) -> None:
        source = 'say "hi"'
        tokens, _ = tokenize(source)
        assert source[tokens[1].offset] == '"'

    def test_lexer_instance_exposes_diagnostics(self) -> None:
        lexer = Lexer("say @")
        lexer.tokenize()
        assert [d.code for d in lexer.diagnostics] == ["E007"]
