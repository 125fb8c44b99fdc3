"""End-to-end tests: source text → whiskers.compile → JavaScript, HTML, diagnostics.

These tests exercise the full pipeline:
  1. Scan for unfilled slots, tokenize and parse each sprite.
  2. Validate with project-wide variables, lists and procedures.
  3. Generate the runtime, the user code and the HTML page.
  4. Report every problem as a diagnostic instead of raising.
"""
from __future__ import annotations

import json

import pytest

import whiskers
from whiskers import CompileOptions, SpriteSource
from whiskers.validator.placeholders import VALUE_SLOT


# ---------------------------------------------------------------------------
# Inline sources (avoid file I/O in fast tests)
# ---------------------------------------------------------------------------

_CAT = """\
var score = 0

when flag clicked
    set score to 0
    broadcast start

when I receive start
    change score by 1
"""

_STAGE = """\
when I receive start
    next backdrop
"""

_STAGE_WITH_MOTION = """\
when flag clicked
    move 10 steps
"""


# ===========================================================================
# Single sprite
# ===========================================================================


class TestCompile:
    def test_success(self, flag_script: str) -> None:
        result = whiskers.compile(flag_script)
        assert result.success
        assert result.diagnostics == []
        assert "window.scratchRuntime = {" in result.js
        assert "for (let i = 0; i < 3; i++) {" in result.user_code
        assert result.html.startswith("<!DOCTYPE html>")

    def test_type_error_blocks_generation(self) -> None:
        result = whiskers.compile('when flag clicked\n    wait "hello" seconds\n')
        assert not result.success
        assert [d.code for d in result.errors] == ["E202"]
        assert "requires a number" in result.errors[0].message
        assert result.js == ""
        assert result.html == ""
        assert result.user_code == ""

    def test_warnings_do_not_block_generation(self) -> None:
        result = whiskers.compile("when flag clicked\n    say score\n")
        assert result.success
        assert [d.code for d in result.warnings] == ["W101"]
        assert result.js

    def test_strict_option_turns_warnings_into_errors(self) -> None:
        result = whiskers.compile(
            "when flag clicked\n    say score\n",
            CompileOptions(strict=True),
        )
        assert not result.success
        assert result.js == ""

    def test_syntax_error_skips_validation(self) -> None:
        result = whiskers.compile("when flag clicked\n    move (10\n")
        assert not result.success
        assert all(d.rule != "undeclared_variables" for d in result.diagnostics)

    def test_placeholder_stops_before_parsing(self) -> None:
        result = whiskers.compile(f"when flag clicked\n    move {VALUE_SLOT} steps\n")
        assert [d.code for d in result.diagnostics] == ["E301"]
        assert (result.diagnostics[0].line, result.diagnostics[0].column) == (2, 10)

    def test_sprite_name_and_title_options(self, flag_script: str) -> None:
        options = CompileOptions(sprite_name="Cat", title="Cat Game")
        result = whiskers.compile(flag_script, options)
        assert 'scratchRuntime.sprites["Cat"].move(10);' in result.js
        assert "<title>Cat Game</title>" in result.html

    def test_indent_width_option(self, flag_script: str) -> None:
        result = whiskers.compile(flag_script, CompileOptions(indent_width=2))
        assert "\n  for (let i = 0; i < 3; i++) {" in result.user_code

    def test_single_sprite_messages_are_not_prefixed(self) -> None:
        result = whiskers.compile("when flag clicked\n    mvoe 10\n")
        assert result.diagnostics[0].message.startswith("Unknown block")


# ===========================================================================
# Multiple sprites
# ===========================================================================


class TestCompileMultiSprite:
    def test_broadcast_between_sprites(self) -> None:
        result = whiskers.compile_multi_sprite([
            SpriteSource("Cat", _CAT),
            SpriteSource("Stage", _STAGE, is_stage=True),
        ])
        assert result.success, [str(d) for d in result.diagnostics]
        assert 'scratchRuntime.broadcast("start");' in result.js
        assert result.js.count('scratchRuntime.onBroadcast("start", async function() {') == 2
        assert 'scratchRuntime.initSprite("Stage", { costumes: [], sounds: [], isStage: true });' in result.js

    def test_variables_are_shared(self) -> None:
        result = whiskers.compile_multi_sprite([
            SpriteSource("Cat", "var score = 0\n"),
            SpriteSource("Dog", "when flag clicked\n    say score\n"),
        ])
        assert result.diagnostics == []

    def test_stage_motion_is_rejected_with_prefix(self) -> None:
        result = whiskers.compile_multi_sprite([
            SpriteSource("Cat", "when flag clicked\n    hide\n"),
            SpriteSource("Stage", _STAGE_WITH_MOTION, is_stage=True),
        ])
        assert not result.success
        error = result.errors[0]
        assert error.code == "E303"
        assert error.message.startswith("[Stage] ")
        assert "motion blocks are not allowed on the Stage" in error.message
        assert result.js == ""

    def test_diagnostics_keep_sprite_order(self) -> None:
        result = whiskers.compile_multi_sprite([
            SpriteSource("B", "when flag clicked\n\n\n    mvoe 1\n"),
            SpriteSource("A", "when flag clicked\n    mvoe 1\n"),
        ])
        assert [d.message[:3] for d in result.diagnostics] == ["[B]", "[A]"]

    def test_asset_names_are_checked(self) -> None:
        result = whiskers.compile_multi_sprite([
            SpriteSource(
                "Cat",
                'when flag clicked\n    switch costume to "dance"\n',
                costume_names=("walk", "jump"),
            ),
        ])
        assert result.success
        assert [d.code for d in result.warnings] == ["W401"]


# ===========================================================================
# Wire format and internal errors
# ===========================================================================


class TestResult:
    def test_to_dict(self, flag_script: str) -> None:
        data = whiskers.compile(flag_script).to_dict()
        assert set(data) == {"js", "html", "userCode", "diagnostics", "success"}
        assert data["success"] is True

    def test_to_json_carries_diagnostics(self) -> None:
        data = json.loads(whiskers.compile("when flag clicked\n    repeat 2\n").to_json())
        assert data["diagnostics"][0]["code"] == "W107"
        assert data["diagnostics"][0]["severity"] == "warning"

    def test_internal_failure_becomes_diagnostic(
        self, flag_script: str, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def explode(*args, **kwargs):
            raise RuntimeError("generator exploded")

        monkeypatch.setattr("whiskers.facade.generate", explode)
        result = whiskers.compile(flag_script)
        assert not result.success
        assert result.js == ""
        d = result.diagnostics[-1]
        assert d.code == "E999"
        assert d.message == "Internal compiler error: generator exploded"
        assert d.rule == "compiler"
