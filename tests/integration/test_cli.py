"""Integration tests for the ``whiskers`` command-line interface."""
from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from whiskers.cli.main import cli


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def game_file(tmp_path: Path, flag_script: str) -> Path:
    path = tmp_path / "game.wsk"
    path.write_text(flag_script, encoding="utf-8")
    return path


def write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


# ===========================================================================
# version / tokenize / parse
# ===========================================================================


class TestInfoCommands:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert "whiskers-lang" in result.output
        assert "javascript" in result.output

    def test_tokenize(self, runner: CliRunner, game_file: Path) -> None:
        result = runner.invoke(cli, ["tokenize", str(game_file)])
        assert result.exit_code == 0
        assert "KEYWORD" in result.output
        assert "INDENT" in result.output

    def test_tokenize_reports_lexical_errors(self, runner: CliRunner, tmp_path: Path) -> None:
        path = write(tmp_path / "bad.wsk", "when flag clicked\n    say {hi}\n")
        result = runner.invoke(cli, ["tokenize", str(path)])
        assert result.exit_code == 1
        assert "E003" in result.output

    def test_parse_to_yaml_file(self, runner: CliRunner, game_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "ast.yaml"
        result = runner.invoke(cli, ["parse", str(game_file), "--format", "yaml", "-o", str(out)])
        assert result.exit_code == 0
        data = yaml.safe_load(out.read_text(encoding="utf-8"))
        assert data["scripts"][0]["blocks"][0]["name"] == "whenFlagClicked"

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["parse", str(tmp_path / "nope.wsk")])
        assert result.exit_code == 1


# ===========================================================================
# validate
# ===========================================================================


class TestValidateCommand:
    def test_clean_file(self, runner: CliRunner, game_file: Path) -> None:
        result = runner.invoke(cli, ["validate", str(game_file)])
        assert result.exit_code == 0
        assert "OK" in result.output

    def test_errors_exit_nonzero(self, runner: CliRunner, tmp_path: Path) -> None:
        path = write(tmp_path / "bad.wsk", 'when flag clicked\n    wait "hello" seconds\n')
        result = runner.invoke(cli, ["validate", str(path)])
        assert result.exit_code == 1
        assert "E202" in result.output

    def test_warnings_alone_pass(self, runner: CliRunner, tmp_path: Path) -> None:
        path = write(tmp_path / "warn.wsk", "when flag clicked\n    repeat 3\n")
        result = runner.invoke(cli, ["validate", str(path)])
        assert result.exit_code == 0
        assert "W107" in result.output

    def test_strict_fails_on_warnings(self, runner: CliRunner, tmp_path: Path) -> None:
        path = write(tmp_path / "warn.wsk", "when flag clicked\n    repeat 3\n")
        result = runner.invoke(cli, ["validate", "--strict", str(path)])
        assert result.exit_code == 1

    def test_stage_rejects_motion(self, runner: CliRunner, game_file: Path) -> None:
        result = runner.invoke(cli, ["validate", "--stage", str(game_file)])
        assert result.exit_code == 1
        assert "E303" in result.output


# ===========================================================================
# compile
# ===========================================================================


class TestCompileCommand:
    def test_writes_js_and_html(self, runner: CliRunner, game_file: Path, tmp_path: Path) -> None:
        out_dir = tmp_path / "out"
        result = runner.invoke(cli, ["compile", str(game_file), "-o", str(out_dir)])
        assert result.exit_code == 0
        js = (out_dir / "game.js").read_text(encoding="utf-8")
        html = (out_dir / "game.html").read_text(encoding="utf-8")
        assert js.startswith("// Generated by Whiskers")
        assert "scratchRuntime.init();" in html

    def test_js_only(self, runner: CliRunner, game_file: Path, tmp_path: Path) -> None:
        out_dir = tmp_path / "out"
        result = runner.invoke(cli, ["compile", str(game_file), "-o", str(out_dir), "--js-only"])
        assert result.exit_code == 0
        assert (out_dir / "game.js").exists()
        assert not (out_dir / "game.html").exists()

    def test_config_file_and_overrides(self, runner: CliRunner, game_file: Path, tmp_path: Path) -> None:
        config = write(tmp_path / "whiskers.yaml", "sprite_name: Cat\ntitle: From Config\n")
        out_dir = tmp_path / "out"
        result = runner.invoke(cli, [
            "compile", str(game_file), "-o", str(out_dir),
            "--config", str(config), "--title", "From Flag",
        ])
        assert result.exit_code == 0
        assert 'scratchRuntime.sprites["Cat"]' in (out_dir / "game.js").read_text(encoding="utf-8")
        assert "<title>From Flag</title>" in (out_dir / "game.html").read_text(encoding="utf-8")

    def test_bad_config(self, runner: CliRunner, game_file: Path, tmp_path: Path) -> None:
        config = write(tmp_path / "whiskers.yaml", "colour: red\n")
        result = runner.invoke(cli, ["compile", str(game_file), "--config", str(config)])
        assert result.exit_code == 1

    def test_failed_compile_writes_nothing(self, runner: CliRunner, tmp_path: Path) -> None:
        path = write(tmp_path / "bad.wsk", "when flag clicked\n    mvoe 10\n")
        out_dir = tmp_path / "out"
        result = runner.invoke(cli, ["compile", str(path), "-o", str(out_dir)])
        assert result.exit_code == 1
        assert "E108" in result.output
        assert not (out_dir / "bad.js").exists()


# ===========================================================================
# build
# ===========================================================================


class TestBuildCommand:
    def test_builds_project(self, runner: CliRunner, tmp_path: Path) -> None:
        write(tmp_path / "cat.wsk", "when flag clicked\n    broadcast start\n")
        write(tmp_path / "stage.wsk", "when I receive start\n    next backdrop\n")
        manifest = write(tmp_path / "chase.yaml", yaml.safe_dump({
            "title": "Chase",
            "sprites": [
                {"name": "Stage", "file": "stage.wsk", "stage": True, "costumes": ["backdrop1"]},
                {"name": "Cat", "file": "cat.wsk", "sounds": ["meow"]},
            ],
        }))
        out_dir = tmp_path / "out"
        result = runner.invoke(cli, ["build", str(manifest), "-o", str(out_dir)])
        assert result.exit_code == 0, result.output
        assert "Built" in result.output
        js = (out_dir / "chase.js").read_text(encoding="utf-8")
        assert 'scratchRuntime.initSprite("Cat", { costumes: [], sounds: ["meow"], isStage: false });' in js
        assert "<title>Chase</title>" in (out_dir / "chase.html").read_text(encoding="utf-8")

    def test_manifest_without_sprites(self, runner: CliRunner, tmp_path: Path) -> None:
        manifest = write(tmp_path / "empty.yaml", "title: Nothing\n")
        result = runner.invoke(cli, ["build", str(manifest)])
        assert result.exit_code == 1

    def test_sprite_entry_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        manifest = write(tmp_path / "p.yaml", "sprites:\n  - name: Cat\n")
        result = runner.invoke(cli, ["build", str(manifest)])
        assert result.exit_code == 1
