"""Unit tests for whiskers.options — CompileOptions and YAML loading."""
from __future__ import annotations

from pathlib import Path

import pytest

from whiskers.options import CompileOptions, OptionsError, load_options
from whiskers.parser.parser import MAX_EXPRESSION_DEPTH, MAX_NESTING_DEPTH


class TestCompileOptions:
    def test_defaults(self) -> None:
        options = CompileOptions()
        assert options.sprite_name == "Sprite1"
        assert options.title == "Whiskers Preview"
        assert options.strict is False
        assert options.indent_width == 4
        assert options.max_expression_depth == MAX_EXPRESSION_DEPTH
        assert options.max_nesting_depth == MAX_NESTING_DEPTH

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_sprite_name_rejected(self, name: str) -> None:
        with pytest.raises(OptionsError, match="sprite_name"):
            CompileOptions(sprite_name=name)

    @pytest.mark.parametrize("value", [0, -2, True, "4"])
    def test_indent_width_must_be_positive_int(self, value: object) -> None:
        with pytest.raises(OptionsError, match="indent_width"):
            CompileOptions(indent_width=value)  # type: ignore[arg-type]

    def test_merged_skips_none(self) -> None:
        options = CompileOptions(title="Game").merged(title=None, strict=True)
        assert options.title == "Game"
        assert options.strict is True

    def test_merged_validates(self) -> None:
        with pytest.raises(OptionsError):
            CompileOptions().merged(max_nesting_depth=0)

    def test_to_dict_round_trip(self) -> None:
        options = CompileOptions(sprite_name="Cat", indent_width=2)
        assert CompileOptions.from_dict(options.to_dict()) == options

    def test_from_dict_rejects_unknown_keys(self) -> None:
        with pytest.raises(OptionsError, match="Unknown option\\(s\\): colour"):
            CompileOptions.from_dict({"colour": "red"})


class TestLoadOptions:
    def test_reads_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "whiskers.yaml"
        path.write_text("sprite_name: Cat\nstrict: true\nindent_width: 2\n", encoding="utf-8")
        options = load_options(path)
        assert options == CompileOptions(sprite_name="Cat", strict=True, indent_width=2)

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "whiskers.yaml"
        path.write_text("", encoding="utf-8")
        assert load_options(path) == CompileOptions()

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "whiskers.yaml"
        path.write_text("title: [unclosed\n", encoding="utf-8")
        with pytest.raises(OptionsError, match="Invalid YAML"):
            load_options(path)

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "whiskers.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(OptionsError, match="must contain a mapping"):
            load_options(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(OptionsError, match="Cannot read options file"):
            load_options(tmp_path / "missing.yaml")
