"""Unit tests for whiskers.ast.serializer — JSON/YAML dumps of parsed programs."""
from __future__ import annotations

import json

import pytest
import yaml

from whiskers.ast.serializer import AstSerializer
from whiskers.parser.parser import parse_source

_SOURCE = """\
var score = 0
list fruits = []

define jump (height)
    change y by height

when flag clicked
    if score > 10 then
        say "win"
    else
        jump 5
    add "apple" to fruits
"""


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def serializer() -> AstSerializer:
    return AstSerializer()


@pytest.fixture()
def program():
    program, diagnostics = parse_source(_SOURCE)
    assert diagnostics == []
    return program


# ---------------------------------------------------------------------------
# to_dict
# ---------------------------------------------------------------------------


class TestToDict:
    def test_declarations(self, serializer: AstSerializer, program) -> None:
        data = serializer.to_dict(program)
        assert data["kind"] == "Program"
        assert data["variables"] == {"score": 0}
        assert data["lists"] == {"fruits": []}
        assert data["procedures"] == {"jump": ["height"]}

    def test_body_is_flattened_to_list(self, serializer: AstSerializer, program) -> None:
        hat = serializer.to_dict(program)["scripts"][1]["blocks"][0]
        assert hat["name"] == "whenFlagClicked"
        assert [b["name"] for b in hat["body"]] == ["ifElse", "addToList"]

    def test_else_branch_and_nested_condition(self, serializer: AstSerializer, program) -> None:
        branch = serializer.to_dict(program)["scripts"][1]["blocks"][0]["body"][0]
        assert branch["else_body"][0]["name"] == "call"
        condition = branch["args"][0]
        assert condition["kind"] == "Block"
        assert condition["name"] == "greater"
        assert condition["args"] == ["$score", 10]

    def test_span_recorded(self, serializer: AstSerializer, program) -> None:
        define = serializer.to_dict(program)["scripts"][0]["blocks"][0]
        assert define["span"]["line"] == 4
        assert define["span"]["col"] == 1


# ---------------------------------------------------------------------------
# Text formats
# ---------------------------------------------------------------------------


class TestTextFormats:
    def test_json_is_valid(self, serializer: AstSerializer, program) -> None:
        data = json.loads(serializer.to_json(program))
        assert data["kind"] == "Program"

    def test_yaml_is_valid(self, serializer: AstSerializer, program) -> None:
        data = yaml.safe_load(serializer.to_yaml(program))
        assert data["procedures"] == {"jump": ["height"]}

    def test_json_round_trip_keeps_structure(self, serializer: AstSerializer, program) -> None:
        restored = serializer.from_json(serializer.to_json(program))
        assert serializer.to_dict(restored) == serializer.to_dict(program)
        hat = restored.scripts[1].blocks[0]
        assert hat.body.next.name == "addToList"
        assert hat.body.else_body.args == ["jump", 5]
