"""AST serialization and deserialization for Whiskers.

Provides round-trip serialization of ``Program`` trees to and from JSON
and YAML.  ``next`` chains are flattened into lists, so a script body
reads top to bottom the way it is written::

    {"kind": "Block", "category": "control", "name": "repeat",
     "args": [3], "body": [{"kind": "Block", "name": "move", ...}]}

Usage
-----
::

    from whiskers.ast.serializer import AstSerializer

    serializer = AstSerializer()
    text = serializer.to_json(program)
    program2 = serializer.from_json(text)
"""
from __future__ import annotations

import json

import yaml

from whiskers.ast.nodes import (
    ArgValue,
    Block,
    BlockCategory,
    Program,
    Script,
    Span,
    iter_chain,
)


class AstSerializer:
    """Converts between ``Program`` objects and plain Python dicts.

    Nested reporter blocks inside ``args`` carry a ``"kind": "Block"``
    discriminator so that deserialization can tell them apart from
    literal values.
    """

    # ------------------------------------------------------------------
    # Serialization (AST → dict)
    # ------------------------------------------------------------------

    def to_dict(self, program: Program) -> dict[str, object]:
        """Serialize a ``Program`` to a JSON-compatible dict."""
        return {
            "kind": "Program",
            "variables": dict(program.variables),
            "lists": {name: list(items) for name, items in program.lists.items()},
            "procedures": {name: list(params) for name, params in program.procedures.items()},
            "scripts": [self._script_to_dict(s) for s in program.scripts],
        }

    def _span_to_dict(self, span: Span) -> dict[str, int]:
        return {"start": span.start, "end": span.end, "line": span.line, "col": span.col}

    def _script_to_dict(self, script: Script) -> dict[str, object]:
        return {
            "kind": "Script",
            "blocks": [self.block_to_dict(b) for b in script.blocks],
        }

    def _chain_to_list(self, block: Block | None) -> list[dict[str, object]]:
        return [self.block_to_dict(b, include_next=False) for b in iter_chain(block)]

    def _arg_to_dict(self, arg: ArgValue) -> object:
        if isinstance(arg, Block):
            return self.block_to_dict(arg, include_next=False)
        return arg

    def block_to_dict(self, block: Block, include_next: bool = False) -> dict[str, object]:
        """Serialize one block and its nested bodies.

        With ``include_next`` the block's successors are serialized under
        ``"next"`` as a list; top-level blocks never have successors.
        """
        data: dict[str, object] = {
            "kind": "Block",
            "category": block.category.value,
            "name": block.name,
            "args": [self._arg_to_dict(a) for a in block.args],
            "span": self._span_to_dict(block.span),
        }
        if block.body is not None:
            data["body"] = self._chain_to_list(block.body)
        if block.else_body is not None:
            data["else_body"] = self._chain_to_list(block.else_body)
        if include_next and block.next is not None:
            data["next"] = self._chain_to_list(block.next)
        return data

    # ------------------------------------------------------------------
    # Deserialization (dict → AST)
    # ------------------------------------------------------------------

    def from_dict(self, data: dict[str, object]) -> Program:
        """Deserialize a ``Program`` from a plain dict."""
        return Program(
            scripts=[self._script_from_dict(s) for s in data.get("scripts", [])],
            variables=dict(data.get("variables", {})),
            lists={name: list(items) for name, items in data.get("lists", {}).items()},
            procedures={
                name: list(params) for name, params in data.get("procedures", {}).items()
            },
        )

    def _span_from_dict(self, data: dict[str, int] | None) -> Span:
        if not data:
            return Span.unknown()
        return Span(start=data["start"], end=data["end"], line=data["line"], col=data["col"])

    def _script_from_dict(self, data: dict[str, object]) -> Script:
        return Script(blocks=[self.block_from_dict(b) for b in data.get("blocks", [])])

    def _chain_from_list(self, items: list[dict[str, object]] | None) -> Block | None:
        if not items:
            return None
        blocks = [self.block_from_dict(item) for item in items]
        for current, following in zip(blocks, blocks[1:]):
            current.next = following
        return blocks[0]

    def _arg_from_dict(self, value: object) -> ArgValue:
        if isinstance(value, dict) and value.get("kind") == "Block":
            return self.block_from_dict(value)
        return value  # type: ignore[return-value]

    def block_from_dict(self, data: dict[str, object]) -> Block:
        """Deserialize one block (and its bodies) from a plain dict."""
        block = Block(
            category=BlockCategory(data["category"]),
            name=data["name"],
            args=[self._arg_from_dict(a) for a in data.get("args", [])],
            span=self._span_from_dict(data.get("span")),
            body=self._chain_from_list(data.get("body")),
            else_body=self._chain_from_list(data.get("else_body")),
        )
        block.next = self._chain_from_list(data.get("next"))
        return block

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def to_json(self, program: Program, indent: int = 2) -> str:
        """Serialize a ``Program`` to a JSON string."""
        return json.dumps(self.to_dict(program), indent=indent, ensure_ascii=False)

    def from_json(self, text: str) -> Program:
        """Deserialize a ``Program`` from a JSON string."""
        data: dict[str, object] = json.loads(text)
        return self.from_dict(data)

    # ------------------------------------------------------------------
    # YAML helpers
    # ------------------------------------------------------------------

    def to_yaml(self, program: Program) -> str:
        """Serialize a ``Program`` to a YAML string."""
        return yaml.dump(self.to_dict(program), default_flow_style=False, allow_unicode=True)

    def from_yaml(self, text: str) -> Program:
        """Deserialize a ``Program`` from a YAML string."""
        data: dict[str, object] = yaml.safe_load(text)
        return self.from_dict(data)
