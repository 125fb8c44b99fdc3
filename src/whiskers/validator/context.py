"""Validation context shared by every rule."""
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from functools import cached_property

from whiskers.ast.nodes import Block, Program, walk


@dataclass
class ValidationContext:
    """Everything a rule may look at for one sprite.

    Parameters
    ----------
    program:
        The parsed sprite.
    source:
        The sprite's source text, for rules that inspect raw lines.
    procedures:
        Procedure names mapped to parameter names, from ``define``
        blocks.
    sprite_name:
        Name used when diagnostics are prefixed in multi-sprite builds.
    is_stage:
        True when the sprite is the Stage.
    costume_names, sound_names:
        Declared asset names; empty means "not declared" and disables
        the corresponding asset check.
    known_variables, known_lists:
        Names declared by other sprites of the same project.
    """

    program: Program
    source: str = ""
    procedures: dict[str, list[str]] = field(default_factory=dict)
    sprite_name: str = "Sprite1"
    is_stage: bool = False
    costume_names: tuple[str, ...] = ()
    sound_names: tuple[str, ...] = ()
    known_variables: frozenset[str] = frozenset()
    known_lists: frozenset[str] = frozenset()

    @cached_property
    def lines(self) -> list[str]:
        """Source lines (1-based access via ``line(n)``)."""
        return self.source.split("\n")

    def line(self, number: int) -> str:
        """Return source line *number* (1-based), or ``""`` if out of range."""
        if 1 <= number <= len(self.lines):
            return self.lines[number - 1]
        return ""

    @property
    def variable_names(self) -> frozenset[str]:
        return frozenset(self.program.variables) | self.known_variables

    @property
    def list_names(self) -> frozenset[str]:
        return frozenset(self.program.lists) | self.known_lists

    def blocks(self) -> Iterator[Block]:
        """Yield every block of the program, statements and reporters."""
        return self.program.walk()

    def blocks_with_params(self) -> Iterator[tuple[Block, frozenset[str]]]:
        """Yield every block with the parameters visible where it appears."""
        for top in self.program.top_level_blocks():
            params: frozenset[str] = frozenset()
            if top.name == "defineFunction":
                params = frozenset(str(a) for a in top.args[1:])
            for block in walk(top):
                yield block, params
