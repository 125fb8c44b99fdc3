"""Mutable state threaded through one code-generation run."""
from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field


@dataclass
class GeneratorState:
    """Output buffer and bookkeeping for one ``generate`` call.

    Parameters
    ----------
    indent_width:
        Spaces per indentation level in the generated JavaScript.
    lines:
        Generated lines, without trailing newlines.
    indent:
        Current indentation depth.
    procedures:
        Procedure names mapped to parameter names, collected by a
        pre-pass before any script is emitted.
    pen_injected:
        One-shot flag set once pen support has been added to the runtime.
    sprite_name:
        The sprite whose scripts are being emitted.
    variables, lists:
        Names declared anywhere in the project.
    params:
        Parameters of the procedure being emitted, if any.
    loop_depth:
        Nesting depth of counted loops, used to name loop counters.
    """

    indent_width: int = 4
    lines: list[str] = field(default_factory=list)
    indent: int = 0
    procedures: dict[str, list[str]] = field(default_factory=dict)
    pen_injected: bool = False
    sprite_name: str = "Sprite1"
    variables: frozenset[str] = frozenset()
    lists: frozenset[str] = frozenset()
    params: frozenset[str] = frozenset()
    loop_depth: int = 0

    def write(self, text: str = "") -> None:
        """Append one line at the current indentation."""
        if not text:
            self.lines.append("")
            return
        self.lines.append(" " * (self.indent_width * self.indent) + text)

    def comment(self, text: str) -> None:
        self.write(f"// {text}")

    @contextmanager
    def indented(self) -> Iterator[None]:
        """Indent every line written inside the ``with`` block."""
        self.indent += 1
        try:
            yield
        finally:
            self.indent -= 1

    @contextmanager
    def procedure(self, params: list[str]) -> Iterator[None]:
        """Treat *params* as local names while emitting a procedure body."""
        outer = self.params
        self.params = frozenset(params)
        try:
            yield
        finally:
            self.params = outer

    @contextmanager
    def counted_loop(self) -> Iterator[str]:
        """Yield a loop counter name unique among the enclosing loops."""
        name = "i" if self.loop_depth == 0 else f"i{self.loop_depth}"
        self.loop_depth += 1
        try:
            yield name
        finally:
            self.loop_depth -= 1

    @property
    def sprite_ref(self) -> str:
        """JavaScript expression for the current sprite object."""
        return f"scratchRuntime.sprites[{json.dumps(self.sprite_name)}]"

    def output(self) -> str:
        """Return everything written so far as one string."""
        return "\n".join(self.lines) + "\n" if self.lines else ""

    def mark(self) -> int:
        """Return a position usable with ``output_since``."""
        return len(self.lines)

    def output_since(self, mark: int) -> str:
        return "\n".join(self.lines[mark:]) + "\n"
