"""Whiskers compiler: turns parsed sprites into runnable JavaScript.

Public API
----------
The stable surface is the ``generate`` function, the ``SpriteProgram``
input and the ``GeneratedCode`` output.  ``format_arg`` is exported for
callers that need the argument translation on its own.

Example
-------
::

    from whiskers.compiler import SpriteProgram, generate
    from whiskers.parser import parse_source

    program, diagnostics = parse_source(source)
    output = generate([SpriteProgram("Sprite1", program)])
    Path("game.html").write_text(output.html)
"""
from __future__ import annotations

from whiskers.compiler.base import CompilerTarget, GeneratedCode, SpriteProgram
from whiskers.compiler.dispatch import BlockEmitter, format_arg
from whiskers.compiler.expressions import EmitterInvariantError
from whiskers.compiler.html import render_page
from whiskers.compiler.javascript import JavaScriptTarget, find_procedures
from whiskers.compiler.runtime import Method, RuntimeBuilder
from whiskers.compiler.state import GeneratorState

_REGISTRY: dict[str, type[CompilerTarget]] = {
    "javascript": JavaScriptTarget,
}


def generate(
    sprites: list[SpriteProgram],
    target: str = "javascript",
    *,
    indent_width: int = 4,
    title: str = "Whiskers Preview",
) -> GeneratedCode:
    """Generate code for validated *sprites*.

    Parameters
    ----------
    sprites:
        Parsed sprites, in output order.
    target:
        The code-generation target.  Currently only ``"javascript"``.
    indent_width:
        Spaces per indentation level.
    title:
        Title of the generated HTML page.

    Raises
    ------
    ValueError
        If ``target`` is not a registered target.
    EmitterInvariantError
        If a sprite contains a tree validation should have rejected.
    """
    if target not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY))
        raise ValueError(
            f"Unknown compiler target {target!r}. Available targets: {available}"
        )
    compiler = _REGISTRY[target](indent_width=indent_width, title=title)
    return compiler.generate(sprites)


def available_targets() -> list[str]:
    """Return the list of registered target names."""
    return sorted(_REGISTRY)


__all__ = [
    "BlockEmitter",
    "CompilerTarget",
    "EmitterInvariantError",
    "GeneratedCode",
    "GeneratorState",
    "JavaScriptTarget",
    "Method",
    "RuntimeBuilder",
    "SpriteProgram",
    "available_targets",
    "find_procedures",
    "format_arg",
    "generate",
    "render_page",
]
