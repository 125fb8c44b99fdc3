"""whiskers-lang: compile Scratch-like block scripts to JavaScript and HTML.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import whiskers

    result = whiskers.compile('''
    when flagClicked
        repeat 3
            move 10
    ''')

    if result.success:
        Path("game.html").write_text(result.html)
    for diagnostic in result.diagnostics:
        print(diagnostic)

    # Several sprites sharing variables, lists and broadcasts
    result = whiskers.compile_multi_sprite([
        whiskers.SpriteSource("Cat", cat_source),
        whiskers.SpriteSource("Stage", stage_source, is_stage=True),
    ])

    whiskers.__version__
    '0.1.0'
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from whiskers.facade import CompileResult, SpriteSource
from whiskers.options import CompileOptions

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from collections.abc import Sequence

    from whiskers.ast.nodes import Program
    from whiskers.diagnostics import Diagnostic


def parse(source: str) -> tuple["Program", list["Diagnostic"]]:
    """Tokenize and parse *source*.

    Parameters
    ----------
    source:
        One sprite's source text.

    Returns
    -------
    tuple[Program, list[Diagnostic]]
        The program and every lexical or structural diagnostic.  The
        program is always returned, even when diagnostics contain errors.
    """
    from whiskers.parser.parser import parse_source

    return parse_source(source)


def validate(
    program: "Program", source: str = "", strict: bool = False
) -> list["Diagnostic"]:
    """Validate a parsed program against all built-in rules.

    Parameters
    ----------
    program:
        The parsed sprite.
    source:
        The text it was parsed from, used by the source-level checks.
    strict:
        When ``True``, warnings are promoted to errors.

    Returns
    -------
    list[Diagnostic]
        All validation findings, sorted by source location.
    """
    from whiskers.validator.validator import validate as _validate

    return _validate(program, source, strict=strict)


def compile(  # noqa: A001
    source: str, options: CompileOptions | None = None
) -> CompileResult:
    """Compile one sprite to JavaScript and HTML; never raises."""
    from whiskers.facade import compile as _compile

    return _compile(source, options=options)


def compile_multi_sprite(
    sprites: "Sequence[SpriteSource]", options: CompileOptions | None = None
) -> CompileResult:
    """Compile several sprites into one program; never raises."""
    from whiskers.facade import compile_multi_sprite as _compile_multi_sprite

    return _compile_multi_sprite(sprites, options=options)


__all__ = [
    "__version__",
    "CompileOptions",
    "CompileResult",
    "SpriteSource",
    "parse",
    "validate",
    "compile",
    "compile_multi_sprite",
]
