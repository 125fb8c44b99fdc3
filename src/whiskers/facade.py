"""Compiler facade: source text in, JavaScript, HTML and diagnostics out.

``compile`` handles one sprite; ``compile_multi_sprite`` handles a whole
project, where variables, lists and procedures declared by any sprite
are known to every other sprite.  Neither function raises: every
problem, including an unexpected internal failure, is reported as a
``Diagnostic`` on the returned ``CompileResult``.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from whiskers.ast.nodes import Program, Span
from whiskers.compiler import SpriteProgram, generate
from whiskers.diagnostics import Diagnostic, ErrorCode, error, has_errors
from whiskers.options import CompileOptions
from whiskers.parser.parser import parse_source
from whiskers.validator.placeholders import scan_placeholders
from whiskers.validator.validator import validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpriteSource:
    """One sprite of a project, as written by the user.

    Parameters
    ----------
    name:
        Sprite name, used in generated code and diagnostic prefixes.
    code:
        The sprite's source text.
    is_stage:
        Whether this sprite is the Stage (no motion blocks allowed).
    costume_names, sound_names:
        Declared asset names; empty means "not checked".
    """

    name: str
    code: str
    is_stage: bool = False
    costume_names: tuple[str, ...] = ()
    sound_names: tuple[str, ...] = ()


@dataclass
class CompileResult:
    """Outcome of a compile.

    ``js``, ``html`` and ``user_code`` are empty whenever any error
    diagnostic was reported.
    """

    js: str = ""
    html: str = ""
    user_code: str = ""
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not has_errors(self.diagnostics)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if not d.is_error]

    def to_dict(self) -> dict[str, object]:
        """Return the JSON-compatible wire representation."""
        return {
            "js": self.js,
            "html": self.html,
            "userCode": self.user_code,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "success": self.success,
        }

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def compile(  # noqa: A001
    source: str,
    *,
    options: CompileOptions | None = None,
) -> CompileResult:
    """Compile a single sprite's source text.

    Parameters
    ----------
    source:
        The sprite's source text.
    options:
        Compilation options; the sprite is named ``options.sprite_name``.

    Returns
    -------
    CompileResult
        Generated code (on success) and every diagnostic, sorted by
        position.
    """
    options = options or CompileOptions()
    sprite = SpriteSource(name=options.sprite_name, code=source)
    return _compile_guarded([sprite], options, prefixed=False)


def compile_multi_sprite(
    sprites: Sequence[SpriteSource],
    *,
    options: CompileOptions | None = None,
) -> CompileResult:
    """Compile several sprites into one program.

    Sprites are compiled in order and their diagnostics are kept in that
    order, each message prefixed with ``[SpriteName]``.  Code is generated
    only if no sprite reported an error.
    """
    return _compile_guarded(list(sprites), options or CompileOptions(), prefixed=True)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def _compile_guarded(
    sprites: list[SpriteSource],
    options: CompileOptions,
    *,
    prefixed: bool,
) -> CompileResult:
    diagnostics: list[Diagnostic] = []
    try:
        return _compile(sprites, options, prefixed=prefixed, diagnostics=diagnostics)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Internal compiler error")
        diagnostics.append(
            error(
                ErrorCode.INTERNAL_ERROR,
                f"Internal compiler error: {exc}",
                Span(0, 0, 1, 1),
                "This is a bug in the compiler. Please report it together with the source code.",
                rule="compiler",
            )
        )
        return CompileResult(diagnostics=diagnostics)


def _compile(
    sprites: list[SpriteSource],
    options: CompileOptions,
    *,
    prefixed: bool,
    diagnostics: list[Diagnostic],
) -> CompileResult:
    logger.debug("Compiling %d sprite(s)", len(sprites))
    per_sprite: list[list[Diagnostic]] = [[] for _ in sprites]
    programs: list[Program | None] = []

    for sprite, found in zip(sprites, per_sprite):
        placeholders = scan_placeholders(sprite.code)
        if placeholders:
            logger.debug("Sprite %s has %d unfilled slot(s)", sprite.name, len(placeholders))
            found.extend(placeholders)
            programs.append(None)
            continue
        program, parse_diagnostics = parse_source(
            sprite.code,
            max_expression_depth=options.max_expression_depth,
            max_nesting_depth=options.max_nesting_depth,
        )
        found.extend(parse_diagnostics)
        programs.append(program)

    parsed = [p for p in programs if p is not None]
    known_variables = frozenset(name for p in parsed for name in p.variables)
    known_lists = frozenset(name for p in parsed for name in p.lists)
    all_procedures: dict[str, list[str]] = {}
    for program in parsed:
        all_procedures.update(program.procedures)

    for sprite, program, found in zip(sprites, programs, per_sprite):
        if program is None or has_errors(found):
            continue
        found.extend(
            validate(
                program,
                sprite.code,
                {**all_procedures, **program.procedures},
                sprite_name=sprite.name,
                is_stage=sprite.is_stage,
                costume_names=sprite.costume_names,
                sound_names=sprite.sound_names,
                known_variables=known_variables,
                known_lists=known_lists,
                strict=options.strict,
            )
        )

    for sprite, found in zip(sprites, per_sprite):
        found.sort(key=lambda d: (d.span.line, d.span.col))
        diagnostics.extend(d.with_prefix(sprite.name) if prefixed else d for d in found)

    if has_errors(diagnostics):
        logger.debug("Skipping code generation: %d error(s)", sum(d.is_error for d in diagnostics))
        return CompileResult(diagnostics=list(diagnostics))

    output = generate(
        [
            SpriteProgram(
                name=sprite.name,
                program=program,
                is_stage=sprite.is_stage,
                costume_names=tuple(sprite.costume_names),
                sound_names=tuple(sprite.sound_names),
            )
            for sprite, program in zip(sprites, programs)
            if program is not None
        ],
        indent_width=options.indent_width,
        title=options.title,
    )
    logger.debug("%s", output.summary())
    return CompileResult(
        js=output.js,
        html=output.html,
        user_code=output.user_code,
        diagnostics=list(diagnostics),
    )
