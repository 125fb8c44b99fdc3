"""JavaScript target: sprites in, runtime-backed JavaScript and HTML out.

Generation runs in fixed phases over one ``GeneratorState``:

1. runtime support, assembled by ``RuntimeBuilder``;
2. ``// Variables`` initializers, merged across sprites;
3. ``// Lists`` initializers;
4. ``// Custom Procedures`` placeholders for every defined procedure;
5. ``// Scripts``, per sprite an ``initSprite`` call and its scripts.

Phases 2 to 5 form the user code; the runtime is prepended afterwards
because pen support is only known once every sprite has been scanned.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable

from whiskers.ast.nodes import Block, BlockCategory, Program, iter_chain
from whiskers.compiler.base import CompilerTarget, GeneratedCode, SpriteProgram
from whiskers.compiler.dispatch import BlockEmitter
from whiskers.compiler.expressions import js_literal, js_string, param_name
from whiskers.compiler.html import render_page
from whiskers.compiler.runtime import RuntimeBuilder
from whiskers.compiler.state import GeneratorState

logger = logging.getLogger(__name__)


def find_procedures(block: Block | None) -> dict[str, list[str]]:
    """Return the procedures defined along the chain starting at *block*.

    Procedure names map to their parameter names; a later definition of
    the same name replaces an earlier one.
    """
    found: dict[str, list[str]] = {}
    for current in iter_chain(block):
        if current.name == "defineFunction" and current.args:
            found[str(current.args[0])] = [str(p) for p in current.args[1:]]
    return found


def program_procedures(program: Program) -> dict[str, list[str]]:
    """Collect procedure definitions from every script of *program*."""
    found: dict[str, list[str]] = {}
    for block in program.top_level_blocks():
        found.update(find_procedures(block))
    return found


def uses_pen(programs: Iterable[Program]) -> bool:
    """Return True if any block of any program is a pen block."""
    return any(
        block.category is BlockCategory.PEN
        for program in programs
        for block in program.walk()
    )


class JavaScriptTarget(CompilerTarget):
    """Generates a browser program driven by ``window.scratchRuntime``.

    Example
    -------
    ::

        target = JavaScriptTarget()
        output = target.generate([SpriteProgram("Cat", program)])
        print(output.summary())
    """

    @property
    def name(self) -> str:
        return "javascript"

    def generate(self, sprites: list[SpriteProgram]) -> GeneratedCode:
        """Generate the program for *sprites*.

        Raises
        ------
        EmitterInvariantError
            If a tree reaches the generator in a shape validation rejects.
        """
        programs = [sprite.program for sprite in sprites]
        state = GeneratorState(indent_width=self._indent_width)
        for program in programs:
            state.procedures.update(program_procedures(program))
            state.variables = state.variables | frozenset(program.variables)
            state.lists = state.lists | frozenset(program.lists)
        logger.debug(
            "Generating JavaScript for %d sprite(s), %d procedure(s)",
            len(sprites),
            len(state.procedures),
        )

        builder = RuntimeBuilder(indent_width=self._indent_width)
        if uses_pen(programs) and not state.pen_injected:
            builder.enable_pen()
            state.pen_injected = True

        self._emit_variables(state, programs)
        self._emit_lists(state, programs)
        self._emit_procedure_stubs(state)
        script_count = self._emit_scripts(state, sprites)

        user_code = state.output()
        js = builder.build() + "\n" + user_code
        return GeneratedCode(
            js=js,
            html=render_page(js, self._title),
            user_code=user_code,
            metadata={
                "sprites": len(sprites),
                "scripts": script_count,
                "procedures": len(state.procedures),
                "pen": state.pen_injected,
            },
        )

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _emit_variables(self, state: GeneratorState, programs: list[Program]) -> None:
        merged: dict[str, int | float | str | bool] = {}
        for program in programs:
            merged.update(program.variables)
        state.comment("Variables")
        if not merged:
            state.comment("No variables defined")
        for name, value in merged.items():
            state.write(f"scratchRuntime.variables[{js_string(name)}] = {js_literal(value)};")
        state.write()

    def _emit_lists(self, state: GeneratorState, programs: list[Program]) -> None:
        merged: dict[str, list[int | float | str | bool]] = {}
        for program in programs:
            merged.update(program.lists)
        state.comment("Lists")
        if not merged:
            state.comment("No lists defined")
        for name, items in merged.items():
            state.write(f"scratchRuntime.lists[{js_string(name)}] = {js_literal(list(items))};")
        state.write()

    def _emit_procedure_stubs(self, state: GeneratorState) -> None:
        # Definitions in the script phase replace these when they run.
        state.comment("Custom Procedures")
        if not state.procedures:
            state.comment("No procedures defined")
        for name, params in state.procedures.items():
            signature = ", ".join(param_name(p) for p in params)
            state.write(f"scratchRuntime.procedures[{js_string(name)}] = async function({signature}) {{}};")
        state.write()

    def _emit_scripts(self, state: GeneratorState, sprites: list[SpriteProgram]) -> int:
        emitter = BlockEmitter(state)
        count = 0
        state.comment("Scripts")
        for sprite in sprites:
            state.sprite_name = sprite.name
            options = (
                f"{{ costumes: {js_literal(list(sprite.costume_names))}, "
                f"sounds: {js_literal(list(sprite.sound_names))}, "
                f"isStage: {js_literal(sprite.is_stage)} }}"
            )
            state.comment(f"Sprite: {sprite.name}")
            state.write(f"scratchRuntime.initSprite({js_string(sprite.name)}, {options});")
            state.write()
            for script in sprite.program.scripts:
                count += 1
                state.comment(f"Script {count}")
                for block in script.blocks:
                    emitter.emit_chain(block)
            logger.debug("Emitted %d script(s) for sprite %s", len(sprite.program.scripts), sprite.name)
        return count
