"""Abstract base class for Whiskers code-generation targets.

A target turns one or more parsed sprites into a ``GeneratedCode``
holding the complete script, an HTML page that runs it, and the user
portion of the script on its own.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from whiskers.ast.nodes import Program


@dataclass(frozen=True)
class SpriteProgram:
    """One parsed sprite handed to a target.

    Parameters
    ----------
    name:
        Sprite name; the Stage is a sprite with ``is_stage`` set.
    program:
        The sprite's parsed program.
    is_stage:
        Whether this sprite is the Stage.
    costume_names, sound_names:
        Asset names declared for the sprite, in order.
    """

    name: str
    program: Program
    is_stage: bool = False
    costume_names: tuple[str, ...] = ()
    sound_names: tuple[str, ...] = ()


@dataclass
class GeneratedCode:
    """Result of running a target.

    Parameters
    ----------
    js:
        The complete JavaScript program, runtime included.
    html:
        A self-contained page that runs ``js``.
    user_code:
        Only the code generated from the sprites' scripts.
    metadata:
        Counts reported by the target (sprites, scripts, procedures).
    """

    js: str
    html: str
    user_code: str = ""
    metadata: dict[str, object] = field(default_factory=dict)

    def summary(self) -> str:
        """Return a one-line human-readable summary of this output."""
        sprites = self.metadata.get("sprites", 0)
        scripts = self.metadata.get("scripts", 0)
        return (
            f"Generated {scripts} script(s) for {sprites} sprite(s), "
            f"{len(self.js.splitlines())} line(s) of JavaScript"
        )


class CompilerTarget(ABC):
    """Abstract base class for code-generation targets.

    The contract for :meth:`generate`:

    * **Deterministic**: identical inputs always produce identical output.
    * **Pure**: no file I/O, no network calls.
    * Inputs are assumed to have passed validation; a tree the target
      cannot express raises ``EmitterInvariantError``.

    Parameters
    ----------
    indent_width:
        Spaces per indentation level in generated code.
    title:
        Title of the generated HTML page.
    """

    def __init__(self, indent_width: int = 4, title: str = "Whiskers Preview") -> None:
        self._indent_width = indent_width
        self._title = title

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique short name for this target, e.g. ``"javascript"``."""

    @abstractmethod
    def generate(self, sprites: list[SpriteProgram]) -> GeneratedCode:
        """Generate code for *sprites*, in the given order."""
