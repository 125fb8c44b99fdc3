"""Compilation options and their YAML representation.

A project can keep its options next to its sources::

    # whiskers.yaml
    sprite_name: Cat
    title: My Game
    strict: true
    indent_width: 2

``load_options`` reads such a file; unknown keys are rejected so typos do
not silently fall back to defaults.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from whiskers.parser.parser import MAX_EXPRESSION_DEPTH, MAX_NESTING_DEPTH


class OptionsError(Exception):
    """Raised when an options file cannot be read or holds invalid values."""


@dataclass(frozen=True)
class CompileOptions:
    """Settings for one ``compile`` or ``compile_multi_sprite`` call.

    Parameters
    ----------
    sprite_name:
        Name of the sprite for single-source compiles.
    title:
        Title of the generated HTML page.
    strict:
        Report validation warnings as errors.
    indent_width:
        Spaces per indentation level in generated JavaScript.
    max_expression_depth:
        Deepest allowed nesting of parenthesized expressions.
    max_nesting_depth:
        Deepest allowed nesting of statement bodies.
    """

    sprite_name: str = "Sprite1"
    title: str = "Whiskers Preview"
    strict: bool = False
    indent_width: int = 4
    max_expression_depth: int = MAX_EXPRESSION_DEPTH
    max_nesting_depth: int = MAX_NESTING_DEPTH

    def __post_init__(self) -> None:
        if not isinstance(self.sprite_name, str) or not self.sprite_name.strip():
            raise OptionsError("sprite_name must not be empty")
        for name in ("indent_width", "max_expression_depth", "max_nesting_depth"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise OptionsError(f"{name} must be a positive integer, got {value!r}")

    def merged(self, **overrides: Any) -> "CompileOptions":
        """Return a copy with every non-``None`` override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CompileOptions":
        """Build options from a mapping, rejecting unknown keys.

        Raises
        ------
        OptionsError
            If *data* has unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise OptionsError(
                f"Unknown option(s): {', '.join(unknown)}. "
                f"Valid options: {', '.join(sorted(known))}"
            )
        try:
            return cls(**data)
        except TypeError as exc:
            raise OptionsError(str(exc)) from exc


def load_options(path: str | Path) -> CompileOptions:
    """Read ``CompileOptions`` from a YAML file.

    An empty file gives the defaults.

    Raises
    ------
    OptionsError
        If the file cannot be read, is not valid YAML, or is not a mapping
        of known options.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise OptionsError(f"Cannot read options file {path}: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise OptionsError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return CompileOptions()
    if not isinstance(data, dict):
        raise OptionsError(f"Options file {path} must contain a mapping")
    return CompileOptions.from_dict(data)
