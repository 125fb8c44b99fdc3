"""JavaScript literal formatting shared by every emitter.

These helpers turn Python values into JavaScript source fragments.  They
hold no state: the same value always yields the same fragment.
"""
from __future__ import annotations

import json
import math
import re
from typing import Final


class EmitterInvariantError(Exception):
    """Raised when the generator meets a tree that validation should have rejected.

    Examples are an empty argument slot or a statement block used as a
    value.  The compiler facade reports it as an internal error.
    """


_IDENTIFIER: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

JS_RESERVED: Final[frozenset[str]] = frozenset({
    "arguments", "await", "break", "case", "catch", "class", "const",
    "continue", "debugger", "default", "delete", "do", "else", "enum", "eval",
    "export", "extends", "false", "finally", "for", "function", "if",
    "implements", "import", "in", "instanceof", "interface", "let", "new",
    "null", "package", "private", "protected", "public", "return", "static",
    "super", "switch", "this", "throw", "true", "try", "typeof", "undefined",
    "var", "void", "while", "with", "yield", "scratchRuntime",
})


def is_identifier(name: str) -> bool:
    return bool(_IDENTIFIER.match(name))


def param_name(name: str) -> str:
    """Return a safe JavaScript identifier for procedure parameter *name*."""
    return f"{name}_" if name in JS_RESERVED else name


def js_string(text: str) -> str:
    """Quote *text* as a JavaScript string that is safe inside ``<script>``."""
    return json.dumps(text, ensure_ascii=False).replace("</", "<\\/")


def js_number(value: int | float) -> str:
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    return repr(value)


def js_literal(value: object) -> str:
    """Format a declaration value or literal argument as JavaScript.

    Raises
    ------
    EmitterInvariantError
        If *value* has no literal form.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return js_number(value)
    if isinstance(value, str):
        return js_string(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(js_literal(item) for item in value) + "]"
    raise EmitterInvariantError(f"Cannot format {type(value).__name__} as a literal")
