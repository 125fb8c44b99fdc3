#!/usr/bin/env python3
"""Example: Quickstart — whiskers-lang

Minimal working example: parse a sprite, validate it, and compile it
to a page you can open in a browser.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install whiskers-lang
"""
from __future__ import annotations

from pathlib import Path

import whiskers

SOURCE = '''
var score = 0

when flag clicked
    set score to 0
    repeat 10
        move 10 steps
        change score by 1
        wait 0.1 seconds
    say (join "Score: " score) for 2 seconds
'''


def main() -> None:
    print(f"whiskers-lang version: {whiskers.__version__}")

    # Step 1: Parse source into a program
    program, diagnostics = whiskers.parse(SOURCE)
    print(f"Parsed {len(program.scripts)} script(s), "
          f"variables={list(program.variables)}")

    # Step 2: Validate the program
    diagnostics += whiskers.validate(program, SOURCE)
    errors = [d for d in diagnostics if d.is_error]
    print(f"Validation: {len(errors)} errors, {len(diagnostics) - len(errors)} warnings")
    for diag in diagnostics:
        print(f"  {diag}")

    # Step 3: Compile to JavaScript and HTML
    result = whiskers.compile(SOURCE)
    if result.success:
        out = Path("quickstart.html")
        out.write_text(result.html, encoding="utf-8")
        print(f"\nWrote {out} ({len(result.js.splitlines())} lines of JavaScript)")
        print(result.user_code[:300])


if __name__ == "__main__":
    main()
