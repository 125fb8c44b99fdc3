#!/usr/bin/env python3
"""Example: Multi-Sprite Projects

Demonstrates compiling a Stage and two sprites that share a variable,
call a procedure defined in another sprite and talk through broadcasts.
Diagnostics from each sprite are prefixed with the sprite's name.

Usage:
    python examples/02_multi_sprite.py

Requirements:
    pip install whiskers-lang
"""
from __future__ import annotations

import whiskers
from whiskers import CompileOptions, SpriteSource

SPRITES = [
    SpriteSource("Stage", '''
var lives = 3

when flag clicked
    switch backdrop to "day"
    broadcast begin

when I receive caught
    change lives by -1
    if lives < 1 then
        broadcast lost
''', is_stage=True, costume_names=("day", "night")),
    SpriteSource("Cat", '''
define hop (height)
    change y by height
    wait 0.2 seconds
    change y by 0 - height

when I receive begin
    forever
        hop 20
        if touching Dog then
            broadcast caught
''', sound_names=("meow",)),
    SpriteSource("Dog", '''
when I receive begin
    forever
        point towards Cat
        move 3 steps
        if on edge, bounce
''', costume_names=("dog-a", "dog-b")),
]


def main() -> None:
    result = whiskers.compile_multi_sprite(SPRITES, CompileOptions(title="Chase"))
    print(f"Success: {result.success}")
    for diag in result.diagnostics:
        print(f"  {diag}")
    if result.success:
        print(result.to_json(indent=2)[:400])

    # The Stage has no position: motion blocks are rejected there.
    broken = [SpriteSource("Stage", "when flag clicked\n    move 10 steps\n", is_stage=True)]
    for diag in whiskers.compile_multi_sprite(broken).errors:
        print(f"  {diag}")


if __name__ == "__main__":
    main()
