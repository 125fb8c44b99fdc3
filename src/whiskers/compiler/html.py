"""Self-contained HTML page wrapping the generated JavaScript."""
from __future__ import annotations

import html
from typing import Final

DEFAULT_TITLE: Final[str] = "Whiskers Preview"

_STYLE: Final[str] = """\
        body { margin: 0; padding: 16px; font-family: sans-serif; background: #f4f4f8; }
        #controls { display: flex; gap: 8px; margin-bottom: 8px; }
        #controls button { font-size: 16px; padding: 4px 12px; cursor: pointer; }
        #stage { position: relative; width: 480px; height: 360px; overflow: hidden;
                 background: #ffffff; border: 1px solid #c8c8d0; border-radius: 6px; }
        #pen { position: absolute; left: 0; top: 0; }
        .sprite { position: absolute; width: 48px; height: 48px; border-radius: 50%;
                  background: #ffab19; color: #ffffff; font-size: 10px; cursor: pointer;
                  display: flex; align-items: center; justify-content: center; user-select: none; }
        .bubble { position: absolute; padding: 4px 8px; border: 1px solid #c8c8d0;
                  border-radius: 12px; background: #ffffff; font-size: 13px; z-index: 1000; }
        .bubble.thought { border-style: dashed; color: #575e75; }
        .variable { position: absolute; left: 6px; padding: 2px 6px; border-radius: 4px;
                    background: #ff8c1a; color: #ffffff; font-size: 12px; z-index: 1000; }
        #console { width: 480px; height: 140px; margin-top: 8px; padding: 6px; overflow-y: auto;
                   box-sizing: border-box; background: #1e1e2e; color: #d0d0e0;
                   font-family: monospace; font-size: 12px; border-radius: 6px; }
        #console input.ask { width: 100%; box-sizing: border-box; }
"""


def _inline_script(js: str) -> str:
    # A literal closing tag would end the inline <script> element early.
    return js.replace("</script", "<\\/script")


def render_page(js: str, title: str = DEFAULT_TITLE) -> str:
    """Return a complete HTML document running *js*.

    The page holds the stage, a console, green-flag and stop buttons, and
    the script inline; it loads nothing over the network.  The runtime's
    ``init`` is called after the generated code has registered its
    listeners.
    """
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '    <meta charset="utf-8">\n'
        f"    <title>{html.escape(title)}</title>\n"
        "    <style>\n"
        f"{_STYLE}"
        "    </style>\n"
        "</head>\n"
        "<body>\n"
        '    <div id="controls">\n'
        '        <button id="green-flag" title="Run">&#9873; Go</button>\n'
        '        <button id="stop" title="Stop">&#9632; Stop</button>\n'
        "    </div>\n"
        '    <div id="stage"></div>\n'
        '    <div id="console"></div>\n'
        "    <script>\n"
        f"{_inline_script(js)}"
        "scratchRuntime.init();\n"
        "    </script>\n"
        "</body>\n"
        "</html>\n"
    )
