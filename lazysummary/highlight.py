"""Source loading, sanitization, and preview syntax highlighting."""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
FALLBACK_STYLE = "monokai"


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1. ``OSError`` propagates.
    """
    data = path.read_bytes()
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return data.decode("utf-8", errors="replace")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes so previews cannot move the cursor or ring bells."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


@lru_cache(maxsize=16)
def _formatter_for_style(style: str) -> TerminalFormatter:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        style = FALLBACK_STYLE
    return TerminalFormatter(style=style)


def colorize_lines(lines: list[str], filename: str, style: str = FALLBACK_STYLE) -> list[str]:
    """Highlight preview ``lines`` with the lexer Pygments picks for ``filename``.

    Returns the input unchanged when no specific lexer applies or highlighting
    does not preserve the line structure.
    """
    if not lines:
        return lines
    source = "\n".join(lines)
    try:
        lexer = get_lexer_for_filename(filename, source, stripnl=False)
    except ClassNotFound:
        return lines
    if isinstance(lexer, TextLexer):
        return lines

    rendered = pygments_highlight(source, lexer, _formatter_for_style(style))
    highlighted = rendered.split("\n")
    if rendered.endswith("\n"):
        highlighted.pop()
    if len(highlighted) != len(lines):
        return lines
    return highlighted
