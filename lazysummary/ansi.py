"""ANSI-aware text measurement for pane composition.

Pane cells are measured in terminal columns, not characters: escape
sequences take no space, tabs expand, and wide glyphs (emoji icons) take two.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``."""
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch) or ch == "\ufe0f":
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    """Visible column count of ``text`` with escape sequences ignored."""
    col = 0
    for ch in strip_ansi(text):
        col += char_display_width(ch, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    Escape sequences are kept verbatim; tabs become spaces so the clipped
    result lines up with the rendered cells.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        if col + w > max_cols:
            break
        out.append(" " * w if ch == "\t" else ch)
        col += w
        i += 1

    return "".join(out)


def fit_ansi_line(text: str, width: int) -> str:
    """Clip then right-pad ``text`` so it fills exactly ``width`` columns."""
    clipped = clip_ansi_line(text, width)
    padding = max(0, width - display_width(clipped))
    if "\x1b" in clipped:
        return f"{clipped}\033[0m{' ' * padding}"
    return clipped + " " * padding


def truncate_with_ellipsis(text: str, max_cols: int) -> str:
    """Shorten plain ``text`` to ``max_cols`` columns, ending in ``...``."""
    if display_width(text) <= max_cols:
        return text
    if max_cols <= 3:
        return clip_ansi_line(text, max_cols)
    return clip_ansi_line(text, max_cols - 3) + "..."
