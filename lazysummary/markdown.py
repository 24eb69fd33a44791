"""Markdown rendering through rich.

The summary pane shows rendered markdown when rendering succeeds; callers
fall back to a plain preview on ``MarkdownRenderError``.
"""

from __future__ import annotations

import io

from rich.console import Console
from rich.markdown import Markdown


class MarkdownRenderError(Exception):
    """Rendering failed; the caller should show plain text instead."""


def render_markdown(text: str, width: int, no_color: bool = False) -> str:
    """Render ``text`` to ANSI-styled lines wrapped at ``width`` columns."""
    console = Console(
        file=io.StringIO(),
        width=max(1, width),
        force_terminal=True,
        color_system=None if no_color else "256",
        no_color=no_color,
        highlight=False,
        emoji=False,
    )
    try:
        with console.capture() as capture:
            console.print(Markdown(text))
    except Exception as exc:
        raise MarkdownRenderError(str(exc)) from exc
    return capture.get()
