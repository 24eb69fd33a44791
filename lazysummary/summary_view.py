"""Turn a ``Summary`` into the lines shown in the summary pane."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import PurePath

from .highlight import colorize_lines, sanitize_terminal_text
from .summary import Summary, format_bytes
from .theme import UITheme, styled

LOADING_TEXT = "⏳ Loading summary..."
NO_SELECTION_TEXT = "No file selected"

HEADERS_LIMIT = 10
CONFIG_KEYS_LIMIT = 15
FUNCTIONS_LIMIT = 15
IMPORTS_LIMIT = 10
TYPES_LIMIT = 10
STRUCTS_LIMIT = 10
LINKS_LIMIT = 8

_PREVIEW_MARKER_PREFIX = "... ("


def _section(
    title: str,
    items: Sequence[str],
    limit: int,
    theme: UITheme,
    bullet: str = "• ",
) -> list[str]:
    lines = [styled(title, theme.section, theme)]
    for item in items[:limit]:
        lines.append(f"  {bullet}{sanitize_terminal_text(item)}")
    if len(items) > limit:
        lines.append(f"  ... and {len(items) - limit} more")
    lines.append("")
    return lines


def _text_lines(text: str) -> list[str]:
    lines = text.split("\n")
    while lines and not lines[-1].strip():
        lines.pop()
    return lines


def _preview_block(summary: Summary, style: str, no_color: bool) -> list[str]:
    preview = [sanitize_terminal_text(line) for line in summary.content_preview]
    marker: list[str] = []
    if preview and preview[-1].startswith(_PREVIEW_MARKER_PREFIX):
        marker = [preview.pop()]
    if not no_color:
        preview = colorize_lines(preview, PurePath(summary.path).name, style)
    return preview + marker


def format_summary(summary: Summary, theme: UITheme, style: str = "monokai", no_color: bool = False) -> list[str]:
    """Lay out ``summary`` for the pane.

    Failed summaries show only the error banner. Executables and rendered
    markdown replace the per-section listing.
    """
    if summary.failed:
        return [styled("Error: ", theme.error, theme) + sanitize_terminal_text(summary.error_message)]

    lines = [
        styled(f"📄 {summary.path}", theme.title, theme),
        "",
        f"Language: {summary.language_label}",
        f"Lines: {summary.line_count}",
    ]
    if summary.size_bytes > 0:
        lines.append(f"Size: {format_bytes(summary.size_bytes)}")
    if summary.function_count > 0:
        lines.append(f"Functions: {summary.function_count}")
    lines.append("")

    if summary.is_executable:
        lines.extend([styled("🔧 Executable Help:", theme.section, theme), ""])
        lines.extend(_text_lines(sanitize_terminal_text(summary.help_text)))
        return lines

    if summary.rendered_text:
        lines.extend([styled("📝 Rendered Content:", theme.section, theme), ""])
        lines.extend(_text_lines(summary.rendered_text))
        return lines

    if summary.content_preview:
        lines.extend([styled("📖 Content Preview:", theme.section, theme), ""])
        lines.extend(_preview_block(summary, style, no_color))
        lines.append("")

    if summary.headers:
        lines.extend(_section("📋 Headers:", summary.headers, HEADERS_LIMIT, theme, bullet=""))
    if summary.config_keys:
        lines.extend(_section("🔑 Configuration Keys:", summary.config_keys, CONFIG_KEYS_LIMIT, theme))
    if summary.functions:
        lines.extend(_section("🔧 Functions:", summary.functions, FUNCTIONS_LIMIT, theme))
    if summary.imports:
        lines.extend(_section("📦 Imports:", summary.imports, IMPORTS_LIMIT, theme))
    if summary.types:
        lines.extend(_section("🏷 Types:", summary.types, TYPES_LIMIT, theme))
    # Structs repeat types in most languages; only list them when they differ.
    if summary.structs and len(summary.structs) != len(summary.types):
        lines.extend(_section("🏗 Structs:", summary.structs, STRUCTS_LIMIT, theme))
    if summary.links:
        lines.extend(_section("🔗 Links:", summary.links, LINKS_LIMIT, theme, bullet=""))

    return _text_lines("\n".join(lines))


def format_message(text: str) -> list[str]:
    """Split a plain pane message into sanitized lines."""
    return sanitize_terminal_text(text).split("\n")


def loading_lines(theme: UITheme) -> list[str]:
    return [styled(LOADING_TEXT, theme.loading, theme)]


__all__ = [
    "LOADING_TEXT",
    "NO_SELECTION_TEXT",
    "format_message",
    "format_summary",
    "loading_lines",
]
