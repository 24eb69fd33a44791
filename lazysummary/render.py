"""Frame composition: header, file list pane, summary pane, footer."""

from __future__ import annotations

from .ansi import fit_ansi_line, truncate_with_ellipsis
from .controller import NavigationController
from .directory_preview import entry_icon, relative_display_path
from .theme import UITheme, styled

HEADER_ROWS = 1
FOOTER_ROWS = 1
MIN_PANE_WIDTH = 10
DIVIDER = "│"
EMPTY_LIST_TEXT = "No files found..."
HELP_FOOTER = "↑/↓ navigate • Enter open • / search • PgUp/PgDn scroll • t toggle dirs • r refresh • q quit"
SEARCH_HINT = " (ESC to cancel, Enter to confirm)"


def pane_rows(height: int) -> int:
    return max(1, height - HEADER_ROWS - FOOTER_ROWS)


def split_widths(width: int) -> tuple[int, int]:
    """Return ``(left, right)`` pane widths around the one-column divider."""
    left = max(MIN_PANE_WIDTH, (width - 1) // 2)
    right = max(1, width - left - 1)
    return left, right


def list_window_start(cursor: int, total: int, rows: int) -> int:
    """First visible list row, keeping the cursor near the middle."""
    if total <= rows:
        return 0
    start = max(0, cursor - rows // 2)
    return min(start, total - rows)


def file_count_footer(controller: NavigationController) -> str:
    count = sum(1 for entry in controller.visible_entries() if not entry.is_directory)
    footer = f"{count} files"
    if not controller.state.show_dirs:
        footer += " (dirs hidden - press 't' to toggle)"
    return footer


def file_list_lines(controller: NavigationController, rows: int, width: int, theme: UITheme) -> list[str]:
    """Render the left pane: entry rows, padding, then the count footer."""
    entries = controller.visible_entries()
    list_rows = max(1, rows - 1)
    lines: list[str] = []
    if not entries:
        lines.append(EMPTY_LIST_TEXT)
    else:
        cursor = min(controller.state.cursor, len(entries) - 1)
        start = list_window_start(cursor, len(entries), list_rows)
        for idx in range(start, min(len(entries), start + list_rows)):
            entry = entries[idx]
            prefix = "> " if idx == cursor else "  "
            name = truncate_with_ellipsis(entry.path, max(4, width - 6))
            row = f"{prefix}{entry_icon(entry)} {name}"
            if idx == cursor:
                row = styled(row, theme.cursor, theme)
            elif entry.is_directory:
                row = styled(row, theme.directory, theme)
            lines.append(row)
    while len(lines) < list_rows:
        lines.append("")
    lines = lines[:list_rows]
    lines.append(styled(file_count_footer(controller), theme.hint, theme))
    return lines


def summary_pane_lines(controller: NavigationController, rows: int) -> list[str]:
    state = controller.state
    visible = state.pane_lines[state.scroll_offset : state.scroll_offset + rows]
    return visible + [""] * (rows - len(visible))


def header_line(controller: NavigationController, theme: UITheme) -> str:
    state = controller.state
    return styled(f"📁 {relative_display_path(state.current_directory, state.root)}", theme.header, theme)


def footer_line(controller: NavigationController, theme: UITheme) -> str:
    state = controller.state
    if state.search_mode:
        return styled(f"Search: {state.search_query}█", theme.search_prompt, theme) + styled(
            SEARCH_HINT, theme.hint, theme
        )
    if state.search_query:
        return styled(f"Filter: {state.search_query}", theme.search_prompt, theme) + styled(
            "  " + HELP_FOOTER, theme.hint, theme
        )
    return styled(HELP_FOOTER, theme.hint, theme)


def render_frame(controller: NavigationController, width: int, height: int, theme: UITheme) -> str:
    """Compose one full-screen frame as an escape-prefixed string."""
    rows = pane_rows(height)
    left_width, right_width = split_widths(width)
    left = file_list_lines(controller, rows, left_width, theme)
    right = summary_pane_lines(controller, rows)
    divider = styled(DIVIDER, theme.divider, theme)

    lines = [fit_ansi_line(header_line(controller, theme), width)]
    for left_line, right_line in zip(left, right):
        lines.append(fit_ansi_line(left_line, left_width) + divider + fit_ansi_line(right_line, right_width))
    lines.append(fit_ansi_line(footer_line(controller, theme), width))
    return "\033[H\033[J" + "\r\n".join(lines)


__all__ = [
    "file_count_footer",
    "file_list_lines",
    "list_window_start",
    "pane_rows",
    "render_frame",
    "split_widths",
]
