"""ANSI palettes for the two panes and the frame chrome.

Syntax highlighting of previews uses the separate Pygments ``style``
setting; this palette only covers headings, the file list and chrome.
"""

from __future__ import annotations

from dataclasses import dataclass, fields


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    divider: str
    reverse: str
    header: str
    hint: str
    search_prompt: str
    cursor: str
    directory: str
    title: str
    section: str
    error: str
    loading: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    divider="\033[38;5;62m",
    reverse="\033[7m",
    header="\033[1;38;5;86m",
    hint="\033[38;5;241m",
    search_prompt="\033[1;38;5;86m",
    cursor="\033[1;38;5;212m",
    directory="\033[1;34m",
    title="\033[1;4;38;5;212m",
    section="\033[1;38;5;81m",
    error="\033[1;38;5;196m",
    loading="\033[38;5;229m",
)

NO_COLOR_THEME = UITheme(**{field.name: "" for field in fields(UITheme) if field.name != "name"}, name="plain")


def theme_for(no_color: bool) -> UITheme:
    return NO_COLOR_THEME if no_color else DEFAULT_THEME


def styled(text: str, sgr: str, theme: UITheme) -> str:
    """Wrap ``text`` in ``sgr`` unless the theme is colorless."""
    if not sgr:
        return text
    return f"{sgr}{text}{theme.reset}"


__all__ = ["DEFAULT_THEME", "NO_COLOR_THEME", "UITheme", "styled", "theme_for"]
