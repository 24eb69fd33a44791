"""Text shown in the summary pane for directories and non-summarizable rows."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path

from .listing import Entry, list_directory

logger = logging.getLogger(__name__)

DIRECTORY_PREVIEW_MAX_ITEMS = 20
DIRECTORY_ICON = "📁"
PARENT_ICON = "🔼"
EMPTY_DIRECTORY_ICON = "📭"
DEFAULT_FILE_ICON = "📄"

FILE_ICONS: dict[str, str] = {
    ".go": "🐹",
    ".py": "🐍",
    ".ts": "📘",
    ".rs": "🦀",
    ".java": "☕",
    ".cs": "🔷",
    ".php": "🐘",
    ".rb": "💎",
    ".swift": "🍎",
    ".kt": "📱",
    ".md": "📝",
    ".markdown": "📝",
    ".rst": "📜",
    ".json": "🔧",
    ".yaml": "🔩",
    ".yml": "🔩",
    ".toml": "🔩",
    ".ini": "🔩",
    ".cfg": "🔩",
    ".conf": "🔩",
    ".properties": "🔩",
    ".env": "🌿",
    ".xml": "📋",
    ".csv": "📊",
    ".log": "📜",
    ".sh": "🐚",
    ".bash": "🐚",
    ".zsh": "🐚",
    ".fish": "🐠",
    ".ps1": "💻",
    ".bat": "💻",
    ".cmd": "💻",
    ".html": "🌐",
    ".htm": "🌐",
    ".css": "🎨",
    ".scss": "🎨",
    ".png": "🎨",
    ".jpg": "🎨",
    ".jpeg": "🎨",
    ".gif": "🎨",
    ".svg": "🎨",
    ".zip": "📦",
    ".tar": "📦",
    ".gz": "📦",
    ".deb": "📦",
    ".rpm": "📦",
    ".msi": "📦",
}

NAVIGATE_INTO_HINT = "Press Enter to navigate into this directory."
NAVIGATE_UP_HINT = "Press Enter to navigate up to this directory."


def entry_icon(entry: Entry) -> str:
    if entry.is_parent:
        return PARENT_ICON
    if entry.is_directory:
        return DIRECTORY_ICON
    return FILE_ICONS.get(entry.extension, DEFAULT_FILE_ICON)


def relative_display_path(path: Path, root: Path) -> str:
    """Render ``path`` as ``/`` plus its location below the browse root."""
    relative = os.path.relpath(path, root)
    if relative == ".":
        return "/"
    return "/" + Path(relative).as_posix()


def format_directory_preview(name: str, entries: Sequence[Entry], directory: Path, root: Path) -> str:
    """Describe the immediate children of ``directory``.

    The ``..`` row is left out. At most ``DIRECTORY_PREVIEW_MAX_ITEMS``
    children are named; the rest are counted.
    """
    lines = [
        f"{DIRECTORY_ICON} Directory: {name}",
        f"Path: {relative_display_path(directory, root)}",
        "",
    ]
    children = [entry for entry in entries if not entry.is_parent]
    if not children:
        lines.extend([f"{EMPTY_DIRECTORY_ICON} This directory is empty.", "", NAVIGATE_INTO_HINT])
        return "\n".join(lines)

    dir_count = sum(1 for entry in children if entry.is_directory)
    counts = f"Contains: {len(children) - dir_count} files"
    if dir_count:
        counts += f", {dir_count} directories"
    lines.extend([counts, ""])

    if len(children) > DIRECTORY_PREVIEW_MAX_ITEMS:
        lines.append(f"First {DIRECTORY_PREVIEW_MAX_ITEMS} items:")
    else:
        lines.append("Contents:")
    for entry in children[:DIRECTORY_PREVIEW_MAX_ITEMS]:
        suffix = "/" if entry.is_directory else ""
        lines.append(f"  {entry_icon(entry)} {entry.path}{suffix}")
    if len(children) > DIRECTORY_PREVIEW_MAX_ITEMS:
        lines.append(f"  ... and {len(children) - DIRECTORY_PREVIEW_MAX_ITEMS} more items")

    lines.extend(["", NAVIGATE_INTO_HINT])
    return "\n".join(lines)


def build_directory_preview(directory: Path, root: Path) -> str:
    """List ``directory`` and describe it; listing errors become the text."""
    name = directory.name
    try:
        entries = list_directory(directory, root)
    except OSError as exc:
        logger.info("directory preview of %s failed: %s", directory, exc)
        return f"{DIRECTORY_ICON} Directory: {name}\n\nError reading directory: {exc.strerror or exc}"
    return format_directory_preview(name, entries, directory, root)


def parent_directory_message(current_directory: Path, root: Path) -> str:
    parent = current_directory.parent
    return (
        f"{DIRECTORY_ICON} Parent Directory\n\n"
        f"Path: {relative_display_path(parent, root)}\n\n"
        f"{NAVIGATE_UP_HINT}"
    )


def unsupported_file_message(name: str) -> str:
    return f"File: {name}\n\nThis file type is not supported for summarization."


__all__ = [
    "DIRECTORY_PREVIEW_MAX_ITEMS",
    "FILE_ICONS",
    "build_directory_preview",
    "entry_icon",
    "format_directory_preview",
    "parent_directory_message",
    "relative_display_path",
    "unsupported_file_message",
]
