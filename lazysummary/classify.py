"""Map file names to a display language and a summary kind.

Classification is driven by the lower-cased extension. The one exception is
the executable kind, which on POSIX also needs the execute permission bit
and on Windows is decided by extension alone. Executable wins over any
extension-based kind.
"""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from pathlib import Path

from .listing import extension_of

KIND_SOURCE = "source"
KIND_MARKUP = "markup"
KIND_CONFIG_JSON = "config-json"
KIND_CONFIG_STRUCT = "config-struct"
KIND_TEXT_DATA = "text-data"
KIND_EXECUTABLE = "executable"

UNKNOWN_LANGUAGE = "Unknown"

LANGUAGE_BY_EXTENSION: dict[str, str] = {
    # Programming languages
    ".go": "Go",
    ".py": "Python",
    ".js": "JavaScript",
    ".ts": "TypeScript",
    ".jsx": "React/JSX",
    ".tsx": "React/TSX",
    ".rs": "Rust",
    ".java": "Java",
    ".c": "C",
    ".cpp": "C++",
    ".cc": "C++",
    ".h": "C Header",
    ".hpp": "C++ Header",
    ".cs": "C#",
    ".php": "PHP",
    ".rb": "Ruby",
    ".swift": "Swift",
    ".kt": "Kotlin",
    ".scala": "Scala",
    # Markup and documentation
    ".md": "Markdown",
    ".markdown": "Markdown",
    ".txt": "Text",
    ".rst": "reStructuredText",
    # Configuration
    ".json": "JSON",
    ".yaml": "YAML",
    ".yml": "YAML",
    ".toml": "TOML",
    ".ini": "INI",
    ".cfg": "Config",
    ".conf": "Config",
    ".env": "Environment",
    ".properties": "Properties",
    # Data
    ".xml": "XML",
    ".csv": "CSV",
    ".log": "Log",
    # Shell and scripts
    ".sh": "Shell",
    ".bash": "Bash",
    ".zsh": "Zsh",
    ".fish": "Fish",
    ".ps1": "PowerShell",
    ".bat": "Batch",
    ".cmd": "Command",
}

KIND_BY_EXTENSION: dict[str, str] = {
    ".md": KIND_MARKUP,
    ".markdown": KIND_MARKUP,
    ".json": KIND_CONFIG_JSON,
    ".yaml": KIND_CONFIG_STRUCT,
    ".yml": KIND_CONFIG_STRUCT,
    ".toml": KIND_CONFIG_STRUCT,
    ".ini": KIND_CONFIG_STRUCT,
    ".cfg": KIND_CONFIG_STRUCT,
    ".conf": KIND_CONFIG_STRUCT,
    ".env": KIND_CONFIG_STRUCT,
    ".properties": KIND_CONFIG_STRUCT,
    ".txt": KIND_TEXT_DATA,
    ".rst": KIND_TEXT_DATA,
    ".xml": KIND_TEXT_DATA,
    ".csv": KIND_TEXT_DATA,
    ".log": KIND_TEXT_DATA,
}

# Extensions the summary pane has something useful to say about.
SUMMARIZABLE_EXTENSIONS = frozenset(LANGUAGE_BY_EXTENSION)

WINDOWS_EXECUTABLE_EXTENSIONS = frozenset({".exe", ".com", ".bat", ".cmd", ".ps1", ".msi"})


@dataclass(frozen=True)
class Classification:
    """Derived facts about one file name."""

    language_label: str
    kind: str
    extension: str


def _running_on_windows() -> bool:
    return os.name == "nt"


def is_executable_file(path: Path, windows: bool | None = None) -> bool:
    """Return whether ``path`` should be run for help text."""
    if windows is None:
        windows = _running_on_windows()
    if windows:
        return extension_of(path.name) in WINDOWS_EXECUTABLE_EXTENSIONS

    try:
        info = path.stat()
    except OSError:
        return False
    if not stat.S_ISREG(info.st_mode):
        return False
    return bool(info.st_mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))


def is_summarizable(name: str) -> bool:
    return extension_of(name) in SUMMARIZABLE_EXTENSIONS


def language_label(name: str) -> str:
    return LANGUAGE_BY_EXTENSION.get(extension_of(name), UNKNOWN_LANGUAGE)


def classify(name: str, path: Path | None = None, windows: bool | None = None) -> Classification:
    """Classify ``name``; pass ``path`` to allow the executable kind.

    Never fails: unknown extensions classify as generic text with the
    ``Unknown`` label.
    """
    extension = extension_of(name)
    label = LANGUAGE_BY_EXTENSION.get(extension, UNKNOWN_LANGUAGE)
    if path is not None and is_executable_file(path, windows=windows):
        return Classification(language_label=label, kind=KIND_EXECUTABLE, extension=extension)

    kind = KIND_BY_EXTENSION.get(extension)
    if kind is None:
        kind = KIND_SOURCE if extension in LANGUAGE_BY_EXTENSION else KIND_TEXT_DATA
    return Classification(language_label=label, kind=kind, extension=extension)


__all__ = [
    "Classification",
    "KIND_CONFIG_JSON",
    "KIND_CONFIG_STRUCT",
    "KIND_EXECUTABLE",
    "KIND_MARKUP",
    "KIND_SOURCE",
    "KIND_TEXT_DATA",
    "LANGUAGE_BY_EXTENSION",
    "SUMMARIZABLE_EXTENSIONS",
    "UNKNOWN_LANGUAGE",
    "WINDOWS_EXECUTABLE_EXTENSIONS",
    "classify",
    "is_executable_file",
    "is_summarizable",
    "language_label",
]
