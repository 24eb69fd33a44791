"""Summary record produced for one selected file, plus its error taxonomy."""

from __future__ import annotations

from dataclasses import dataclass


class SummaryError(Exception):
    """Base class for failures that end up in ``Summary.error_message``."""


class ReadError(SummaryError):
    """File could not be read (I/O failure or permissions)."""


class ParseError(SummaryError):
    """File content is malformed for its format (JSON only)."""


@dataclass(frozen=True)
class Summary:
    """Immutable result of summarizing one file.

    Only the field group that matches the file's kind is populated. When
    ``error_message`` is set every extraction field stays empty.
    """

    path: str
    language_label: str
    line_count: int = 0
    size_bytes: int = 0
    functions: tuple[str, ...] = ()
    imports: tuple[str, ...] = ()
    types: tuple[str, ...] = ()
    structs: tuple[str, ...] = ()
    headers: tuple[str, ...] = ()
    links: tuple[str, ...] = ()
    rendered_text: str = ""
    config_keys: tuple[str, ...] = ()
    content_preview: tuple[str, ...] = ()
    help_text: str = ""
    is_executable: bool = False
    error_message: str = ""

    @property
    def function_count(self) -> int:
        return len(self.functions)

    @property
    def failed(self) -> bool:
        return bool(self.error_message)


def format_bytes(size: int) -> str:
    """Human-readable size with binary units and one decimal."""
    kib = 1024
    mib = kib * 1024
    gib = mib * 1024
    if size >= gib:
        return f"{size / gib:.1f} GB"
    if size >= mib:
        return f"{size / mib:.1f} MB"
    if size >= kib:
        return f"{size / kib:.1f} KB"
    return f"{size} B"


__all__ = [
    "ParseError",
    "ReadError",
    "Summary",
    "SummaryError",
    "format_bytes",
]
