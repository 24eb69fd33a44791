"""Per-file-type summary extraction.

``Summarizer.summarize`` classifies a file, picks a strategy from a fixed
table and turns its output into an immutable ``Summary``. Strategies are
plain functions ``(text, path, options) -> fields``; they raise
``ReadError``/``ParseError`` and the dispatcher folds those into
``Summary.error_message``, so ``summarize`` itself never raises.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from types import MappingProxyType

from .classify import (
    KIND_CONFIG_JSON,
    KIND_CONFIG_STRUCT,
    KIND_EXECUTABLE,
    KIND_MARKUP,
    KIND_SOURCE,
    Classification,
    classify,
)
from .executable_help import HELP_TIMEOUT_SECONDS, HelpProcesses, fetch_help
from .highlight import read_text
from .markdown import MarkdownRenderError, render_markdown
from .patterns import LanguagePatterns, first_capture, patterns_for_extension
from .summary import ParseError, ReadError, Summary, SummaryError

logger = logging.getLogger(__name__)

TEXT_PREVIEW_LINES = 50
MARKDOWN_PREVIEW_LINES = 50
INI_PREVIEW_LINES = 40
ENV_PREVIEW_LINES = 30
JSON_MAX_KEY_DEPTH = 3
MARKDOWN_TRUNCATION_MARKER = "... (truncated)"

_MARKDOWN_HEADER_RE = re.compile(r"^(#{1,6})\s+(.+)")
_MARKDOWN_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_INI_SECTION_RE = re.compile(r"^\[([^\]]+)\]")
_INI_KEY_RE = re.compile(r"^([^=]+)=(.*)")
_ENV_KEY_RE = re.compile(r"^([A-Z_][A-Z0-9_]*)=")

STRATEGY_MARKDOWN = "markdown"
STRATEGY_JSON = "json"
STRATEGY_INI = "ini"
STRATEGY_ENV = "env"
STRATEGY_TEXT = "text"
STRATEGY_SOURCE = "source"

# Structured config formats with their own key walker; other config-struct
# extensions (YAML, TOML, properties) get the plain text preview.
_CONFIG_STRATEGY_BY_EXTENSION: dict[str, str] = {
    ".ini": STRATEGY_INI,
    ".cfg": STRATEGY_INI,
    ".conf": STRATEGY_INI,
    ".env": STRATEGY_ENV,
}


@dataclass(frozen=True)
class SummaryOptions:
    """Knobs shared by every strategy run of one ``Summarizer``."""

    help_timeout_seconds: float = HELP_TIMEOUT_SECONDS
    markdown_width: int = 80
    no_color: bool = False
    windows: bool | None = None


Strategy = Callable[[str, Path, SummaryOptions], dict[str, object]]


def split_lines(text: str) -> list[str]:
    """Split on newlines; a trailing newline does not start another line."""
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def count_lines(text: str) -> int:
    return len(split_lines(text))


def preview_lines(lines: list[str], limit: int, marker: str | None = None) -> tuple[str, ...]:
    """Keep the first ``limit`` lines, appending ``marker`` when cut.

    ``marker`` may contain ``{remaining}``. Without a marker the preview
    just stops.
    """
    if len(lines) <= limit:
        return tuple(lines)
    kept = list(lines[:limit])
    if marker is not None:
        kept.append(marker.format(remaining=len(lines) - limit))
    return tuple(kept)


def summarize_markdown(text: str, path: Path, options: SummaryOptions) -> dict[str, object]:
    lines = split_lines(text)
    headers: list[str] = []
    links: list[str] = []
    for line in lines:
        stripped = line.strip()
        header = _MARKDOWN_HEADER_RE.match(stripped)
        if header is not None:
            headers.append(f"{header.group(1)} {header.group(2)}")
        for link in _MARKDOWN_LINK_RE.finditer(stripped):
            links.append(f"[{link.group(1)}]({link.group(2)})")

    fields: dict[str, object] = {"headers": tuple(headers), "links": tuple(links)}
    try:
        fields["rendered_text"] = render_markdown(text, options.markdown_width, no_color=options.no_color)
    except MarkdownRenderError as exc:
        logger.info("markdown rendering failed for %s: %s", path, exc)
        fields["content_preview"] = preview_lines(lines, MARKDOWN_PREVIEW_LINES, MARKDOWN_TRUNCATION_MARKER)
    return fields


def extract_json_keys(data: object, prefix: str = "") -> list[str]:
    """Collect dotted key paths from a decoded JSON tree.

    Nesting stops once a key has ``JSON_MAX_KEY_DEPTH`` dots. Arrays are
    sampled through their first element only, as an ``[0]`` segment.
    """
    keys: list[str] = []
    if isinstance(data, dict):
        for key, value in data.items():
            full_key = f"{prefix}.{key}" if prefix else str(key)
            keys.append(full_key)
            if full_key.count(".") < JSON_MAX_KEY_DEPTH:
                keys.extend(extract_json_keys(value, full_key))
    elif isinstance(data, list) and data:
        element_key = f"{prefix}[0]"
        keys.append(element_key)
        if element_key.count(".") < JSON_MAX_KEY_DEPTH:
            keys.extend(extract_json_keys(data[0], element_key))
    return keys


def summarize_json(text: str, path: Path, options: SummaryOptions) -> dict[str, object]:
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise ParseError(f"Invalid JSON: {exc}") from exc
    return {"config_keys": tuple(extract_json_keys(data))}


def summarize_ini(text: str, path: Path, options: SummaryOptions) -> dict[str, object]:
    lines = split_lines(text)
    keys: list[str] = []
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith(("#", ";")):
            continue
        section = _INI_SECTION_RE.match(stripped)
        if section is not None:
            keys.append(f"[{section.group(1)}]")
            continue
        key_match = _INI_KEY_RE.match(stripped)
        if key_match is not None:
            keys.append(key_match.group(1).strip())
    return {
        "config_keys": tuple(keys),
        "content_preview": preview_lines(lines, INI_PREVIEW_LINES, "... ({remaining} more lines)"),
    }


def summarize_env(text: str, path: Path, options: SummaryOptions) -> dict[str, object]:
    lines = split_lines(text)
    keys: list[str] = []
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        match = _ENV_KEY_RE.match(stripped)
        if match is not None:
            keys.append(match.group(1))
    return {
        "config_keys": tuple(keys),
        "content_preview": preview_lines(lines, ENV_PREVIEW_LINES),
    }


def summarize_text(text: str, path: Path, options: SummaryOptions) -> dict[str, object]:
    return {
        "content_preview": preview_lines(split_lines(text), TEXT_PREVIEW_LINES, "... ({remaining} more lines)"),
    }


def _block_comment_state(line: str, pairs: tuple[tuple[str, str], ...]) -> tuple[bool, str | None]:
    """Return ``(opens_comment, pending_close_marker)`` for ``line``.

    The earliest opening marker wins. The pending close marker is ``None``
    when the comment also closes on the same line.
    """
    best_idx = -1
    best_pair: tuple[str, str] | None = None
    for pair in pairs:
        idx = line.find(pair[0])
        if idx >= 0 and (best_idx < 0 or idx < best_idx):
            best_idx = idx
            best_pair = pair
    if best_pair is None:
        return False, None
    open_marker, close_marker = best_pair
    rest = line[best_idx + len(open_marker) :]
    return True, (None if close_marker in rest else close_marker)


def scan_source_lines(lines: list[str], patterns: LanguagePatterns) -> dict[str, object]:
    """Extract functions, imports, types and structs line by line."""
    functions: list[str] = []
    imports: list[str] = []
    types: list[str] = []
    structs: list[str] = []
    pending_close: str | None = None
    in_import_block = False
    import_block = patterns.import_block

    for raw_line in lines:
        line = raw_line.strip()
        if pending_close is not None:
            if pending_close in line:
                pending_close = None
            continue
        if not line or line.startswith(patterns.line_comment_prefixes):
            continue
        opens_comment, pending_close = _block_comment_state(line, patterns.block_comments)
        if opens_comment:
            continue

        if import_block is not None:
            if in_import_block:
                if line.startswith(import_block.close_marker):
                    in_import_block = False
                else:
                    name = first_capture(import_block.item_pattern.match(line))
                    if name:
                        imports.append(name)
                continue
            if import_block.open_pattern.match(line):
                in_import_block = True
                continue

        for pattern, bucket in (
            (patterns.function_pattern, functions),
            (patterns.import_pattern, imports),
            (patterns.type_pattern, types),
            (patterns.struct_pattern, structs),
        ):
            if pattern is None:
                continue
            name = first_capture(pattern.match(line))
            if name:
                bucket.append(name)

    return {
        "functions": tuple(functions),
        "imports": tuple(imports),
        "types": tuple(types),
        "structs": tuple(structs),
    }


def summarize_source(text: str, path: Path, options: SummaryOptions) -> dict[str, object]:
    return scan_source_lines(split_lines(text), patterns_for_extension(path.suffix))


STRATEGIES: Mapping[str, Strategy] = MappingProxyType(
    {
        STRATEGY_MARKDOWN: summarize_markdown,
        STRATEGY_JSON: summarize_json,
        STRATEGY_INI: summarize_ini,
        STRATEGY_ENV: summarize_env,
        STRATEGY_TEXT: summarize_text,
        STRATEGY_SOURCE: summarize_source,
    }
)


def strategy_for(classification: Classification) -> str:
    """Pick the strategy tag for a non-executable classification."""
    kind = classification.kind
    if kind == KIND_MARKUP:
        return STRATEGY_MARKDOWN
    if kind == KIND_CONFIG_JSON:
        return STRATEGY_JSON
    if kind == KIND_CONFIG_STRUCT:
        return _CONFIG_STRATEGY_BY_EXTENSION.get(classification.extension, STRATEGY_TEXT)
    if kind == KIND_SOURCE:
        return STRATEGY_SOURCE
    return STRATEGY_TEXT


def _count_file_lines(path: Path) -> int:
    """Count newline-delimited lines of a possibly binary file in chunks."""
    count = 0
    last_byte = b""
    with path.open("rb") as handle:
        while True:
            chunk = handle.read(1 << 16)
            if not chunk:
                break
            count += chunk.count(b"\n")
            last_byte = chunk[-1:]
    if last_byte and last_byte != b"\n":
        count += 1
    return count


class Summarizer:
    """Summarize files addressed relative to a base directory."""

    def __init__(
        self,
        base_path: Path,
        options: SummaryOptions | None = None,
        processes: HelpProcesses | None = None,
    ) -> None:
        self.base_path = base_path
        self.options = options or SummaryOptions()
        self.processes = processes or HelpProcesses()

    def summarize(self, relative_path: str, markdown_width: int | None = None) -> Summary:
        """Summarize ``relative_path``; failures land in ``error_message``.

        ``markdown_width`` narrows the configured wrap width, for example to
        the width of the pane the result is shown in.
        """
        full_path = self.base_path / relative_path
        options = self.options
        if markdown_width is not None:
            options = replace(options, markdown_width=max(1, min(options.markdown_width, markdown_width)))
        classification = classify(full_path.name, full_path, windows=options.windows)
        summary = Summary(path=relative_path, language_label=classification.language_label)

        try:
            size_bytes = int(full_path.stat().st_size)
        except OSError as exc:
            logger.info("cannot stat %s: %s", full_path, exc)
            return replace(summary, error_message=f"cannot stat: {exc.strerror or exc}")
        summary = replace(summary, size_bytes=size_bytes)

        try:
            if classification.kind == KIND_EXECUTABLE:
                return replace(
                    summary,
                    is_executable=True,
                    help_text=fetch_help(
                        full_path,
                        timeout=options.help_timeout_seconds,
                        processes=self.processes,
                    ),
                    line_count=self._executable_line_count(full_path),
                )
            text = self._read(full_path)
            summary = replace(summary, line_count=count_lines(text))
            strategy = STRATEGIES[strategy_for(classification)]
            fields = strategy(text, full_path, options)
        except SummaryError as exc:
            logger.info("summary of %s failed: %s", full_path, exc)
            return replace(summary, error_message=str(exc))
        return replace(summary, **fields)

    @staticmethod
    def _read(path: Path) -> str:
        try:
            return read_text(path)
        except OSError as exc:
            raise ReadError(f"Error reading file: {exc.strerror or exc}") from exc

    @staticmethod
    def _executable_line_count(path: Path) -> int:
        try:
            return _count_file_lines(path)
        except OSError as exc:
            raise ReadError(f"Error reading file: {exc.strerror or exc}") from exc


__all__ = [
    "STRATEGIES",
    "Summarizer",
    "SummaryOptions",
    "count_lines",
    "extract_json_keys",
    "preview_lines",
    "scan_source_lines",
    "split_lines",
    "strategy_for",
]
