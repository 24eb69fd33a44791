"""Navigation and selection controller.

Owns every piece of mutable UI state. Keys arrive through ``handle_key``,
background completions through ``apply_result``; both run on the event
loop thread only. A completion is applied only when its tag still matches
the state it was requested for (the current directory for listings, the
current selection for summaries and previews).
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from .classify import KIND_MARKUP, classify, is_executable_file, is_summarizable
from .directory_preview import build_directory_preview, parent_directory_message, unsupported_file_message
from .fuzzy import filter_entries
from .input import is_printable_key
from .listing import Entry, list_directory
from .summarize import Summarizer
from .summary import Summary
from .summary_view import NO_SELECTION_TEXT, format_message, format_summary, loading_lines
from .theme import DEFAULT_THEME, UITheme
from .workers import CHANNEL_LISTING, CHANNEL_PREVIEW, CHANNEL_SUMMARY, TaskRequest, TaskResult

logger = logging.getLogger(__name__)

MODE_BROWSING = "browsing"
MODE_SEARCHING = "searching"
CURSOR_PAGE_STEP = 10
SUMMARY_PAGE_STEP = 5


class Scheduler(Protocol):
    def submit(self, channel: str, tag: str, work: Callable[[], object]) -> TaskRequest: ...

    def drain_results(self, timeout_seconds: float = 0.0) -> list[TaskResult]: ...


@dataclass
class NavigationState:
    root: Path
    current_directory: Path
    selected_path: str | None = None
    all_entries: list[Entry] = field(default_factory=list)
    filtered_entries: list[Entry] = field(default_factory=list)
    search_mode: bool = False
    search_query: str = ""
    scroll_offset: int = 0
    cursor: int = 0
    show_dirs: bool = True
    pane_lines: list[str] = field(default_factory=list)
    pane_loading: bool = False
    viewport_height: int = 1
    pane_width: int | None = None
    listed_directory: Path | None = None
    running: bool = True
    dirty: bool = True

    @property
    def mode(self) -> str:
        return MODE_SEARCHING if self.search_mode else MODE_BROWSING


def list_or_empty(directory: Path, root: Path) -> list[Entry]:
    """Directory listing where an unreadable directory lists as empty."""
    try:
        return list_directory(directory, root)
    except OSError as exc:
        logger.warning("cannot list %s: %s", directory, exc)
        return []


class NavigationController:
    """Browsing/searching state machine over one browse root."""

    def __init__(
        self,
        root: Path,
        scheduler: Scheduler,
        summarizer: Summarizer,
        *,
        show_dirs: bool = True,
        theme: UITheme = DEFAULT_THEME,
        style: str = "monokai",
        no_color: bool = False,
        windows: bool | None = None,
    ) -> None:
        self.state = NavigationState(
            root=root,
            current_directory=root,
            show_dirs=show_dirs,
            pane_lines=format_message(NO_SELECTION_TEXT),
        )
        self.scheduler = scheduler
        self.summarizer = summarizer
        self.theme = theme
        self.style = style
        self.no_color = no_color
        self.windows = windows

    # lifecycle
    def start(self) -> None:
        self.request_listing()

    def request_listing(self) -> None:
        directory = self.state.current_directory
        root = self.state.root
        self.scheduler.submit(CHANNEL_LISTING, str(directory), lambda: list_or_empty(directory, root))

    def poll_background(self, timeout_seconds: float = 0.0) -> bool:
        """Apply drained completions; return whether any was applied."""
        applied = False
        for result in self.scheduler.drain_results(timeout_seconds):
            applied = self.apply_result(result) or applied
        return applied

    # derived views
    def visible_entries(self) -> list[Entry]:
        """Displayed entries; hiding directories keeps the ``..`` row."""
        entries = self.state.filtered_entries
        if self.state.show_dirs:
            return list(entries)
        return [entry for entry in entries if entry.is_parent or not entry.is_directory]

    def current_entry(self) -> Entry | None:
        entries = self.visible_entries()
        if not entries:
            return None
        return entries[min(max(0, self.state.cursor), len(entries) - 1)]

    def selection_key(self, entry: Entry) -> str:
        return str(self.state.current_directory / entry.path)

    def max_scroll(self) -> int:
        return max(0, len(self.state.pane_lines) - max(1, self.state.viewport_height))

    # pane content
    def _set_pane(self, lines: list[str], loading: bool = False) -> None:
        self.state.pane_lines = lines
        self.state.pane_loading = loading
        self.state.scroll_offset = 0
        self.state.dirty = True

    def show_summary(self, summary: Summary) -> None:
        self._set_pane(format_summary(summary, self.theme, style=self.style, no_color=self.no_color))

    def show_message(self, text: str) -> None:
        self._set_pane(format_message(text))

    def scroll_summary(self, delta: int) -> None:
        offset = min(max(0, self.state.scroll_offset + delta), self.max_scroll())
        if offset != self.state.scroll_offset:
            self.state.scroll_offset = offset
            self.state.dirty = True

    def set_viewport_height(self, height: int) -> None:
        self.state.viewport_height = max(1, height)
        self.state.scroll_offset = min(self.state.scroll_offset, self.max_scroll())

    def set_pane_width(self, width: int) -> None:
        """Record the summary pane width; re-request a shown markdown summary."""
        width = max(1, width)
        if width == self.state.pane_width:
            return
        self.state.pane_width = width
        entry = self.current_entry()
        if self.state.selected_path is None or entry is None or entry.is_directory:
            return
        if classify(entry.path).kind == KIND_MARKUP:
            self.state.selected_path = None
            self.sync_selection()

    # selection protocol
    def _clamp_cursor(self) -> None:
        count = len(self.visible_entries())
        self.state.cursor = min(max(0, self.state.cursor), max(0, count - 1))

    def sync_selection(self) -> None:
        """Start the pane update for the entry under the cursor if it changed."""
        self._clamp_cursor()
        entry = self.current_entry()
        if entry is None:
            if self.state.selected_path is not None:
                self.state.selected_path = None
                self.show_message(NO_SELECTION_TEXT)
            return
        key = self.selection_key(entry)
        if key == self.state.selected_path:
            return
        self.state.selected_path = key
        self._on_selection_changed(entry, key)

    def _on_selection_changed(self, entry: Entry, key: str) -> None:
        state = self.state
        if entry.is_parent:
            self.show_message(parent_directory_message(state.current_directory, state.root))
            return

        full_path = state.current_directory / entry.path
        root = state.root
        if entry.is_directory:
            self._set_pane(loading_lines(self.theme), loading=True)
            self.scheduler.submit(CHANNEL_PREVIEW, key, lambda: build_directory_preview(full_path, root))
            return

        if is_summarizable(entry.path) or is_executable_file(full_path, windows=self.windows):
            self._set_pane(loading_lines(self.theme), loading=True)
            relative = os.path.relpath(full_path, root)
            summarizer = self.summarizer
            width = state.pane_width
            self.scheduler.submit(CHANNEL_SUMMARY, key, lambda: summarizer.summarize(relative, markdown_width=width))
            return

        self.show_message(unsupported_file_message(entry.path))

    def apply_result(self, result: TaskResult) -> bool:
        """Apply one completion unless it is stale; return whether it applied."""
        request = result.request
        if request.channel == CHANNEL_LISTING:
            if request.tag != str(self.state.current_directory):
                logger.debug("dropping stale listing for %s", request.tag)
                return False
            self._apply_listing(result.payload)
            return True

        if request.tag != self.state.selected_path:
            logger.debug("dropping stale %s result for %s", request.channel, request.tag)
            return False
        if request.channel == CHANNEL_SUMMARY:
            self.show_summary(result.payload)
        else:
            self.show_message(str(result.payload))
        return True

    def _apply_listing(self, entries: list[Entry]) -> None:
        state = self.state
        if state.listed_directory != state.current_directory:
            state.cursor = 0
            state.search_query = ""
            state.search_mode = False
        state.listed_directory = state.current_directory
        state.all_entries = list(entries)
        state.filtered_entries = filter_entries(state.all_entries, state.search_query)
        state.dirty = True
        self.sync_selection()

    # searching
    def _refilter(self) -> None:
        self.state.filtered_entries = filter_entries(self.state.all_entries, self.state.search_query)
        self.state.cursor = 0
        self.state.dirty = True
        self.sync_selection()

    def enter_search(self) -> None:
        self.state.search_mode = True
        self.state.search_query = ""
        self._refilter()

    def _handle_search_key(self, key: str) -> None:
        state = self.state
        if key == "ESC":
            state.search_mode = False
            state.search_query = ""
            self._refilter()
        elif key == "ENTER":
            state.search_mode = False
            state.dirty = True
        elif key == "BACKSPACE":
            if state.search_query:
                state.search_query = state.search_query[:-1]
                self._refilter()
        elif key == "UP":
            self.move_cursor(-1)
        elif key == "DOWN":
            self.move_cursor(1)
        elif is_printable_key(key):
            state.search_query += key
            self._refilter()

    # browsing
    def move_cursor(self, delta: int) -> None:
        self.state.cursor += delta
        self.state.dirty = True
        self.sync_selection()

    def jump_cursor(self, to_end: bool) -> None:
        self.state.cursor = max(0, len(self.visible_entries()) - 1) if to_end else 0
        self.state.dirty = True
        self.sync_selection()

    def toggle_directories(self) -> None:
        current = self.current_entry()
        self.state.show_dirs = not self.state.show_dirs
        visible = self.visible_entries()
        if current is not None and current in visible:
            self.state.cursor = visible.index(current)
        self.state.dirty = True
        self.sync_selection()

    def refresh(self) -> None:
        self.request_listing()

    def open_selected(self) -> None:
        """Descend into the selected directory or go up for ``..``."""
        entry = self.current_entry()
        if entry is None or not entry.is_directory:
            return
        state = self.state
        if entry.is_parent:
            state.current_directory = state.current_directory.parent
        else:
            state.current_directory = state.current_directory / entry.path
        state.all_entries = []
        state.filtered_entries = []
        state.cursor = 0
        state.dirty = True
        self.sync_selection()
        self.request_listing()

    def quit(self) -> None:
        self.state.running = False

    def _handle_browse_key(self, key: str) -> None:
        if key == "q":
            self.quit()
        elif key == "/":
            self.enter_search()
        elif key in {"UP", "k"}:
            self.move_cursor(-1)
        elif key in {"DOWN", "j"}:
            self.move_cursor(1)
        elif key == "CTRL_U":
            self.move_cursor(-CURSOR_PAGE_STEP)
        elif key == "CTRL_D":
            self.move_cursor(CURSOR_PAGE_STEP)
        elif key in {"HOME", "g"}:
            self.jump_cursor(to_end=False)
        elif key in {"END", "G"}:
            self.jump_cursor(to_end=True)
        elif key == "PAGE_UP":
            self.scroll_summary(-SUMMARY_PAGE_STEP)
        elif key == "PAGE_DOWN":
            self.scroll_summary(SUMMARY_PAGE_STEP)
        elif key == "K":
            self.scroll_summary(-1)
        elif key == "J":
            self.scroll_summary(1)
        elif key == "t":
            self.toggle_directories()
        elif key == "r":
            self.refresh()
        elif key == "ENTER":
            self.open_selected()

    def handle_key(self, key: str) -> None:
        if key == "CTRL_C":
            self.quit()
            return
        if self.state.search_mode:
            self._handle_search_key(key)
        else:
            self._handle_browse_key(key)


__all__ = [
    "CURSOR_PAGE_STEP",
    "MODE_BROWSING",
    "MODE_SEARCHING",
    "NavigationController",
    "NavigationState",
    "SUMMARY_PAGE_STEP",
    "list_or_empty",
]
