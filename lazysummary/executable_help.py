"""Executable help text.

Runs the target once per candidate help flag, each attempt bounded by a
timeout, and keeps the first attempt that exits cleanly with output. Timeouts
and launch failures just mean "try the next flag"; when every flag fails a
synthesized description is returned instead.
"""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import threading
from pathlib import Path

from .summary import format_bytes

logger = logging.getLogger(__name__)

HELP_FLAGS: tuple[str, ...] = ("--help", "-h", "help", "/?")
HELP_TIMEOUT_SECONDS = 3.0
HELP_MAX_LINES = 25
TRUNCATION_MARKER = "... (truncated)"
SELF_BINARY_NAMES = frozenset({"lazysummary", "lazysummary.exe"})

SELF_USAGE = """Usage: lazysummary [directory]

Navigate and summarize files in a terminal-based interface.

Examples:
  lazysummary                    # Browse the current directory
  lazysummary ~/code/project     # Browse ~/code/project
  lazysummary "My Documents"     # Quote paths with spaces

lazysummary is a terminal file summarizer that provides:
- Split-screen interface with file navigation
- Multi-language source code analysis
- Markdown rendering
- Configuration file parsing
- Directory navigation and fuzzy search

Keyboard Controls:
  Up/Down or k/j    Navigate file list
  Enter             Enter directory
  /                 Fuzzy search (Enter keeps filter, Esc clears)
  PgUp/PgDn         Scroll summary content
  Home/End          Jump to first/last file
  t                 Toggle directory visibility
  r                 Refresh current directory
  q or Ctrl+C       Quit"""


def truncate_output(output: str, max_lines: int = HELP_MAX_LINES) -> str:
    lines = output.split("\n")
    if len(lines) > max_lines:
        lines = lines[:max_lines]
        lines.append(TRUNCATION_MARKER)
    return "\n".join(lines)


def kill_process_tree(process: subprocess.Popen) -> None:
    """Kill a help child together with anything it spawned."""
    try:
        if os.name == "nt":
            process.kill()
        else:
            os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        logger.debug("help child pid %d already gone", process.pid)


class HelpProcesses:
    """Help-flag children that are still running.

    They run on worker threads; ``close`` is called from the event loop
    on exit and kills whatever is running so no worker stays blocked on a
    child. Once closed, no new child is started.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._running: set[subprocess.Popen] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def running_count(self) -> int:
        with self._lock:
            return len(self._running)

    def spawn(self, argv: list[str]) -> subprocess.Popen | None:
        """Start ``argv`` in its own process group, or return ``None`` once closed."""
        with self._lock:
            if self._closed:
                return None
            process = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                start_new_session=os.name != "nt",
            )
            self._running.add(process)
            return process

    def release(self, process: subprocess.Popen) -> None:
        with self._lock:
            self._running.discard(process)

    def close(self) -> None:
        with self._lock:
            self._closed = True
            running = list(self._running)
            self._running.clear()
        for process in running:
            logger.info("killing help child pid %d on shutdown", process.pid)
            kill_process_tree(process)


def _run_help_flag(path: Path, flag: str, timeout: float, processes: HelpProcesses) -> str | None:
    try:
        process = processes.spawn([str(path), flag])
    except (OSError, ValueError) as exc:
        logger.debug("help run %s %s failed to start: %s", path, flag, exc)
        return None
    if process is None:
        return None

    try:
        stdout, _ = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.debug("help run %s %s timed out after %.1fs", path, flag, timeout)
        kill_process_tree(process)
        process.communicate()
        return None
    finally:
        processes.release(process)

    if process.returncode != 0 or not stdout:
        return None
    return stdout.decode("utf-8", errors="replace")


def fallback_description(path: Path) -> str:
    try:
        size_text = format_bytes(path.stat().st_size)
    except OSError:
        size_text = "unknown"
    flags = ", ".join(HELP_FLAGS)
    return (
        f"Executable: {path.name}\n\n"
        "This is an executable file.\n"
        f"Help flags ({flags}) did not produce output.\n\n"
        f"File size: {size_text}\n"
        "Type: Binary executable"
    )


def fetch_help(
    path: Path,
    timeout: float = HELP_TIMEOUT_SECONDS,
    flags: tuple[str, ...] = HELP_FLAGS,
    processes: HelpProcesses | None = None,
) -> str:
    """Return help text for the executable at ``path``.

    This program's own binary is never executed; its usage text is returned
    directly. Children are tracked in ``processes`` so a shutdown can kill
    them; once it is closed the remaining flags are skipped.
    """
    if path.name in SELF_BINARY_NAMES:
        return SELF_USAGE

    if processes is None:
        processes = HelpProcesses()
    for flag in flags:
        if processes.closed:
            break
        output = _run_help_flag(path, flag, timeout, processes)
        if output and output.strip():
            logger.debug("%s answered to %s", path, flag)
            return truncate_output(output)
    return fallback_description(path)
