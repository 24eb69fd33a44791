"""Interactive event loop.

One thread owns the controller: it reads keys, drains background
completions and redraws when something changed.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from .config import Settings
from .controller import NavigationController
from .input import read_key
from .render import pane_rows, render_frame, split_widths
from .summarize import Summarizer, SummaryOptions
from .terminal import TerminalController
from .theme import UITheme, theme_for
from .workers import BackgroundScheduler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Polling intervals for the interactive loop."""

    key_timeout_ms: int = 50
    drain_timeout_seconds: float = 0.0


def build_controller(root: Path, settings: Settings, scheduler: BackgroundScheduler) -> NavigationController:
    summarizer = Summarizer(
        root,
        SummaryOptions(
            help_timeout_seconds=settings.help_timeout_seconds,
            markdown_width=settings.markdown_width,
            no_color=settings.no_color,
        ),
    )
    return NavigationController(
        root,
        scheduler,
        summarizer,
        show_dirs=settings.show_dirs,
        theme=theme_for(settings.no_color),
        style=settings.style,
        no_color=settings.no_color,
    )


def run_main_loop(
    controller: NavigationController,
    terminal: TerminalController,
    stdin_fd: int,
    theme: UITheme,
    timing: RuntimeLoopTiming = RuntimeLoopTiming(),
) -> None:
    """Run until the controller stops; the caller owns terminal mode."""
    state = controller.state
    last_size: tuple[int, int] | None = None
    while state.running:
        term = shutil.get_terminal_size((80, 24))
        size = (term.columns, term.lines)
        if size != last_size:
            last_size = size
            controller.set_viewport_height(pane_rows(term.lines))
            controller.set_pane_width(split_widths(term.columns)[1])
            state.dirty = True

        if controller.poll_background(timing.drain_timeout_seconds):
            state.dirty = True

        if state.dirty:
            terminal.write(render_frame(controller, term.columns, term.lines, theme))
            state.dirty = False

        key = read_key(stdin_fd, timeout_ms=timing.key_timeout_ms)
        if key:
            controller.handle_key(key)


def run_app(root: Path, settings: Settings, stdin_fd: int, stdout_fd: int) -> None:
    """Browse ``root`` full-screen until the user quits."""
    scheduler = BackgroundScheduler(max_workers=settings.max_workers)
    controller = build_controller(root, settings, scheduler)
    terminal = TerminalController(stdin_fd, stdout_fd)
    logger.info("browsing %s", root)
    controller.start()
    try:
        with terminal.raw_mode():
            run_main_loop(controller, terminal, stdin_fd, theme_for(settings.no_color))
    except KeyboardInterrupt:
        logger.info("interrupted")
    finally:
        scheduler.shutdown()
        controller.summarizer.processes.close()


__all__ = ["RuntimeLoopTiming", "build_controller", "run_app", "run_main_loop"]
