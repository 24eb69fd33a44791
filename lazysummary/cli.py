"""Command-line front door for lazysummary.

Parses CLI options, sets up logging and settings, validates the browse root
and then either prints one summary or starts the interactive browser.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .app import run_app
from .config import load_settings
from .logs import configure_logging, resolve_log_file
from .summarize import Summarizer, SummaryOptions
from .summary_view import format_summary
from .theme import theme_for


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazysummary",
        description="Navigate and summarize files in a terminal-based interface.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to browse. Defaults to current directory.")
    parser.add_argument("--style", default=None, help="Pygments style name for content previews.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--log-file", default=None, help="Append log records to this file.")
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level.")
    parser.add_argument("--summarize", metavar="FILE", help="Print the summary of FILE and exit.")
    return parser


def print_summary(target: Path, style: str, no_color: bool, markdown_width: int, help_timeout: float) -> None:
    """Summarize one file relative to its parent and write it to stdout."""
    target = target.resolve()
    summarizer = Summarizer(
        target.parent,
        SummaryOptions(help_timeout_seconds=help_timeout, markdown_width=markdown_width, no_color=no_color),
    )
    summary = summarizer.summarize(target.name)
    lines = format_summary(summary, theme_for(no_color), style=style, no_color=no_color)
    sys.stdout.write("\n".join(lines) + "\n")


def main(default_path: Path | None = None, argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch the browser on a directory.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used. A missing or non-directory path prints an error and
    exits with status 1.
    """
    args = build_parser().parse_args(argv)
    configure_logging(resolve_log_file(args.log_file), debug=args.debug)
    settings = load_settings().with_overrides(
        style=args.style,
        no_color=True if args.no_color else None,
    )

    if args.summarize is not None:
        target = Path(args.summarize).expanduser()
        if not target.is_file():
            print(f"File does not exist: {target}")
            raise SystemExit(1)
        print_summary(target, settings.style, settings.no_color, settings.markdown_width, settings.help_timeout_seconds)
        return

    if default_path is None:
        default_path = Path.cwd()
    root = Path(args.path).expanduser() if args.path else default_path
    root = root.absolute()
    if not root.exists():
        print(f"Directory does not exist: {root}")
        raise SystemExit(1)
    if not root.is_dir():
        print(f"Not a directory: {root}")
        raise SystemExit(1)
    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        print("lazysummary needs an interactive terminal (use --summarize FILE otherwise).")
        raise SystemExit(1)

    run_app(root.resolve(), settings, sys.stdin.fileno(), sys.stdout.fileno())


if __name__ == "__main__":
    main()
