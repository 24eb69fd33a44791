"""Logging setup for the full-screen UI.

The terminal is in raw alternate-screen mode while the browser runs, so log
records go to a file or nowhere.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

LOG_ENV_VAR = "LAZYSUMMARY_LOG"
LOG_FORMAT = "%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s"


def resolve_log_file(cli_value: str | None) -> Path | None:
    """Pick the log destination: CLI flag first, then ``LAZYSUMMARY_LOG``."""
    raw = cli_value or os.environ.get(LOG_ENV_VAR, "")
    raw = raw.strip()
    return Path(raw).expanduser() if raw else None


def configure_logging(log_file: Path | None, debug: bool = False) -> logging.Logger:
    """Attach a single handler to the package logger and return it."""
    package_logger = logging.getLogger("lazysummary")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    if log_file is None:
        package_logger.addHandler(logging.NullHandler())
    else:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(file_handler)

    package_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    package_logger.propagate = False
    return package_logger
