"""Read-only JSON settings.

Settings live in the platform config directory and are never written back:
the browser keeps no state between runs. All access is defensive, so a
missing, unreadable or malformed file falls back to defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "lazysummary"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_HELP_TIMEOUT_SECONDS = 3.0
DEFAULT_MARKDOWN_WIDTH = 80
MIN_MARKDOWN_WIDTH = 20
DEFAULT_MAX_WORKERS = 4
DEFAULT_STYLE = "monokai"


@dataclass(frozen=True)
class Settings:
    """Effective runtime settings after config and CLI overrides."""

    show_dirs: bool = True
    help_timeout_seconds: float = DEFAULT_HELP_TIMEOUT_SECONDS
    markdown_width: int = DEFAULT_MARKDOWN_WIDTH
    max_workers: int = DEFAULT_MAX_WORKERS
    style: str = DEFAULT_STYLE
    no_color: bool = False

    def with_overrides(self, **overrides: object) -> "Settings":
        """Return a copy with every non-``None`` override applied."""
        applied = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **applied) if applied else self


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path or CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", config_path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _bool_value(data: dict[str, object], key: str, default: bool) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


def _positive_float(data: dict[str, object], key: str, default: float) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value) if value > 0 else default


def _int_at_least(data: dict[str, object], key: str, minimum: int, default: int) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value if value >= minimum else default


def _nonempty_str(data: dict[str, object], key: str, default: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        return default
    stripped = value.strip()
    return stripped if stripped else default


def load_settings(path: Path | None = None) -> Settings:
    """Build ``Settings`` from the config file, validating each key."""
    data = load_config(path)
    return Settings(
        show_dirs=_bool_value(data, "show_dirs", True),
        help_timeout_seconds=_positive_float(data, "help_timeout_seconds", DEFAULT_HELP_TIMEOUT_SECONDS),
        markdown_width=_int_at_least(data, "markdown_width", MIN_MARKDOWN_WIDTH, DEFAULT_MARKDOWN_WIDTH),
        max_workers=_int_at_least(data, "max_workers", 1, DEFAULT_MAX_WORKERS),
        style=_nonempty_str(data, "style", DEFAULT_STYLE),
        no_color=_bool_value(data, "no_color", False),
    )
