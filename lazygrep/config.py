"""Persistent JSON config helpers.

Stores the theme, editor choice, context viewer layout and default search
flags. All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "lazygrep"
CONFIG_FILENAME = "config.json"
CONFIG_ENV = "LAZYGREP_CONFIG"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

BOOL_KEYS = ("smart_case", "ignore_case", "hidden", "follow", "word_regexp", "no_ignore")
STRING_KEYS = ("theme", "editor", "custom_command", "context_viewer", "sort", "sortr")
LIST_KEYS = ("glob", "type", "type_not")


def config_path() -> Path:
    override = os.environ.get(CONFIG_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    path = config_path()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning(f"Ignoring unreadable config {path}: {exc}")
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored.
    """
    path = config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning(f"Cannot write config {path}: {exc}")


def search_defaults(data: dict[str, object] | None = None) -> dict[str, object]:
    """Validated subset of config values usable as CLI defaults.

    Values of the wrong JSON type are dropped.
    """
    data = load_config() if data is None else data
    defaults: dict[str, object] = {}
    for key in BOOL_KEYS:
        value = data.get(key)
        if isinstance(value, bool):
            defaults[key] = value
    for key in STRING_KEYS:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            defaults[key] = value.strip()
    for key in LIST_KEYS:
        value = data.get(key)
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            defaults[key] = list(value)
    return defaults


def save_theme_name(theme_name: str) -> None:
    stripped = str(theme_name).strip()
    if not stripped:
        return
    config = load_config()
    config["theme"] = stripped
    save_config(config)
