"""Persistent JSON settings helpers.

Stores hidden-file/icon preferences and the MIME rule table.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

from ..settings import Settings

logger = logging.getLogger(__name__)

APP_NAME = "millerbrowse"
CONFIG_FILENAME = "settings.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
LEGACY_CONFIG_PATH = Path.home() / ".browse"
CONFIG_PATH = DEFAULT_CONFIG_PATH


def _load_config_path() -> Path:
    """Return preferred config path, falling back to legacy location when needed."""
    if CONFIG_PATH.exists():
        return CONFIG_PATH
    if CONFIG_PATH == DEFAULT_CONFIG_PATH and LEGACY_CONFIG_PATH.is_file():
        return LEGACY_CONFIG_PATH
    return CONFIG_PATH


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = _load_config_path()
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", config_path, exc, extra={"context": "Settings"})
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem/serialization errors are logged and otherwise ignored so that
    shutdown never fails because settings could not be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("Failed to save settings to %s: %s", CONFIG_PATH, exc, extra={"context": "Settings"})


def load_settings() -> Settings:
    """Return persisted settings, or built-in defaults when nothing usable is stored."""
    return Settings.from_dict(load_config())


def save_settings(settings: Settings) -> None:
    """Persist ``settings``, keeping unrelated keys already present in the file."""
    config = load_config()
    config.pop("mime_types", None)
    config.update(settings.to_dict())
    save_config(config)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "DEFAULT_CONFIG_PATH",
    "LEGACY_CONFIG_PATH",
    "load_config",
    "save_config",
    "load_settings",
    "save_settings",
]
