"""Settings file I/O for appearance-theme.

Manages a JSON settings file at XDG_CONFIG_HOME/appearance-theme/settings.json.
Candidate lists, the enabled flag and the apply command live here; recent
choices do not (they belong to the preference store).

This module is a STABLE BOUNDARY.
Import as: import appearance_theme.io.settings
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Optional

from appearance_theme.io.blob_store import FileBlobStore

logger = logging.getLogger(__name__)

APP_NAME = "appearance-theme"

# [LAW:one-source-of-truth] All known settings and their defaults.
SCHEMA: dict[str, object] = {
    "enabled": True,
    "candidates": {"light": [], "dark": []},
    "apply_command": None,
    "preferences_path": None,
}


def get_config_path() -> Path:
    """Return path to settings file.

    Uses XDG_CONFIG_HOME (default ~/.config) / appearance-theme / settings.json.
    """
    config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(config_home) / APP_NAME / "settings.json"


def get_state_path(settings: Optional[dict] = None) -> Path:
    """Return path to the persisted preference record.

    Precedence: settings["preferences_path"], $APPEARANCE_THEME_STATE,
    XDG_STATE_HOME (default ~/.local/state) / appearance-theme / preferences.json.
    """
    configured = (settings or {}).get("preferences_path")
    if configured:
        return Path(os.path.expanduser(str(configured)))
    env_path = os.environ.get("APPEARANCE_THEME_STATE")
    if env_path:
        return Path(os.path.expanduser(env_path))
    state_home = os.environ.get("XDG_STATE_HOME", os.path.expanduser("~/.local/state"))
    return Path(state_home) / APP_NAME / "preferences.json"


def load_settings() -> dict:
    """Load settings from JSON file. Returns empty dict on missing/corrupt file."""
    path = get_config_path()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: top level is not an object", path)
        return {}
    return data


def load_effective_settings() -> dict:
    """Settings with schema defaults filled in for missing keys."""
    disk_data = load_settings()
    return {k: disk_data.get(k, copy.deepcopy(default)) for k, default in SCHEMA.items()}


def save_settings(data: dict) -> None:
    """Atomic write of settings dict to JSON file. Raises OSError on failure."""
    payload = json.dumps(data, indent=2) + "\n"
    FileBlobStore(get_config_path()).write(payload.encode("utf-8"))


def save_setting(key: str, value) -> None:
    """Save a single setting by key (merge into existing settings)."""
    data = load_settings()
    data[key] = value
    save_settings(data)


def safe_save_setting(key: str, value) -> bool:
    """save_setting that logs I/O errors instead of raising."""
    try:
        save_setting(key, value)
    except OSError:
        logger.exception("Failed to persist setting %r", key)
        return False
    return True
