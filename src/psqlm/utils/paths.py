"""File locations for psqlm state."""

from __future__ import annotations

from pathlib import Path

import platformdirs

APP_NAME = "psqlm"


def get_config_dir() -> Path:
    """Directory holding config.toml."""
    return Path(platformdirs.user_config_dir(appauthor=False)) / APP_NAME


def get_config_path() -> Path:
    """Path to the TOML configuration file."""
    return get_config_dir() / "config.toml"


def get_history_path() -> Path:
    """Path to the readline history file."""
    return Path(platformdirs.user_data_dir(appauthor=False)) / APP_NAME / "history.txt"
