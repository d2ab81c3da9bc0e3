"""Configuration for disciplog.

Settings live in ``~/.config/disciplog/config.toml``. The directory can be
moved with the ``DISCIPLOG_HOME`` environment variable.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Optional

import toml

logger = logging.getLogger(__name__)


DEFAULT_CONFIG = {
    "user": {
        "id": "local",
        "name": "",
    },
    "dashboard": {
        "score_trend_length": 14,
        "recent_sessions": 5,
        "pnl_window": "30d",
    },
    "session": {
        "default_max_trades": 5,
    },
    "logging": {
        "level": "WARNING",
    },
}


def get_config_dir() -> Path:
    """Get the configuration directory."""
    home = os.environ.get("DISCIPLOG_HOME")
    if home:
        return Path(home)
    return Path.home() / ".config" / "disciplog"


def get_config_path() -> Path:
    """Get the configuration file path."""
    return get_config_dir() / "config.toml"


def get_db_path() -> Path:
    """Get the database path."""
    return get_config_dir() / "disciplog.db"


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration merged over the defaults.

    A missing file yields the defaults. An unreadable file is logged and
    the defaults are used.

    Args:
        config_path: Optional path to the config file.

    Returns:
        Configuration dictionary.
    """
    path = config_path or get_config_path()

    if not path.exists():
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        return _merge(DEFAULT_CONFIG, toml.load(path))
    except (toml.TomlDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return copy.deepcopy(DEFAULT_CONFIG)


def create_template_config(config_path: Optional[Path] = None, user_name: str = "") -> Path:
    """Create a template configuration file.

    Args:
        config_path: Optional path to write to.
        user_name: Display name stored in the ``[user]`` section.

    Returns:
        Path of the written file.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    template = copy.deepcopy(DEFAULT_CONFIG)
    template["user"]["name"] = user_name

    with open(path, "w") as f:
        toml.dump(template, f)

    return path


def get_user_id(config: dict) -> str:
    """User the CLI acts for."""
    return str(config.get("user", {}).get("id") or DEFAULT_CONFIG["user"]["id"])
