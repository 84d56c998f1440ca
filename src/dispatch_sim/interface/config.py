"""
User configuration persistence.

Stores engine and display settings in a JSON file next to the saves.
"""

import json
import logging
from pathlib import Path
from typing import TypedDict

logger = logging.getLogger(__name__)


class Config(TypedDict, total=False):
    """User configuration."""
    time_scale_ms: float  # Milliseconds per mission time unit
    tick_interval: float  # Seconds between ticks in the watch loop
    completion_display_ms: float  # How long completed missions stay listed
    enforce_team_limits: bool  # Refuse deployments that break team rules


DEFAULT_CONFIG: Config = {
    "time_scale_ms": 1000,
    "tick_interval": 1.0,
    "completion_display_ms": 15000,
    "enforce_team_limits": True,
}


def get_config_path(data_dir: Path | str = "saves") -> Path:
    """Get path to config file."""
    return Path(data_dir) / ".dispatch_config.json"


def load_config(data_dir: Path | str = "saves") -> Config:
    """Load config from file, or return defaults if not found."""
    path = get_config_path(data_dir)

    if not path.exists():
        return DEFAULT_CONFIG.copy()

    try:
        with open(path, "r", encoding="utf-8") as f:
            saved = json.load(f)
        # Merge with defaults to handle missing keys
        config = DEFAULT_CONFIG.copy()
        config.update({k: v for k, v in saved.items() if k in DEFAULT_CONFIG})
        return config
    except (json.JSONDecodeError, OSError, AttributeError) as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return DEFAULT_CONFIG.copy()


def save_config(config: Config, data_dir: Path | str = "saves") -> bool:
    """Save config to file. Returns True on success."""
    path = get_config_path(data_dir)

    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        return True
    except OSError as e:
        logger.error(f"Could not save config to {path}: {e}")
        return False


def parse_value(key: str, raw: str):
    """Convert a command-line string to the type of the config key."""
    if key not in DEFAULT_CONFIG:
        raise KeyError(key)
    default = DEFAULT_CONFIG[key]
    if isinstance(default, bool):
        lowered = raw.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
        raise ValueError(f"Expected a boolean for {key}, got {raw!r}")
    return float(raw)


def set_option(key: str, raw: str, data_dir: Path | str = "saves") -> Config:
    """Parse and save a single option. Returns the updated config."""
    config = load_config(data_dir)
    config[key] = parse_value(key, raw)
    save_config(config, data_dir)
    return config
