"""Settings persistence — data directory and settings.json."""

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path

logger = logging.getLogger("nmwifi.config")

DATA_DIR_ENV = "NMWIFI_DATA_DIR"
SETTINGS_FILE = "settings.json"


@dataclass
class Settings:
    language: str = "en"
    show_hidden: bool = False
    connect_timeout: float = 30.0
    status_clear_delay: float = 3.0


def data_dir() -> Path:
    """Directory for settings and cache, resolved on every call."""
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override)
    return Path.home() / ".config" / "nmwifi"


def settings_path() -> Path:
    return data_dir() / SETTINGS_FILE


def _load_raw() -> dict:
    path = settings_path()
    if path.exists():
        try:
            with open(path) as f:
                data = json.load(f)
            if isinstance(data, dict):
                return data
            logger.warning(f"Ignoring {path}: not a JSON object")
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not read {path}: {e}")
    return {}


def load_settings() -> Settings:
    """Read settings.json; missing, corrupt or mistyped values fall back to defaults."""
    raw = _load_raw()
    settings = Settings()
    for f in fields(Settings):
        if f.name not in raw:
            continue
        value = raw[f.name]
        default = getattr(settings, f.name)
        if isinstance(default, bool):
            if isinstance(value, bool):
                setattr(settings, f.name, value)
        elif isinstance(default, float):
            if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
                setattr(settings, f.name, float(value))
        elif isinstance(value, str):
            setattr(settings, f.name, value)
    return settings


def save_setting(key: str, value) -> None:
    settings = _load_raw()
    settings[key] = value
    path = settings_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(settings, f, indent=2)
    except OSError as e:
        logger.warning(f"Could not save setting '{key}' to {path}: {e}")
