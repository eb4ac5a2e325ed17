"""Last-known network list, read once at startup for the first paint."""

import json
import logging
from datetime import datetime
from pathlib import Path

from nmwifi.core.config import data_dir
from nmwifi.core.models import AccessPoint

logger = logging.getLogger("nmwifi.cache")

CACHE_FILE = "networks_cache.json"


def cache_path() -> Path:
    return data_dir() / CACHE_FILE


def load_cached_access_points() -> list[AccessPoint] | None:
    """Return the cached scan, or None if there is none or it cannot be read."""
    path = cache_path()
    if not path.exists():
        return None
    try:
        with open(path) as f:
            data = json.load(f)
        aps = [AccessPoint.from_dict(item) for item in data.get("access_points", [])]
    except (json.JSONDecodeError, OSError, AttributeError, TypeError, ValueError) as e:
        logger.warning(f"Ignoring unreadable network cache {path}: {e}")
        return None
    logger.debug(f"Loaded {len(aps)} cached access points from {data.get('_last_updated', '?')}")
    return aps


def save_cached_access_points(aps: list[AccessPoint]) -> None:
    path = cache_path()
    data = {
        "_last_updated": datetime.now().isoformat(),
        "access_points": [ap.to_dict() for ap in aps],
    }
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
    except OSError as e:
        logger.warning(f"Could not write network cache {path}: {e}")
