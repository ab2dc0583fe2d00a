from __future__ import annotations
import json
from datetime import datetime
from pathlib import Path
from typing import Dict


SETTINGS_PATH: Path | None = None


def init_settings(path: Path) -> None:
    global SETTINGS_PATH
    SETTINGS_PATH = path
    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists():
        save_settings(default_settings())


def default_settings() -> Dict:
    return {
        "last_sync_time": None,
        "last_sync_count": None,
    }


def get_settings() -> Dict:
    assert SETTINGS_PATH is not None
    try:
        data = json.loads(SETTINGS_PATH.read_text())
    except (OSError, ValueError):
        return default_settings()
    base = default_settings()
    base.update(data or {})
    return base


def save_settings(data: Dict) -> None:
    assert SETTINGS_PATH is not None
    SETTINGS_PATH.write_text(json.dumps(data, indent=2))


def get_sync_metadata() -> Dict:
    s = get_settings()
    return {"last_sync_time": s.get("last_sync_time"), "last_sync_count": s.get("last_sync_count")}


def upsert_sync_metadata(last_sync_time: datetime, last_sync_count: int) -> None:
    """Overwrite the single sync record; earlier runs are not kept."""
    s = get_settings()
    s["last_sync_time"] = last_sync_time.isoformat()
    s["last_sync_count"] = int(last_sync_count)
    save_settings(s)
