from __future__ import annotations

import datetime as _dt
import json
import logging
import re
import shutil
from pathlib import Path
from typing import Any

from .. import config

log = logging.getLogger(__name__)


def utcstamp() -> str:
    # timezone-aware UTC timestamp (avoids datetime.utcnow() deprecation warnings)
    return _dt.datetime.now(_dt.timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def safe_filename(s: str) -> str:
    s = re.sub(r"[^A-Za-z0-9._-]+", "_", s or "")
    return s.strip("_") or "file"


def read_json(path: Path, default: Any = None) -> Any:
    if not path.exists():
        return default
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def write_json(path: Path, obj: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, sort_keys=True, ensure_ascii=False)
        f.write("\n")
    tmp.replace(path)


def ensure_state_dirs(state_dir: Path | None = None) -> None:
    base = state_dir or config.STATE_DIR
    for d in (base, base / config.HISTORY_DIR.name):
        d.mkdir(parents=True, exist_ok=True)


def save_state(state: dict, path: Path | None = None, *, history: bool = True) -> Path:
    """Write the live state and keep a timestamped copy under history/."""
    path = path or config.SAVE_FILE
    write_json(path, state)
    if history:
        hist_dir = path.parent / config.HISTORY_DIR.name
        hist_dir.mkdir(parents=True, exist_ok=True)
        meta = state.get("meta") if isinstance(state.get("meta"), dict) else {}
        name = f"{path.stem}_{safe_filename(utcstamp())}_r{meta.get('last_completed_round', 0)}.json"
        shutil.copy2(path, hist_dir / name)
    return path


def load_state(path: Path | None = None) -> dict | None:
    """Return the saved state, or None when there is no usable save."""
    path = path or config.SAVE_FILE
    try:
        state = read_json(path, default=None)
    except json.JSONDecodeError as e:
        log.warning("Ignoring unreadable save %s: %s", path, e)
        return None
    if not isinstance(state, dict):
        return None
    meta = state.get("meta")
    if not isinstance(meta, dict) or not meta.get("season"):
        return None
    return state
