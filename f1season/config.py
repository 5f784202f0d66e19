from __future__ import annotations

from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]

STATE_DIR = BASE_DIR / "state"
HISTORY_DIR = STATE_DIR / "history"
SEED_DIR = BASE_DIR / "seed"

SAVE_FILE = STATE_DIR / "game_state.json"
LAST_REPLY_FILE = STATE_DIR / "last_reply.json"

PATCH_KIND = "patch-v1"
LEGACY_PATCH_TYPE = "ccsf_ops_v1"

BUNDLE_TYPE = "ccsf_bundle_v1"
BUNDLE_VERSION = "2025.0.1"

# Numeric writes under this segment are clamped to [CAR_ATTR_MIN, CAR_ATTR_MAX].
VEHICLE_SEGMENT = "car"
CAR_ATTR_MIN = 0
CAR_ATTR_MAX = 100

# First-run flavour for a game started from the seed directory.
FIRST_RUN_SEED = 20250301
RUMOUR_NUDGE_THRESHOLD = 0.86
