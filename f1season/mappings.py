from __future__ import annotations

# Field names seen in generated race results, most specific first.
FINISHER_LIST_KEYS: tuple[str, ...] = ("finishers", "classification", "results")
FINISHER_DRIVER_KEYS: tuple[str, ...] = ("driver", "name", "driver_name", "driver_id")
FINISHER_TEAM_KEYS: tuple[str, ...] = ("team", "team_name", "constructor")
FINISHER_POSITION_KEYS: tuple[str, ...] = ("position", "pos", "place")
FINISHER_POINTS_KEYS: tuple[str, ...] = ("points", "pts")

# Cached standing rows written by older saves or by the generator itself.
STANDING_DRIVER_KEYS: tuple[str, ...] = ("driver", "name", "driver_name")
STANDING_TEAM_KEYS: tuple[str, ...] = ("team", "name", "team_name")

DEFAULT_POINTS_TABLE: dict[int, int] = {
    1: 25,
    2: 18,
    3: 15,
    4: 12,
    5: 10,
    6: 8,
    7: 6,
    8: 4,
    9: 2,
    10: 1,
}

NEW_GAME_META: dict[str, object] = {
    "season": 2025,
    "timeline": "preseason",
    "last_completed_round": 0,
}

TIMELINES: tuple[str, ...] = ("preseason", "inseason", "offseason")

NEW_PLAYER: dict[str, object] = {
    "id": "player_1",
    "name": "Rookie",
    "difficulty": "normal",
    "assists": ["pitlimiter", "autoERS"],
}

WELCOME_MAIL: dict[str, str] = {
    "type": "mail",
    "title": "Welcome to the Paddock",
    "body": "Tip: rumours are like tyres, so manage the heat.",
}

UNKNOWN_TEAM = "Unknown"

# Save-bundle module name -> state key.
BUNDLE_MODULE_TO_STATE: dict[str, str] = {
    "metadata": "meta",
    "regulations": "regulations",
    "sponsors": "sponsors",
    "teams": "teams",
    "drivers": "drivers",
    "principals": "principals",
    "engineers": "engineers",
    "calendar": "calendar",
    "development": "development",
    "rumours": "rumours",
    "stats": "stats",
}

# Entity list -> id field, used for uniqueness checks and list addressing in patch paths.
ENTITY_ID_FIELDS: dict[str, str] = {
    "teams": "team_id",
    "drivers": "driver_id",
    "principals": "tp_id",
    "engineers": "re_id",
    "calendar": "circuit_id",
    "rumours": "rumour_id",
}


def first_present(d: dict, keys: tuple[str, ...]):
    for k in keys:
        v = d.get(k)
        if v is not None and v != "":
            return v
    return None
