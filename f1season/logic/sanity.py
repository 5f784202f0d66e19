from __future__ import annotations

import copy
import logging
import random
from typing import Any

from .. import config
from ..errors import StateValidationError
from ..io.artifacts import utcstamp
from ..mappings import ENTITY_ID_FIELDS, NEW_GAME_META, NEW_PLAYER, TIMELINES, WELCOME_MAIL
from .season import max_result_round, read_pointer
from .standings import refresh_standings

log = logging.getLogger(__name__)


def _has_rows(v: Any) -> bool:
    return isinstance(v, list) and len(v) > 0


def ensure_scaffold(state: dict) -> list[str]:
    """Repair the parts of a loaded save the engine relies on.

    Returns a description of every repair; an empty list means the state was
    already well-formed and has not been touched.
    """
    repairs: list[str] = []

    if not isinstance(state.get("meta"), dict):
        state["meta"] = {}
        repairs.append("meta: created")
    meta = state["meta"]
    for key, default in NEW_GAME_META.items():
        if meta.get(key) is None:
            meta[key] = default
            repairs.append(f"meta.{key}: defaulted to {default!r}")

    if meta.get("timeline") not in TIMELINES:
        repairs.append(f"meta.timeline: {meta.get('timeline')!r} replaced with 'preseason'")
        meta["timeline"] = "preseason"

    # Repairs may raise the pointer but never lower a usable one.
    pointer = meta.get("last_completed_round")
    target = max(read_pointer(state) or 0, max_result_round(state))
    if isinstance(pointer, bool) or not isinstance(pointer, int) or pointer != target:
        repairs.append(f"meta.last_completed_round: {pointer!r} set to {target}")
        meta["last_completed_round"] = target

    if not isinstance(state.get("stats"), dict):
        state["stats"] = {}
        repairs.append("stats: created")
    stats = state["stats"]
    if not isinstance(stats.get("race_results"), list):
        stats["race_results"] = []
        repairs.append("stats.race_results: created")

    cached = (stats.get("driver_standings"), stats.get("constructor_standings"))
    nothing_to_derive = not stats["race_results"] and all(isinstance(c, list) for c in cached)
    if not all(_has_rows(c) for c in cached) and not nothing_to_derive:
        standings = refresh_standings(state)
        repairs.append(
            f"stats standings: recomputed ({len(standings.drivers)} drivers, {len(standings.teams)} teams)"
        )

    for r in repairs:
        log.info("Repaired %s", r)
    return repairs


def first_run_init(state: dict, *, seed: int = config.FIRST_RUN_SEED) -> list[str]:
    """Set up a brand new game started from the seed.

    Adds the rookie player profile and a welcome mail, then nudges some pending
    rumours to gaining_traction. The nudge draws from an RNG seeded with
    `seed`, one draw per pending rumour, so the same seed always picks the
    same rumours. Returns the ids of the rumours that moved.
    """
    meta = state.setdefault("meta", {})
    meta["player"] = copy.deepcopy(NEW_PLAYER)
    meta["selected_team"] = None

    stats = state.setdefault("stats", {})
    if not isinstance(stats.get("boardroom_drama"), list):
        stats["boardroom_drama"] = []
    stats["boardroom_drama"].append({"ts": utcstamp(), **WELCOME_MAIL})

    rng = random.Random(seed)
    nudged: list[str] = []
    for r in state.get("rumours") or []:
        if not isinstance(r, dict) or r.get("status") != "pending":
            continue
        if rng.random() > config.RUMOUR_NUDGE_THRESHOLD:
            r["status"] = "gaining_traction"
            nudged.append(str(r.get("rumour_id")))

    log.info("First run: player %s, %d rumour(s) gaining traction", NEW_PLAYER["id"], len(nudged))
    return nudged


def _check_unique(state: dict, problems: list[str]) -> None:
    for kind, id_field in ENTITY_ID_FIELDS.items():
        seen: set[str] = set()
        for e in state.get(kind) or []:
            if not isinstance(e, dict) or e.get(id_field) in (None, ""):
                continue
            key = str(e[id_field])
            if key in seen:
                problems.append(f"duplicate {kind} id '{key}'")
            seen.add(key)


def validate_state(state: dict) -> dict:
    """Check id uniqueness and cross references; raise StateValidationError listing all problems."""
    problems: list[str] = []
    if not isinstance(state, dict):
        raise StateValidationError(["state must be a mapping"])
    for kind in ENTITY_ID_FIELDS:
        if state.get(kind) is not None and not isinstance(state.get(kind), list):
            problems.append(f"{kind} must be a list")
    if problems:
        raise StateValidationError(problems)

    _check_unique(state, problems)

    teams = {str(t.get("team_id")) for t in state.get("teams") or [] if isinstance(t, dict)}
    drivers = {str(d.get("driver_id")) for d in state.get("drivers") or [] if isinstance(d, dict)}
    engineers = {str(e.get("re_id")) for e in state.get("engineers") or [] if isinstance(e, dict)}
    principals = {str(p.get("tp_id")) for p in state.get("principals") or [] if isinstance(p, dict)}

    for d in state.get("drivers") or []:
        if isinstance(d, dict) and str(d.get("team")) not in teams:
            problems.append(f"driver {d.get('driver_id')} has unknown team {d.get('team')}")
    for t in state.get("teams") or []:
        if not isinstance(t, dict):
            continue
        for did in t.get("drivers") or []:
            if str(did) not in drivers:
                problems.append(f"team {t.get('team_id')} lists unknown driver {did}")
        for rid in t.get("race_engineers") or []:
            if rid and str(rid) not in engineers:
                problems.append(f"team {t.get('team_id')} lists unknown engineer {rid}")
        if principals and str(t.get("team_principal")) not in principals:
            problems.append(f"team {t.get('team_id')} has unknown principal {t.get('team_principal')}")
    for e in state.get("engineers") or []:
        if not isinstance(e, dict):
            continue
        if str(e.get("driver")) not in drivers:
            problems.append(f"engineer {e.get('re_id')} has unknown driver {e.get('driver')}")
        if str(e.get("team")) not in teams:
            problems.append(f"engineer {e.get('re_id')} has unknown team {e.get('team')}")

    if problems:
        raise StateValidationError(problems)
    return state
