from __future__ import annotations

import logging
import math
from typing import Any

from ..models import as_number, parse_round

log = logging.getLogger(__name__)


def _calendar(state: dict) -> list[tuple[int, dict]]:
    entries = state.get("calendar")
    out = []
    for c in entries if isinstance(entries, list) else []:
        rnd = parse_round(c.get("round")) if isinstance(c, dict) else None
        if rnd is not None:
            out.append((rnd, c))
    return sorted(out, key=lambda rc: rc[0])


def max_result_round(state: dict) -> int:
    stats = state.get("stats") if isinstance(state.get("stats"), dict) else {}
    results = stats.get("race_results")
    best = 0
    for r in results if isinstance(results, list) else []:
        rnd = parse_round(r.get("round")) if isinstance(r, dict) else None
        if rnd is not None and rnd > best:
            best = rnd
    return best


def completed_round(state: dict) -> int:
    pointer = read_pointer(state) or 0
    return max(pointer, max_result_round(state))


def season_complete(state: dict) -> bool:
    done = completed_round(state)
    return bool(_calendar(state)) and all(rnd <= done for rnd, _ in _calendar(state))


def next_race(state: dict) -> dict[str, Any] | None:
    """Calendar entry with the lowest round after the last completed one.

    When every round is done this wraps to the first round of the calendar.
    """
    calendar = _calendar(state)
    if not calendar:
        return None
    done = completed_round(state)
    for rnd, entry in calendar:
        if rnd > done:
            return entry
    log.warning("No round after %d on the calendar; wrapping to round %d", done, calendar[0][0])
    return calendar[0][1]


def advance_round(state: dict) -> bool:
    """Raise meta.last_completed_round to the highest stored result round.

    The pointer never moves backwards. The first time it passes zero a
    preseason save flips to inseason. Returns True when meta changed.
    """
    if not isinstance(state.get("meta"), dict):
        state["meta"] = {}
    meta = state["meta"]
    current = read_pointer(state) or 0
    target = max(current, max_result_round(state))
    changed = False
    if target != meta.get("last_completed_round"):
        meta["last_completed_round"] = target
        changed = True
    if target > 0 and meta.get("timeline") == "preseason":
        meta["timeline"] = "inseason"
        changed = True
    if changed:
        log.info("Season pointer at round %d (%s)", target, meta.get("timeline"))
    return changed


def read_pointer(state: dict) -> int | None:
    """meta.last_completed_round as a non-negative int; None when unusable.

    "3" and 3.0 both read as 3; fractional rounds are floored.
    """
    meta = state.get("meta") if isinstance(state.get("meta"), dict) else {}
    n = as_number(meta.get("last_completed_round"))
    return None if n is None else max(0, math.floor(n))


def hold_pointer(state: dict, floor: int | None) -> bool:
    """Put meta.last_completed_round back to floor if a write moved it below.

    Returns True when the pointer had to be restored.
    """
    if floor is None:
        return False
    after = read_pointer(state)
    if after is not None and after >= floor:
        return False
    if not isinstance(state.get("meta"), dict):
        state["meta"] = {}
    log.warning("Refusing to move last_completed_round from %d to %r", floor, state["meta"].get("last_completed_round"))
    state["meta"]["last_completed_round"] = floor
    return True
