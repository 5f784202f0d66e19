from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass, field
from typing import Any

from .mappings import (
    FINISHER_DRIVER_KEYS,
    FINISHER_LIST_KEYS,
    FINISHER_POINTS_KEYS,
    FINISHER_POSITION_KEYS,
    FINISHER_TEAM_KEYS,
    first_present,
)

_POSITION_RE = re.compile(r"^[Pp]?\s*(\d+)$")


def is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def as_number(v: Any) -> int | float | None:
    """Best-effort numeric coercion; None when v carries no usable number."""
    if is_number(v):
        if isinstance(v, float) and not math.isfinite(v):
            return None
        return v
    if isinstance(v, str):
        s = v.strip()
        if not s:
            return None
        try:
            return int(s)
        except ValueError:
            pass
        try:
            f = float(s)
        except ValueError:
            return None
        return f if math.isfinite(f) else None
    return None


def parse_position(v: Any) -> int | None:
    """1, "1", "P1", "p1" and 1.0 all mean first place."""
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v if v >= 1 else None
    if isinstance(v, float):
        return int(v) if v.is_integer() and v >= 1 else None
    if isinstance(v, str):
        m = _POSITION_RE.match(v.strip())
        if m and int(m.group(1)) >= 1:
            return int(m.group(1))
    return None


def parse_round(v: Any) -> int | None:
    n = as_number(v)
    if n is None or isinstance(n, float) and not n.is_integer():
        return None
    return int(n)


@dataclass(frozen=True)
class Finisher:
    driver: str
    team: str | None = None
    position: int | None = None
    points: int | float | None = None

    @staticmethod
    def from_dict(d: Any) -> "Finisher | None":
        if isinstance(d, str) and d.strip():
            return Finisher(driver=d.strip())
        if not isinstance(d, dict):
            return None
        driver = first_present(d, FINISHER_DRIVER_KEYS)
        if driver is None:
            return None
        team = first_present(d, FINISHER_TEAM_KEYS)
        return Finisher(
            driver=str(driver).strip(),
            team=str(team).strip() if team is not None else None,
            position=parse_position(first_present(d, FINISHER_POSITION_KEYS)),
            points=as_number(first_present(d, FINISHER_POINTS_KEYS)),
        )


@dataclass(frozen=True)
class RaceResult:
    round: int | None
    name: str | None
    finishers: tuple[Finisher, ...] = ()

    @staticmethod
    def from_dict(d: Any) -> "RaceResult | None":
        if not isinstance(d, dict):
            return None
        raw = None
        for k in FINISHER_LIST_KEYS:
            if isinstance(d.get(k), list):
                raw = d[k]
                break
        finishers = []
        for entry in raw or []:
            f = Finisher.from_dict(entry)
            if f is not None:
                finishers.append(f)
        name = d.get("name") or d.get("event")
        return RaceResult(
            round=parse_round(d.get("round")),
            name=str(name) if name is not None else None,
            finishers=tuple(finishers),
        )

    def classified(self) -> list[tuple[int, Finisher]]:
        """Finishers with their effective position, sorted.

        Explicit positions win; a finisher without one takes its 1-based list slot.
        The sort is stable, so duplicated positions keep list order.
        """
        placed = [(f.position if f.position is not None else i + 1, f) for i, f in enumerate(self.finishers)]
        return sorted(placed, key=lambda pf: pf[0])


@dataclass
class StandingRow:
    name: str
    team: str | None = None
    points: int | float = 0
    wins: int = 0
    podiums: int = 0

    def add(self, position: int, points: int | float) -> None:
        self.points += points
        if position == 1:
            self.wins += 1
        if position <= 3:
            self.podiums += 1

    def to_driver_dict(self) -> dict[str, Any]:
        return {"driver": self.name, "team": self.team, "points": self.points, "wins": self.wins, "podiums": self.podiums}

    def to_team_dict(self) -> dict[str, Any]:
        return {"team": self.name, "points": self.points, "wins": self.wins, "podiums": self.podiums}


@dataclass(frozen=True)
class Operation:
    op: str
    path: str
    value: Any = None

    @staticmethod
    def from_dict(d: Any) -> "Operation | None":
        if not isinstance(d, dict):
            return None
        op = d.get("op")
        path = d.get("path")
        if not isinstance(op, str) or not isinstance(path, str):
            return None
        return Operation(op=op.strip().lower(), path=path, value=d.get("value"))


@dataclass(frozen=True)
class PatchResult:
    ok: bool
    changed: list[str] = field(default_factory=list)
    reason: str | None = None
    skipped: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
