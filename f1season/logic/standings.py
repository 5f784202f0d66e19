from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from ..mappings import STANDING_DRIVER_KEYS, STANDING_TEAM_KEYS, UNKNOWN_TEAM, first_present
from ..models import RaceResult, StandingRow, as_number
from .normalize import TeamNameNormalizer, normalize_name, normalize_points_table

log = logging.getLogger(__name__)


def _entities(v: Any) -> list[dict]:
    # Rosters are lists, but a patch can leave an id-keyed map behind.
    if isinstance(v, dict):
        return [x for x in v.values() if isinstance(x, dict)]
    if isinstance(v, list):
        return [x for x in v if isinstance(x, dict)]
    return []


@dataclass
class Roster:
    team_names: list[str] = field(default_factory=list)
    team_by_id: dict[str, str] = field(default_factory=dict)
    driver_names: list[str] = field(default_factory=list)
    driver_by_key: dict[str, str] = field(default_factory=dict)
    driver_team: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def from_state(state: dict) -> "Roster":
        r = Roster()
        for t in _entities(state.get("teams")):
            name = t.get("team_name") or t.get("name") or t.get("team_id")
            if not name:
                continue
            name = str(name)
            r.team_names.append(name)
            if t.get("team_id") is not None:
                r.team_by_id[str(t["team_id"])] = name

        normalizer = TeamNameNormalizer(r.team_names)
        for d in _entities(state.get("drivers")):
            name = d.get("name") or d.get("driver_id")
            if not name:
                continue
            name = str(name)
            r.driver_names.append(name)
            r.driver_by_key[normalize_name(name)] = name
            if d.get("driver_id") is not None:
                r.driver_by_key[normalize_name(str(d["driver_id"]))] = name
            team = d.get("team")
            if team:
                r.driver_team[name] = r.team_by_id.get(str(team)) or normalizer.resolve(str(team))
        return r

    def canonical_driver(self, label: str) -> str:
        return self.driver_by_key.get(normalize_name(label), label)


@dataclass
class Standings:
    drivers: list[StandingRow]
    teams: list[StandingRow]

    def driver_dicts(self) -> list[dict[str, Any]]:
        return [r.to_driver_dict() for r in self.drivers]

    def team_dicts(self) -> list[dict[str, Any]]:
        return [r.to_team_dict() for r in self.teams]

    def to_dict(self) -> dict[str, Any]:
        return {"drivers": self.driver_dicts(), "teams": self.team_dicts()}


def _ordered(rows: Iterable[StandingRow], roster_order: list[str]) -> list[StandingRow]:
    rank = {name: i for i, name in enumerate(roster_order)}
    return sorted(
        rows,
        key=lambda r: (-r.points, -r.wins, -r.podiums, rank.get(r.name, len(rank)), r.name.casefold()),
    )


def compute_standings(
    race_results: Any,
    roster: Roster,
    points_config: Any = None,
    normalizer: TeamNameNormalizer | None = None,
) -> Standings:
    """Rebuild driver and constructor standings from stored race results."""
    table = normalize_points_table(points_config)
    normalizer = normalizer or TeamNameNormalizer(roster.team_names)
    drivers: dict[str, StandingRow] = {}
    teams: dict[str, StandingRow] = {}

    for raw in race_results if isinstance(race_results, list) else []:
        race = RaceResult.from_dict(raw)
        if race is None:
            log.debug("Ignoring malformed race record %r", raw)
            continue
        for position, f in race.classified():
            driver = roster.canonical_driver(f.driver)
            team = roster.driver_team.get(driver)
            if team is None:
                team = normalizer.resolve(f.team) if f.team else UNKNOWN_TEAM
            points = f.points if f.points is not None else table.get(position, 0)

            drow = drivers.setdefault(driver, StandingRow(name=driver))
            drow.team = team
            drow.add(position, points)
            teams.setdefault(team, StandingRow(name=team)).add(position, points)

    return Standings(
        drivers=_ordered(drivers.values(), roster.driver_names),
        teams=_ordered(teams.values(), roster.team_names),
    )


def compute_state_standings(state: dict) -> Standings:
    stats = state.get("stats") if isinstance(state.get("stats"), dict) else {}
    regs = state.get("regulations") if isinstance(state.get("regulations"), dict) else {}
    return compute_standings(stats.get("race_results"), Roster.from_state(state), regs.get("points_system"))


def refresh_standings(state: dict) -> Standings:
    """Recompute standings and cache them under stats."""
    standings = compute_state_standings(state)
    stats = state.setdefault("stats", {})
    stats["driver_standings"] = standings.driver_dicts()
    stats["constructor_standings"] = standings.team_dicts()
    log.debug("Standings refreshed: %d drivers, %d teams", len(standings.drivers), len(standings.teams))
    return standings


def _cached_rows(rows: Any, name_keys: tuple[str, ...], with_team: bool) -> list[StandingRow]:
    out: list[StandingRow] = []
    for x in rows if isinstance(rows, list) else []:
        if not isinstance(x, dict) or first_present(x, name_keys) is None:
            continue
        out.append(
            StandingRow(
                name=str(first_present(x, name_keys)),
                team=x.get("team") if with_team else None,
                points=as_number(x.get("points")) or 0,
                wins=int(as_number(x.get("wins")) or 0),
                podiums=int(as_number(x.get("podiums")) or 0),
            )
        )
    return out


def standings_view(state: dict) -> Standings:
    """Cached standings for display, recomputed when the cache is empty."""
    stats = state.get("stats") if isinstance(state.get("stats"), dict) else {}
    drivers = _cached_rows(stats.get("driver_standings"), STANDING_DRIVER_KEYS, with_team=True)
    teams = _cached_rows(stats.get("constructor_standings"), STANDING_TEAM_KEYS, with_team=False)
    if not drivers or not teams:
        return compute_state_standings(state)
    roster = Roster.from_state(state)
    return Standings(drivers=_ordered(drivers, roster.driver_names), teams=_ordered(teams, roster.team_names))
