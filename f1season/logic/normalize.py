from __future__ import annotations

import re
from typing import Any, Iterable

from ..mappings import DEFAULT_POINTS_TABLE
from ..models import as_number

_TOKEN_RE = re.compile(r"[a-z0-9]+")
_POINTS_KEY_RE = re.compile(r"^[Pp]?(\d+)$")


def normalize_name(s: str) -> str:
    return re.sub(r"\s+", " ", (s or "").strip()).lower()


def tokenize(s: str) -> set[str]:
    return set(_TOKEN_RE.findall((s or "").lower()))


def normalize_team_name(label: str, canonical_names: Iterable[str]) -> str:
    """Map a free-text team label onto a roster name.

    Exact (case-insensitive) match first, then the canonical name sharing the
    most tokens with the label; earlier roster entries win ties. A label that
    shares nothing with the roster is returned as is.
    """
    names = [n for n in canonical_names if isinstance(n, str) and n]
    if not isinstance(label, str) or not label.strip():
        return label

    wanted = normalize_name(label)
    for n in names:
        if normalize_name(n) == wanted:
            return n

    label_tokens = tokenize(label)
    best_name, best_score = None, 0
    for n in names:
        score = len(label_tokens & tokenize(n))
        if score > best_score:
            best_name, best_score = n, score
    return best_name if best_name is not None else label


class TeamNameNormalizer:
    """Roster-bound team name resolver used by the standings calculator."""

    def __init__(self, canonical_names: Iterable[str]) -> None:
        self.canonical_names = [n for n in canonical_names if isinstance(n, str) and n]

    def resolve(self, label: str) -> str:
        return normalize_team_name(label, self.canonical_names)


def _points_from_mapping(cfg: dict) -> dict[int, int | float]:
    out: dict[int, int | float] = {}
    for k, v in cfg.items():
        if isinstance(k, bool):
            continue
        if isinstance(k, int):
            pos = k
        else:
            m = _POINTS_KEY_RE.match(str(k).strip())
            if not m:
                continue
            pos = int(m.group(1))
        pts = as_number(v)
        if pos >= 1 and pts is not None:
            out[pos] = pts
    return out


def normalize_points_table(cfg: Any) -> dict[int, int | float]:
    """Return {position: points} from a list, an int-keyed map or a "P<n>"-keyed map."""
    table: dict[int, int | float] = {}
    if isinstance(cfg, (list, tuple)):
        for i, v in enumerate(cfg):
            pts = as_number(v)
            if pts is not None:
                table[i + 1] = pts
    elif isinstance(cfg, dict):
        table = _points_from_mapping(cfg)
    return dict(sorted(table.items())) if table else dict(DEFAULT_POINTS_TABLE)
