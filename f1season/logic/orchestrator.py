from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .. import config
from ..data_sources.generator import extract_payload
from ..errors import BundleFormatError, StateValidationError
from ..io.artifacts import load_state
from ..io.bundle import load_bundle, load_seed_dir
from ..models import PatchResult
from .patch import apply_ops
from .paths import to_keys
from .sanity import ensure_scaffold, first_run_init
from .season import advance_round, hold_pointer, read_pointer
from .standings import refresh_standings

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchOutcome:
    result: PatchResult
    round_advanced: bool = False
    standings_refreshed: bool = False
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.result.ok

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.result.to_dict(),
            "round_advanced": self.round_advanced,
            "standings_refreshed": self.standings_refreshed,
            "meta": self.meta,
        }


def _touches_results(path: str) -> bool:
    return to_keys(path)[:2] == ["stats", "race_results"]


def apply_batch(state: dict, batch: Any, *, atomic: bool = False) -> BatchOutcome:
    """patch -> advance round pointer (when results changed) -> rebuild standings.

    The caller persists the state afterwards; nothing is written here.
    """
    pointer = read_pointer(state)
    res = apply_ops(state, batch, atomic=atomic)
    if not res.ok:
        return BatchOutcome(result=res)
    hold_pointer(state, pointer)

    advanced = False
    if any(_touches_results(p) for p in res.changed):
        advanced = advance_round(state)
    refresh_standings(state)

    meta = state.get("meta") if isinstance(state.get("meta"), dict) else {}
    log.info("Applied %d change(s): %s", len(res.changed), ", ".join(res.changed))
    return BatchOutcome(
        result=res,
        round_advanced=advanced,
        standings_refreshed=True,
        meta={k: meta.get(k) for k in ("season", "timeline", "last_completed_round")},
    )


@dataclass(frozen=True)
class ReplyOutcome:
    narration: str
    text: str
    batch: BatchOutcome | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "narration": self.narration,
            "text": self.text,
            "batch": self.batch.to_dict() if self.batch else None,
        }


def handle_reply(state: dict, reply: Any, *, atomic: bool = False) -> ReplyOutcome:
    """Apply the ops carried by a collaborator reply and build the message shown to the player."""
    payload = extract_payload(reply)
    narration = payload["narration"]
    if payload["ops"] is None:
        return ReplyOutcome(narration=narration, text=narration or "No reply.")

    outcome = apply_batch(state, payload["ops"], atomic=atomic)
    if not outcome.ok:
        return ReplyOutcome(narration=narration, text=narration or "No reply.", batch=outcome)

    summary = "Database updated: " + ", ".join(outcome.result.changed)
    text = f"{narration}\n\n{summary}" if narration else summary
    return ReplyOutcome(narration=narration, text=text, batch=outcome)


@dataclass(frozen=True)
class Session:
    state: dict
    source: str
    repairs: list[str] = field(default_factory=list)
    first_run: bool = False


def load_session(
    *,
    save_path: Path | None = None,
    bundle_path: Path | None = None,
    seed_dir: Path | None = None,
) -> Session:
    """Resume from the local save, else a bundle, else the seed directory; then repair.

    A game built from the seed directory also gets its first-run setup.
    """
    state = load_state(save_path or config.SAVE_FILE)
    source = "save"

    if state is None and bundle_path is not None:
        try:
            state = load_bundle(bundle_path)
            source = "bundle"
        except (BundleFormatError, StateValidationError, OSError, ValueError) as e:
            log.warning("Bundle %s failed to load, falling back to seed: %s", bundle_path, e)

    if state is None:
        state = load_seed_dir(seed_dir or config.SEED_DIR)
        source = "seed"

    repairs = ensure_scaffold(state)
    if source == "seed":
        first_run_init(state)
    return Session(state=state, source=source, repairs=repairs, first_run=source == "seed")
