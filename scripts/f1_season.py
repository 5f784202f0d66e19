#!/usr/bin/env python3
"""Season engine CLI.

Subcommands:
  - check: load (save -> bundle -> seed), repair scaffolding, optionally validate
  - apply: apply a patch batch JSON file to the saved state
  - reply: apply the ops carried by a raw collaborator reply (text or JSON)
  - standings: print driver and constructor standings
  - next: print the next event on the calendar
  - export: write the state as a single-file save bundle
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Ensure repo root is on sys.path when invoked as a script.
BASE_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BASE_DIR))

from f1season import config
from f1season.errors import EngineError
from f1season.io.artifacts import ensure_state_dirs, read_json, save_state, write_json
from f1season.io.bundle import state_to_bundle
from f1season.logic.orchestrator import apply_batch, handle_reply, load_session
from f1season.logic.sanity import validate_state
from f1season.logic.season import completed_round, next_race, season_complete
from f1season.logic.standings import compute_state_standings, standings_view


def _session(args: argparse.Namespace):
    ensure_state_dirs(Path(args.state).parent)
    return load_session(
        save_path=Path(args.state),
        bundle_path=Path(args.bundle) if args.bundle else None,
        seed_dir=Path(args.seed_dir),
    )


def _print(obj) -> None:
    print(json.dumps(obj, indent=2, sort_keys=True, ensure_ascii=False))


def cmd_check(args: argparse.Namespace) -> int:
    session = _session(args)
    problems: list[str] = []
    if args.validate:
        try:
            validate_state(session.state)
        except EngineError as e:
            problems = list(getattr(e, "problems", [str(e)]))
    if args.write:
        save_state(session.state, Path(args.state), history=False)
    _print({"source": session.source, "repairs": session.repairs, "problems": problems})
    return 1 if problems else 0


def cmd_apply(args: argparse.Namespace) -> int:
    session = _session(args)
    batch = read_json(Path(args.patch))
    if batch is None:
        raise SystemExit(f"Patch file not found: {args.patch}")

    outcome = apply_batch(session.state, batch, atomic=args.atomic)
    if outcome.ok and not args.dry_run:
        save_state(session.state, Path(args.state))
    _print(outcome.to_dict())
    return 0 if outcome.ok else 2


def cmd_reply(args: argparse.Namespace) -> int:
    session = _session(args)
    path = Path(args.reply)
    if not path.exists():
        raise SystemExit(f"Reply file not found: {args.reply}")
    reply = path.read_text(encoding="utf-8")

    outcome = handle_reply(session.state, reply, atomic=args.atomic)
    if outcome.batch is not None and outcome.batch.ok and not args.dry_run:
        save_state(session.state, Path(args.state))
        write_json(Path(args.state).parent / config.LAST_REPLY_FILE.name, outcome.to_dict())
    _print(outcome.to_dict())
    return 2 if outcome.batch is not None and not outcome.batch.ok else 0


def cmd_standings(args: argparse.Namespace) -> int:
    session = _session(args)
    standings = compute_state_standings(session.state) if args.recompute else standings_view(session.state)
    out = standings.to_dict()
    if args.kind != "all":
        out = {args.kind: out[args.kind]}
    _print(out)
    return 0


def cmd_next(args: argparse.Namespace) -> int:
    session = _session(args)
    _print(
        {
            "completed_round": completed_round(session.state),
            "season_complete": season_complete(session.state),
            "next_race": next_race(session.state),
        }
    )
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    session = _session(args)
    out = Path(args.out)
    write_json(out, state_to_bundle(session.state))
    print(f"Bundle written to {out}", flush=True)
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="f1_season")
    ap.add_argument("--state", default=str(config.SAVE_FILE), help="Live save file")
    ap.add_argument("--bundle", default=None, help="Save bundle used when no live save exists")
    ap.add_argument("--seed-dir", default=str(config.SEED_DIR))
    ap.add_argument("-v", "--verbose", action="store_true")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_check = sub.add_parser("check", help="Load the game and repair missing scaffolding")
    p_check.add_argument("--validate", action="store_true", help="Also check ids and cross references")
    p_check.add_argument("--write", action="store_true", help="Write repairs back to the save")
    p_check.set_defaults(func=cmd_check)

    p_apply = sub.add_parser("apply", help="Apply a patch batch JSON file")
    p_apply.add_argument("patch")
    p_apply.add_argument("--atomic", action="store_true", help="All-or-nothing application")
    p_apply.add_argument("--dry-run", action="store_true", help="Do not write the save")
    p_apply.set_defaults(func=cmd_apply)

    p_reply = sub.add_parser("reply", help="Apply the ops embedded in a collaborator reply")
    p_reply.add_argument("reply")
    p_reply.add_argument("--atomic", action="store_true")
    p_reply.add_argument("--dry-run", action="store_true")
    p_reply.set_defaults(func=cmd_reply)

    p_std = sub.add_parser("standings", help="Print standings")
    p_std.add_argument("--kind", choices=["all", "drivers", "teams"], default="all")
    p_std.add_argument("--recompute", action="store_true", help="Ignore cached standings")
    p_std.set_defaults(func=cmd_standings)

    p_next = sub.add_parser("next", help="Print the next event")
    p_next.set_defaults(func=cmd_next)

    p_export = sub.add_parser("export", help="Write a single-file save bundle")
    p_export.add_argument("--out", default=str(config.STATE_DIR / "slot1.ccsf.json"))
    p_export.set_defaults(func=cmd_export)

    return ap


def main() -> int:
    ap = build_parser()
    args = ap.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return int(args.func(args))
    except EngineError as e:
        raise SystemExit(str(e))


if __name__ == "__main__":
    raise SystemExit(main())
