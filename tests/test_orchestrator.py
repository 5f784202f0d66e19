import json

import pytest

from f1season import config
from f1season.io.artifacts import save_state, write_json
from f1season.io.bundle import state_to_bundle
from f1season.logic.orchestrator import apply_batch, handle_reply, load_session
from factories import batch, op, race


def _race_one():
    return race(
        1,
        {"driver": "Max Verstappen", "team": "Red Bull Racing", "position": 1},
        {"driver": "Lando Norris", "team": "McLaren", "position": 2},
        {"driver": "Charles Leclerc", "team": "Ferrari", "position": 3},
        name="Australian Grand Prix",
    )


def test_result_push_advances_season_and_rebuilds_standings(game_state):
    outcome = apply_batch(game_state, batch(op("push", "/stats/race_results", _race_one())))
    assert outcome.ok
    assert outcome.round_advanced
    assert outcome.standings_refreshed
    assert outcome.meta == {"season": 2025, "timeline": "inseason", "last_completed_round": 1}
    assert game_state["stats"]["driver_standings"][0] == {
        "driver": "Max Verstappen",
        "team": "Red Bull",
        "points": 25,
        "wins": 1,
        "podiums": 1,
    }
    assert [t["team"] for t in game_state["stats"]["constructor_standings"]] == ["Red Bull", "McLaren", "Ferrari"]


def test_generated_standings_are_replaced_by_derived_ones(game_state):
    outcome = apply_batch(
        game_state,
        batch(
            op("push", "stats.race_results", _race_one()),
            op("set", "/stats/driver_standings", [{"driver": "Liam Lawson", "points": 500}]),
        ),
    )
    assert outcome.ok
    assert game_state["stats"]["driver_standings"][0]["driver"] == "Max Verstappen"


def test_non_result_batch_keeps_round_pointer(game_state):
    outcome = apply_batch(game_state, batch(op("inc", "/teams/ferrari/car/drag", -2)))
    assert outcome.ok
    assert not outcome.round_advanced
    assert game_state["meta"]["last_completed_round"] == 0


@pytest.mark.parametrize(
    "change",
    [
        op("set", "/meta/last_completed_round", 0),
        op("inc", "/meta/last_completed_round", -2),
        op("set", "/meta/last_completed_round", "two"),
    ],
)
def test_batch_cannot_move_round_pointer_backwards(game_state, change):
    game_state["meta"].update(last_completed_round=3, timeline="inseason")
    outcome = apply_batch(game_state, batch(change, op("inc", "/teams/ferrari/car/drag", -2)))
    assert outcome.ok
    assert game_state["meta"]["last_completed_round"] == 3
    assert outcome.meta["last_completed_round"] == 3


def test_batch_may_move_round_pointer_forwards(game_state):
    outcome = apply_batch(game_state, batch(op("set", "/meta/last_completed_round", 2)))
    assert outcome.ok
    assert game_state["meta"]["last_completed_round"] == 2


def test_rejected_batch_skips_follow_up_steps(game_state):
    outcome = apply_batch(game_state, {"kind": "wrong"})
    assert not outcome.ok
    assert outcome.result.reason == "no-ops"
    assert not outcome.standings_refreshed
    assert outcome.to_dict()["reason"] == "no-ops"


def test_reply_with_ops_reports_changed_paths(game_state):
    reply = "Here you go: " + json.dumps(
        {"narration": "Max cruises.", "ops": batch(op("push", "/stats/race_results", _race_one()))}
    )
    outcome = handle_reply(game_state, reply)
    assert outcome.text == "Max cruises.\n\nDatabase updated: /stats/race_results"
    assert outcome.batch.ok
    assert game_state["meta"]["last_completed_round"] == 1


def test_reply_without_effect_returns_narration(game_state):
    outcome = handle_reply(game_state, {"narration": "Which car?", "ops": batch()})
    assert outcome.text == "Which car?"
    assert not outcome.batch.ok


def test_plain_reply_touches_nothing(game_state):
    outcome = handle_reply(game_state, "just gossip")
    assert outcome.text == "just gossip"
    assert outcome.batch is None


def test_session_prefers_local_save(tmp_path, game_state):
    save = tmp_path / "game_state.json"
    save_state(game_state, save, history=False)
    session = load_session(save_path=save, seed_dir=config.SEED_DIR)
    assert session.source == "save"
    assert session.state["drivers"][0]["name"] == "Max Verstappen"
    assert session.repairs == []
    assert not session.first_run
    assert "player" not in session.state["meta"]


def test_session_falls_back_to_bundle_then_seed(tmp_path, game_state):
    bundle = tmp_path / "slot1.ccsf.json"
    write_json(bundle, state_to_bundle(game_state))
    session = load_session(save_path=tmp_path / "missing.json", bundle_path=bundle, seed_dir=config.SEED_DIR)
    assert session.source == "bundle"

    write_json(bundle, {"_type": "something_else"})
    session = load_session(save_path=tmp_path / "missing.json", bundle_path=bundle, seed_dir=config.SEED_DIR)
    assert session.source == "seed"
    assert len(session.state["teams"]) == 3


def test_new_game_from_seed_gets_first_run_setup(tmp_path):
    session = load_session(save_path=tmp_path / "missing.json", seed_dir=config.SEED_DIR)
    again = load_session(save_path=tmp_path / "missing.json", seed_dir=config.SEED_DIR)
    assert session.first_run
    assert session.state["meta"]["player"]["name"] == "Rookie"
    assert session.state["meta"]["selected_team"] is None
    assert session.state["stats"]["boardroom_drama"][-1]["title"] == "Welcome to the Paddock"
    assert [r["status"] for r in session.state["rumours"]] == [r["status"] for r in again.state["rumours"]]
    assert session.state["rumours"][3]["status"] == "confirmed"
