import pytest

from f1season.logic.normalize import TeamNameNormalizer, normalize_points_table, normalize_team_name
from f1season.mappings import DEFAULT_POINTS_TABLE


def test_token_overlap_resolves_sponsor_heavy_names():
    assert normalize_team_name("Red Bull Racing", ["Red Bull", "Ferrari"]) == "Red Bull"
    assert normalize_team_name("Scuderia Ferrari HP", ["Red Bull", "Ferrari"]) == "Ferrari"


def test_exact_match_ignores_case_and_spacing():
    assert normalize_team_name("  FERRARI ", ["Red Bull", "Ferrari"]) == "Ferrari"


def test_best_overlap_beats_roster_order():
    assert normalize_team_name("Aston Martin Aramco", ["Martin Racing", "Aston Martin"]) == "Aston Martin"


def test_ties_go_to_first_roster_entry():
    assert normalize_team_name("Racing Team", ["Racing Bulls", "Racing Point"]) == "Racing Bulls"


def test_unmatched_label_is_kept():
    assert normalize_team_name("Andretti", ["Red Bull", "Ferrari"]) == "Andretti"
    assert normalize_team_name("", ["Red Bull"]) == ""


def test_normalizer_binds_roster():
    n = TeamNameNormalizer(["McLaren", "Mercedes"])
    assert n.resolve("McLaren F1 Team") == "McLaren"
    assert n.resolve("mercedes") == "Mercedes"


def test_points_from_sequence():
    assert normalize_points_table([10, 5, 2]) == {1: 10, 2: 5, 3: 2}


def test_points_from_integer_keys():
    assert normalize_points_table({1: 9, 2: 4}) == {1: 9, 2: 4}
    assert normalize_points_table({"2": 6, "1": 10}) == {1: 10, 2: 6}


def test_points_from_prefixed_keys():
    assert normalize_points_table({"P1": 30, "p2": 20, "P3": "12"}) == {1: 30, 2: 20, 3: 12}


@pytest.mark.parametrize("cfg", [None, [], {}, "junk", {"first": 10}, ["a", None]])
def test_unusable_config_falls_back_to_default(cfg):
    assert normalize_points_table(cfg) == DEFAULT_POINTS_TABLE


def test_default_table_is_a_copy():
    table = normalize_points_table(None)
    table[1] = 0
    assert DEFAULT_POINTS_TABLE[1] == 25
