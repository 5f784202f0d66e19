import pytest

from f1season.errors import UnresolvablePathError
from f1season.logic.paths import clamp_attribute, resolve_parent, to_keys


def test_slash_and_dot_paths_normalize_identically():
    assert to_keys("/teams/red_bull/car/drag") == ["teams", "red_bull", "car", "drag"]
    assert to_keys("teams.red_bull.car.drag") == ["teams", "red_bull", "car", "drag"]
    assert to_keys("teams/red_bull") == ["teams", "red_bull"]


def test_empty_segments_are_dropped():
    assert to_keys("//a//b/") == ["a", "b"]
    assert to_keys("") == []
    assert to_keys(None) == []


def test_slash_form_keeps_dots_inside_segments():
    assert to_keys("/sponsors/acme.co/value") == ["sponsors", "acme.co", "value"]


def test_missing_structure_is_created():
    root = {}
    parent, key = resolve_parent(root, ["a", "b", "c"])
    assert key == "c"
    assert parent == {}
    assert root == {"a": {"b": {}}}
    assert parent is root["a"]["b"]


def test_scalar_in_the_way_is_replaced_by_a_map():
    root = {"a": 5}
    resolve_parent(root, ["a", "b", "c"])
    assert root == {"a": {"b": {}}}


def test_list_elements_resolve_by_entity_id(game_state):
    parent, key = resolve_parent(game_state, ["teams", "ferrari", "car", "drag"])
    assert parent is game_state["teams"][1]["car"]
    assert key == "drag"


def test_list_elements_resolve_by_index():
    root = {"xs": [{"v": 1}, {"v": 2}]}
    parent, key = resolve_parent(root, ["xs", "1", "v"])
    assert parent is root["xs"][1]
    assert key == "v"


def test_id_match_wins_over_index():
    root = {"xs": [{"id": "1"}, {"id": "0"}]}
    parent, _ = resolve_parent(root, ["xs", "0", "v"])
    assert parent is root["xs"][1]


def test_unknown_list_element_is_unresolvable(game_state):
    with pytest.raises(UnresolvablePathError):
        resolve_parent(game_state, ["teams", "williams", "car", "drag"])
    assert len(game_state["teams"]) == 3


def test_empty_key_list_is_unresolvable():
    with pytest.raises(UnresolvablePathError):
        resolve_parent({}, [])


@pytest.mark.parametrize("value,expected", [(120, 100), (-3, 0), (55, 55), (100.5, 100), (-0.1, 0)])
def test_car_attributes_are_clamped(value, expected):
    assert clamp_attribute(["teams", "x", "car", "drag"], value) == expected


def test_values_outside_car_subtree_are_untouched():
    assert clamp_attribute(["drivers", "ver", "form"], 150) == 150
    assert clamp_attribute(["teams", "x", "car", "livery"], "papaya") == "papaya"
    assert clamp_attribute(["teams", "x", "car", "dirty"], True) is True
