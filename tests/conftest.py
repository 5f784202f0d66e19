from __future__ import annotations

import pytest


def _team(team_id: str, name: str, drivers: list[str], power: int) -> dict:
    return {
        "team_id": team_id,
        "team_name": name,
        "drivers": drivers,
        "car": {"engine_power": power, "drag": 40, "reliability": 85},
    }


def _driver(driver_id: str, name: str, team: str, rating: int) -> dict:
    return {"driver_id": driver_id, "name": name, "team": team, "overall_rating": rating, "form": 80}


@pytest.fixture
def game_state() -> dict:
    return {
        "meta": {"season": 2025, "timeline": "preseason", "last_completed_round": 0},
        "regulations": {"points_system": [25, 18, 15, 12, 10, 8, 6, 4, 2, 1]},
        "teams": [
            _team("red_bull", "Red Bull", ["ver", "law"], 90),
            _team("ferrari", "Ferrari", ["lec", "ham"], 91),
            _team("mclaren", "McLaren", ["nor", "pia"], 89),
        ],
        "drivers": [
            _driver("ver", "Max Verstappen", "red_bull", 96),
            _driver("law", "Liam Lawson", "red_bull", 78),
            _driver("lec", "Charles Leclerc", "ferrari", 91),
            _driver("ham", "Lewis Hamilton", "ferrari", 90),
            _driver("nor", "Lando Norris", "mclaren", 92),
            _driver("pia", "Oscar Piastri", "mclaren", 91),
        ],
        "calendar": [
            {"round": 1, "name": "Australian Grand Prix", "country": "Australia", "circuit_id": "albert_park"},
            {"round": 2, "name": "Chinese Grand Prix", "country": "China", "circuit_id": "shanghai"},
            {"round": 3, "name": "Japanese Grand Prix", "country": "Japan", "circuit_id": "suzuka"},
            {"round": 4, "name": "Bahrain Grand Prix", "country": "Bahrain", "circuit_id": "sakhir"},
        ],
        "stats": {"race_results": [], "driver_standings": [], "constructor_standings": []},
    }
