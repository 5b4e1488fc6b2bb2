from __future__ import annotations

import copy
from zoneinfo import ZoneInfo

import pytest

NY = ZoneInfo("America/New_York")

PAYLOAD = {
    "data": {"id": "4321", "type": "seasons"},
    "included": [
        {"id": "1", "type": "teams", "attributes": {"title": "Hawks"}},
        {"id": "2", "type": "teams", "attributes": {"title": "Owls"}},
        {
            "id": "g1",
            "type": "scheduled-games",
            "attributes": {"scheduled_start_time": "2022-05-27T20:30:00Z", "location": "Rink A"},
            "relationships": {
                "home_team": {"data": {"id": "1", "type": "teams"}},
                "visitor_team": {"data": {"id": "2", "type": "teams"}},
            },
        },
        {"id": "7", "type": "divisions", "attributes": {"title": "Division 3", "whatever": [1, 2]}},
    ],
}


def game(gid, home, visitor, start="2022-05-27T20:30:00Z", location="Rink A"):
    return {
        "id": gid,
        "type": "scheduled-games",
        "attributes": {"scheduled_start_time": start, "location": location},
        "relationships": {
            "home_team": {"data": {"id": home, "type": "teams"}},
            "visitor_team": {"data": {"id": visitor, "type": "teams"}},
        },
    }


@pytest.fixture
def payload():
    return copy.deepcopy(PAYLOAD)


@pytest.fixture
def tz():
    return NY


@pytest.fixture
def make_game():
    return game
