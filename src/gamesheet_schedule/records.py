"""
Typed view of the GameSheet schedule response.

The stats API answers in JSON:API style. Everything we need lives in the
top-level `included` array, a flat mix of records told apart by `type`:

- "teams"            -> Team
- "scheduled-games"  -> ScheduledGame
- anything else      -> Ignored (upstream adds kinds without notice)

A recognized record with a broken required field fails the whole document.
Missing team relationships on a game are NOT a decode error; they come
through as None and the join drops the game.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from .errors import RecordError

TEAM_TYPE = "teams"
GAME_TYPE = "scheduled-games"


# -------------------------
# Record kinds
# -------------------------

@dataclass(frozen=True)
class Team:
    id: str
    title: str


@dataclass(frozen=True)
class ScheduledGame:
    id: str
    scheduled_start_time: str  # "2022-05-27T20:30:00Z" (league-local, NOT utc)
    location: str
    home_team_id: Optional[str]
    visitor_team_id: Optional[str]


@dataclass(frozen=True)
class Ignored:
    type: str


Record = Union[Team, ScheduledGame, Ignored]


# -------------------------
# Field helpers
# -------------------------

def _as_id(value: Any) -> Optional[str]:
    # JSON:API ids are strings, but some feeds emit bare ints
    if isinstance(value, bool):
        return None
    if isinstance(value, (str, int)):
        s = str(value).strip()
        return s or None
    return None


def _required_id(raw: Dict[str, Any]) -> str:
    rid = _as_id(raw.get("id"))
    if rid is None:
        raise RecordError(f"{raw.get('type')} record is missing an id: {raw!r}")
    return rid


def _attributes(raw: Dict[str, Any]) -> Dict[str, Any]:
    attrs = raw.get("attributes")
    if not isinstance(attrs, dict):
        raise RecordError(f"{raw.get('type')} record {raw.get('id')!r} has no attributes object")
    return attrs


def _required_str(attrs: Dict[str, Any], key: str, kind: str, rid: str) -> str:
    value = attrs.get(key)
    if not isinstance(value, str):
        raise RecordError(f"{kind} record {rid!r}: attribute {key!r} must be a string, got {value!r}")
    return value


def _relationship_id(relationships: Any, name: str) -> Optional[str]:
    # relationships.<name>.data.id, any level may be absent or null
    if not isinstance(relationships, dict):
        return None
    rel = relationships.get(name)
    if not isinstance(rel, dict):
        return None
    data = rel.get("data")
    if not isinstance(data, dict):
        return None
    return _as_id(data.get("id"))


# -------------------------
# Decoding
# -------------------------

def parse_team(raw: Dict[str, Any]) -> Team:
    rid = _required_id(raw)
    attrs = _attributes(raw)
    return Team(id=rid, title=_required_str(attrs, "title", TEAM_TYPE, rid))


def parse_scheduled_game(raw: Dict[str, Any]) -> ScheduledGame:
    rid = _required_id(raw)
    attrs = _attributes(raw)
    relationships = raw.get("relationships")
    return ScheduledGame(
        id=rid,
        scheduled_start_time=_required_str(attrs, "scheduled_start_time", GAME_TYPE, rid),
        location=_required_str(attrs, "location", GAME_TYPE, rid),
        home_team_id=_relationship_id(relationships, "home_team"),
        visitor_team_id=_relationship_id(relationships, "visitor_team"),
    )


def parse_record(raw: Any) -> Record:
    if not isinstance(raw, dict):
        return Ignored(type="")

    kind = raw.get("type")
    if kind == TEAM_TYPE:
        return parse_team(raw)
    if kind == GAME_TYPE:
        return parse_scheduled_game(raw)
    return Ignored(type=str(kind or ""))


def parse_document(payload: Any) -> List[Record]:
    """Decode a full schedule response into its `included` records.

    Raises RecordError when the document shape is wrong or a team/game
    record is malformed. Unknown record kinds never raise.
    """
    if not isinstance(payload, dict):
        raise RecordError(f"Expected a JSON object, got {type(payload).__name__}")

    included = payload.get("included")
    if included is None:
        return []
    if not isinstance(included, list):
        raise RecordError(f"`included` must be a list, got {type(included).__name__}")

    return [parse_record(item) for item in included]
