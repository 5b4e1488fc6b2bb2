"""
Join team records onto scheduled games.

Flow:
- team id -> title lookup from every Team record
- each ScheduledGame: resolve home/visitor, apply the optional team filter,
  reinterpret the start time in the league timezone
- anything that fails to resolve or parse is dropped, quietly

Notes:
- The API labels start times as UTC ("2022-05-27T20:30:00Z") but the clock
  face is the league's local time (8:30pm in New York for that example).
  We throw the label away and attach the league ZoneInfo instead.
- The team filter is an exact, case-sensitive match on either team name.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Dict, Iterable, List, Optional

from .records import Record, ScheduledGame, Team

PRETTY_FORMAT = "%A %B %d %I:%M:%S %p"  # "Friday May 27 08:30:00 PM"


# -------------------------
# Data models
# -------------------------

@dataclass(frozen=True)
class ResolvedGame:
    id: str
    home: str
    visitor: str
    start: datetime  # tz-aware, league timezone
    location: str

    @property
    def start_pretty(self) -> str:
        return self.start.strftime(PRETTY_FORMAT)

    @property
    def summary(self) -> str:
        return f"{self.visitor} at {self.home}"


@dataclass(frozen=True)
class Schedule:
    games: List[ResolvedGame]
    last_updated: datetime

    @property
    def last_updated_pretty(self) -> str:
        return self.last_updated.strftime(PRETTY_FORMAT)


# -------------------------
# Join & filter
# -------------------------

def team_names(records: Iterable[Record]) -> Dict[str, str]:
    return {r.id: r.title for r in records if isinstance(r, Team)}


def parse_start_time(raw: str, tz: tzinfo) -> Optional[datetime]:
    """Read the clock face of `raw` as wall time in `tz`.

    Any offset or trailing Z on the string is discarded. Returns None when
    the string is not an ISO-8601 date-time; a bare date has no kick-off
    time yet and counts as unparsable.

    A clock face that falls in a spring-forward gap (02:30 on the March
    change) is read with the pre-transition offset and lands on the real
    wall time it names (03:30 daylight time).
    """
    s = (raw or "").strip()
    if s.endswith(("Z", "z")):
        s = s[:-1]
    # "YYYY-MM-DD" then "T" or " " then a time
    if len(s) <= 10 or s[10] not in ("T", "t", " "):
        return None
    try:
        naive = datetime.fromisoformat(s)
    except ValueError:
        return None
    local = naive.replace(tzinfo=tz)
    return local.astimezone(timezone.utc).astimezone(tz)


def resolve_game(
    game: ScheduledGame,
    teams: Dict[str, str],
    tz: tzinfo,
    team_filter: Optional[str] = None,
) -> Optional[ResolvedGame]:
    if game.home_team_id is None or game.visitor_team_id is None:
        return None

    home = teams.get(game.home_team_id)
    visitor = teams.get(game.visitor_team_id)
    # teams outside the season window show up as dangling references
    if not home or not visitor:
        return None

    if team_filter is not None and team_filter not in (home, visitor):
        return None

    start = parse_start_time(game.scheduled_start_time, tz)
    if start is None:
        return None

    return ResolvedGame(
        id=game.id,
        home=home,
        visitor=visitor,
        start=start,
        location=game.location,
    )


def resolve_games(
    records: Iterable[Record],
    tz: tzinfo,
    team_filter: Optional[str] = None,
) -> List[ResolvedGame]:
    records = list(records)
    teams = team_names(records)
    out: List[ResolvedGame] = []
    for r in records:
        if not isinstance(r, ScheduledGame):
            continue
        resolved = resolve_game(r, teams, tz, team_filter)
        if resolved is not None:
            out.append(resolved)
    return out


def sort_games(games: Iterable[ResolvedGame]) -> List[ResolvedGame]:
    # same-tzinfo datetimes compare by wall clock; normalize so fold counts
    return sorted(games, key=lambda g: (g.start.astimezone(timezone.utc), g.id))


def build_schedule(
    records: Iterable[Record],
    tz: tzinfo,
    now: datetime,
    team_filter: Optional[str] = None,
) -> Schedule:
    games = sort_games(resolve_games(records, tz, team_filter))
    return Schedule(games=games, last_updated=now)
