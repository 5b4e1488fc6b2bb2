"""
Serialize a Schedule.

- schedule.json: games + "last updated" string for the website widget
- schedule.ics:  one VEVENT per game for calendar subscriptions

UIDs are the upstream game ids so subscribers see the same event across
runs. DTSTAMP comes from the schedule's capture time, not the wall clock,
so identical input renders identical output.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from .schedule import ResolvedGame, Schedule

PRODID = "-//gamesheet-schedule//EN"
GAME_LENGTH = timedelta(minutes=90)  # assumed; the API has no end time
DEFAULT_CATEGORY = "Hockey"


# -------------------------
# JSON
# -------------------------

def utc_stamp(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def game_document(game: ResolvedGame) -> Dict[str, Any]:
    return {
        "id": game.id,
        "home": game.home,
        "visitor": game.visitor,
        "scheduled_at": utc_stamp(game.start),
        "scheduled_at_pretty": game.start_pretty,
        "location": game.location,
    }


def render_json(schedule: Schedule) -> str:
    doc = {
        "games": [game_document(g) for g in schedule.games],
        "last_updated": schedule.last_updated_pretty,
    }
    return json.dumps(doc, indent=2, ensure_ascii=False) + "\n"


# -------------------------
# ICS helpers
# -------------------------

def fold_ics_line(line: str) -> List[str]:
    """
    RFC5545 line folding: content lines longer than 75 octets are split,
    continuation lines start with a single space. Never splits inside a
    multi-byte UTF-8 character.
    """
    if len(line.encode("utf-8")) <= 75:
        return [line]

    out: List[str] = []
    cur = ""
    cur_len = 0
    for ch in line:
        n = len(ch.encode("utf-8"))
        if cur_len + n > 75:
            out.append(cur)
            cur = " "
            cur_len = 1
        cur += ch
        cur_len += n
    out.append(cur)
    return out


def ics_escape(text: str) -> str:
    # Escape per RFC5545 for TEXT values
    text = text.replace("\\", "\\\\")
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = text.replace("\n", "\\n")
    text = text.replace(";", r"\;")
    text = text.replace(",", r"\,")
    return text


def dt_local_ics(dt_local: datetime) -> str:
    # DTSTART;TZID=America/New_York:YYYYMMDDTHHMMSS
    return dt_local.strftime("%Y%m%dT%H%M%S")


def dt_utc_ics(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def game_end(game: ResolvedGame) -> datetime:
    # aware + timedelta moves the wall clock; add on the utc timeline instead
    return (game.start.astimezone(timezone.utc) + GAME_LENGTH).astimezone(game.start.tzinfo)


def ics_event(game: ResolvedGame, tz_name: str, dtstamp: datetime, category: str) -> List[str]:
    start_local = game.start
    end_local = game_end(game)
    summary = game.summary
    description = "\n".join([summary, game.location]).strip()

    lines: List[str] = [
        "BEGIN:VEVENT",
        f"UID:{game.id}",
        f"DTSTAMP:{dt_utc_ics(dtstamp)}",
        f"DTSTART;TZID={tz_name}:{dt_local_ics(start_local)}",
        f"DTEND;TZID={tz_name}:{dt_local_ics(end_local)}",
        f"SUMMARY:{ics_escape(summary)}",
        f"DESCRIPTION:{ics_escape(description)}",
    ]
    if game.location:
        lines.append(f"LOCATION:{ics_escape(game.location)}")
    lines.append("STATUS:CONFIRMED")
    lines.append(f"CATEGORIES:{ics_escape(category)}")
    lines.append("END:VEVENT")

    folded: List[str] = []
    for ln in lines:
        folded.extend(fold_ics_line(ln))
    return folded


def ics_calendar_header(calname: str, tz_name: str) -> List[str]:
    return [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        f"X-WR-CALNAME:{ics_escape(calname)}",
        f"X-WR-TIMEZONE:{tz_name}",
    ]


def ics_calendar_footer() -> List[str]:
    return ["END:VCALENDAR"]


def render_ics(
    schedule: Schedule,
    tz_name: str,
    calname: str = "Schedule",
    category: str = DEFAULT_CATEGORY,
) -> str:
    dtstamp = schedule.last_updated

    lines: List[str] = []
    for ln in ics_calendar_header(calname, tz_name):
        lines.extend(fold_ics_line(ln))
    for g in schedule.games:
        lines.extend(ics_event(g, tz_name, dtstamp, category))
    lines.extend(ics_calendar_footer())
    return "\r\n".join(lines) + "\r\n"
