from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from gamesheet_schedule.records import parse_document
from gamesheet_schedule.render import fold_ics_line, game_end, ics_escape, render_ics, render_json
from gamesheet_schedule.schedule import ResolvedGame, Schedule, build_schedule, parse_start_time

NY = ZoneInfo("America/New_York")
NOW = datetime(2022, 5, 27, 9, 15, tzinfo=NY)


def unfold(ics: str) -> list:
    return ics.replace("\r\n ", "").split("\r\n")


def test_render_json_document(payload, tz):
    schedule = build_schedule(parse_document(payload), tz, NOW)
    doc = json.loads(render_json(schedule))

    assert doc == {
        "games": [
            {
                "id": "g1",
                "home": "Hawks",
                "visitor": "Owls",
                "scheduled_at": "2022-05-28T00:30:00Z",
                "scheduled_at_pretty": "Friday May 27 08:30:00 PM",
                "location": "Rink A",
            }
        ],
        "last_updated": "Friday May 27 09:15:00 AM",
    }


def test_render_json_round_trips_games(payload, tz, make_game):
    payload["included"] += [make_game("g2", "2", "1", start="2022-06-01T19:00:00Z", location="Rink, B")]
    schedule = build_schedule(parse_document(payload), tz, NOW)

    decoded = json.loads(render_json(schedule))["games"]
    assert [(d["id"], d["home"], d["visitor"], d["location"]) for d in decoded] == [
        (g.id, g.home, g.visitor, g.location) for g in schedule.games
    ]


def test_render_ics_event_fields(payload, tz):
    schedule = build_schedule(parse_document(payload), tz, NOW)
    lines = unfold(render_ics(schedule, "America/New_York", calname="Hawks Schedule", category="Hockey"))

    assert lines[0] == "BEGIN:VCALENDAR"
    assert "VERSION:2.0" in lines
    assert "X-WR-CALNAME:Hawks Schedule" in lines
    assert lines[-2:] == ["END:VCALENDAR", ""]

    start = lines.index("BEGIN:VEVENT")
    event = lines[start:lines.index("END:VEVENT") + 1]
    assert "UID:g1" in event
    assert "DTSTAMP:20220527T131500Z" in event
    assert "DTSTART;TZID=America/New_York:20220527T203000" in event
    assert "DTEND;TZID=America/New_York:20220527T220000" in event
    assert "SUMMARY:Owls at Hawks" in event
    assert "DESCRIPTION:Owls at Hawks\\nRink A" in event
    assert "LOCATION:Rink A" in event
    assert "STATUS:CONFIRMED" in event
    assert "CATEGORIES:Hockey" in event


def test_render_ics_is_deterministic_and_uids_stable(payload, tz, make_game):
    payload["included"] += [make_game("g2", "2", "1", start="2022-06-01T19:00:00Z")]
    schedule = build_schedule(parse_document(payload), tz, NOW)

    first = render_ics(schedule, "America/New_York")
    second = render_ics(schedule, "America/New_York")
    assert first == second

    uids = [ln for ln in unfold(first) if ln.startswith("UID:")]
    assert uids == ["UID:g1", "UID:g2"]


def test_render_ics_escapes_text():
    g = ResolvedGame(
        id="g1",
        home="Hawks; Blue",
        visitor="Owls, Jr.",
        start=datetime(2022, 5, 27, 20, 30, tzinfo=NY),
        location="Rink A\\North",
    )
    lines = unfold(render_ics(Schedule([g], NOW), "America/New_York"))

    assert r"SUMMARY:Owls\, Jr. at Hawks\; Blue" in lines
    assert r"LOCATION:Rink A\\North" in lines


def test_empty_schedule_renders_valid_calendar():
    ics = render_ics(Schedule([], NOW), "America/New_York")
    assert "BEGIN:VEVENT" not in ics
    assert ics.endswith("END:VCALENDAR\r\n")
    assert json.loads(render_json(Schedule([], NOW)))["games"] == []


def test_ics_escape():
    assert ics_escape("a,b;c\\d\ne\r\nf") == r"a\,b\;c\\d\ne\nf"


def test_fold_ics_line_respects_octets():
    line = "DESCRIPTION:" + "é" * 80
    parts = fold_ics_line(line)

    assert len(parts) > 1
    assert all(len(p.encode("utf-8")) <= 75 for p in parts)
    assert all(p.startswith(" ") for p in parts[1:])
    assert parts[0] + "".join(p[1:] for p in parts[1:]) == line
    assert fold_ics_line("SHORT:x") == ["SHORT:x"]


def test_renderers_do_not_mutate_schedule(payload, tz):
    schedule = build_schedule(parse_document(payload), tz, NOW)
    before = list(schedule.games)
    render_json(schedule)
    render_ics(schedule, "America/New_York")
    assert schedule.games == before
    assert schedule.last_updated == NOW


def test_game_end_is_ninety_real_minutes_across_fall_back(tz):
    start = parse_start_time("2022-11-06T00:45:00Z", tz)
    g = ResolvedGame(id="g1", home="Hawks", visitor="Owls", start=start, location="Rink A")

    end = game_end(g)
    assert end.astimezone(timezone.utc) - start.astimezone(timezone.utc) == timedelta(minutes=90)

    lines = unfold(render_ics(Schedule([g], NOW), "America/New_York"))
    assert "DTSTART;TZID=America/New_York:20221106T004500" in lines
    # 01:15 standard time, after the clocks went back
    assert "DTEND;TZID=America/New_York:20221106T011500" in lines


def test_game_in_spring_forward_gap_renders_real_wall_times(tz):
    start = parse_start_time("2022-03-13T02:30:00Z", tz)
    g = ResolvedGame(id="g1", home="Hawks", visitor="Owls", start=start, location="Rink A")

    lines = unfold(render_ics(Schedule([g], NOW), "America/New_York"))
    assert "DTSTART;TZID=America/New_York:20220313T033000" in lines
    assert "DTEND;TZID=America/New_York:20220313T050000" in lines
    assert json.loads(render_json(Schedule([g], NOW)))["games"][0]["scheduled_at"] == "2022-03-13T07:30:00Z"
