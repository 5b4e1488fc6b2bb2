"""
gamesheet-schedule

Flow:
- config.yml + flags -> Settings
- GameSheet schedule API -> one page of upcoming games for the season
- included records -> teams joined onto games, optional team filter
- write schedule.json and schedule.ics into the output dir, each atomically

Any failure exits 1 with a message. Games that reference unknown teams or
carry unreadable start times are skipped, not reported.
"""

from __future__ import annotations

import argparse
import logging
from datetime import datetime
from typing import List, Optional

import requests

from .api import fetch_schedule, schedule_url
from .config import Settings, build_settings, load_config
from .errors import ScheduleError
from .logger import get_logger
from .publish import publish, text_writer
from .records import ScheduledGame, parse_document
from .render import render_ics, render_json
from .schedule import build_schedule

JSON_NAME = "schedule.json"
ICS_NAME = "schedule.ics"

log = logging.getLogger("gamesheet_schedule")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gamesheet-schedule",
        description="Get a league's schedule as schedule.json and schedule.ics.",
    )
    parser.add_argument("-i", "--id", dest="season_id", type=int, help="GameSheet season id")
    parser.add_argument("-t", "--team", help="Only keep games involving this team (exact name)")
    parser.add_argument("-o", "--output", dest="output_dir", help="Directory to write the files into")
    parser.add_argument("-c", "--config", help="YAML config file (default: ./config.yml if present)")
    return parser


def run(settings: Settings, now: Optional[datetime] = None) -> List[str]:
    tz = settings.tz
    now = (now or datetime.now(tz)).astimezone(tz)

    log.info("Fetching %s", schedule_url(settings.base_url, settings.season_id))
    payload = fetch_schedule(
        settings.season_id,
        now,
        base_url=settings.base_url,
        limit=settings.limit,
        timeout=settings.timeout,
    )

    records = parse_document(payload)
    schedule = build_schedule(records, tz, now, team_filter=settings.team)

    n_raw = sum(1 for r in records if isinstance(r, ScheduledGame))
    log.info("Kept %d of %d scheduled games", len(schedule.games), n_raw)
    log.debug("Dropped %d games (unresolved team, filtered, or bad start time)", n_raw - len(schedule.games))

    written = publish(
        settings.output_dir,
        [
            (JSON_NAME, text_writer(render_json(schedule))),
            (ICS_NAME, text_writer(render_ics(schedule, settings.timezone, settings.calname, settings.category))),
        ],
    )
    for p in written:
        log.info("Wrote %s", p)
    return [str(p) for p in written]


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    get_logger("gamesheet_schedule")

    try:
        cfg = load_config(args.config)
        settings = build_settings(
            cfg,
            {"season_id": args.season_id, "team": args.team, "output_dir": args.output_dir},
        )
        get_logger("gamesheet_schedule", settings.log_level)
        run(settings)
    except ScheduleError as e:
        log.error("%s", e)
        return 1
    except requests.RequestException as e:
        log.error("Request failed: %s", e)
        return 1
    except ValueError as e:
        # response.json() on a non-JSON body
        log.error("Could not decode schedule response: %s", e)
        return 1
    except OSError as e:
        log.error("Could not write output: %s", e)
        return 1

    return 0
