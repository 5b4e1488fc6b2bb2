"""GameSheet stats API: one bounded page of a season's upcoming games."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

import requests

BASE_URL = "https://gamesheet.app"
SCHEDULE_PATH_TMPL = "/api/stats/v1/seasons/{season_id}/schedule"
PAGE_LIMIT = 50
TIMEOUT_SECONDS = 30


def schedule_url(base_url: str, season_id: int) -> str:
    return base_url.rstrip("/") + SCHEDULE_PATH_TMPL.format(season_id=season_id)


def schedule_params(now_local: datetime, limit: int = PAGE_LIMIT) -> Dict[str, Any]:
    # upstream wants local midnight, labelled Z like its own timestamps
    return {
        "offset": 0,
        "limit": limit,
        "start_time_from": now_local.strftime("%Y-%m-%dT00:00:00Z"),
    }


def fetch_json(url: str, params: Dict[str, Any], timeout: int = TIMEOUT_SECONDS) -> Any:
    r = requests.get(url, params=params, timeout=timeout)
    r.raise_for_status()
    return r.json()


def fetch_schedule(
    season_id: int,
    now_local: datetime,
    base_url: str = BASE_URL,
    limit: int = PAGE_LIMIT,
    timeout: int = TIMEOUT_SECONDS,
) -> Any:
    return fetch_json(schedule_url(base_url, season_id), schedule_params(now_local, limit), timeout)
