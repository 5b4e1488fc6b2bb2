"""
Runtime settings.

Sources, later wins:
- config.yml (optional unless passed explicitly with --config)
- command-line flags
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from .api import BASE_URL, PAGE_LIMIT, TIMEOUT_SECONDS
from .errors import ConfigError
from .render import DEFAULT_CATEGORY

DEFAULT_CONFIG_PATH = "config.yml"
TZ_NAME_DEFAULT = "America/New_York"


@dataclass(frozen=True)
class Settings:
    season_id: int
    output_dir: str
    team: Optional[str] = None
    timezone: str = TZ_NAME_DEFAULT
    base_url: str = BASE_URL
    limit: int = PAGE_LIMIT
    timeout: int = TIMEOUT_SECONDS
    calendar_name: str = ""
    category: str = DEFAULT_CATEGORY
    log_level: str = "INFO"

    @property
    def tz(self) -> ZoneInfo:
        return load_timezone(self.timezone)

    @property
    def calname(self) -> str:
        if self.calendar_name:
            return self.calendar_name
        if self.team:
            return f"{self.team} Schedule"
        return f"Season {self.season_id} Schedule"


def load_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"Unknown timezone {name!r}") from e


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Read the YAML config. A missing default file is fine, an explicit one is not."""
    explicit = path is not None
    path = path or DEFAULT_CONFIG_PATH

    if not os.path.exists(path):
        if explicit:
            raise ConfigError(f"Config file not found: {path}")
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse {path}: {e}") from e

    if not isinstance(cfg, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return cfg


def _int(cfg: Dict[str, Any], key: str, default: Optional[int] = None) -> Optional[int]:
    value = cfg.get(key)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be an integer, got {value!r}") from e


def build_settings(cfg: Dict[str, Any], overrides: Optional[Dict[str, Any]] = None) -> Settings:
    merged = dict(cfg)
    for key, value in (overrides or {}).items():
        if value is not None:
            merged[key] = value

    season_id = _int(merged, "season_id")
    if season_id is None:
        raise ConfigError("A season id is required (--id or season_id in config.yml)")

    output_dir = str(merged.get("output_dir") or "").strip()
    if not output_dir:
        raise ConfigError("An output directory is required (--output or output_dir in config.yml)")

    team = merged.get("team")
    tz_name = str(merged.get("timezone") or TZ_NAME_DEFAULT)
    load_timezone(tz_name)

    return Settings(
        season_id=season_id,
        output_dir=output_dir,
        team=str(team) if team not in (None, "") else None,
        timezone=tz_name,
        base_url=str(merged.get("base_url") or BASE_URL),
        limit=_int(merged, "limit", PAGE_LIMIT),
        timeout=_int(merged, "timeout", TIMEOUT_SECONDS),
        calendar_name=str(merged.get("calendar_name") or ""),
        category=str(merged.get("category") or DEFAULT_CATEGORY),
        log_level=str(merged.get("log_level") or "INFO"),
    )
