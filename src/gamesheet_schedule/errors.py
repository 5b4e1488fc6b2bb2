from __future__ import annotations


class ScheduleError(RuntimeError):
    pass


class RecordError(ScheduleError):
    """The upstream document could not be decoded."""


class ConfigError(ScheduleError):
    pass
