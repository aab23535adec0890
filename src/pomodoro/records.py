"""Persisted settings and statistics records with strict dict (de)serialization."""

from __future__ import annotations

import datetime as dt
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping

from .constants import (
    DEFAULT_LONG_BREAK_INTERVAL,
    DEFAULT_LONG_BREAK_TIME,
    DEFAULT_SHORT_BREAK_TIME,
    DEFAULT_WORK_TIME,
    PHASE_LONG_BREAK,
    PHASE_SHORT_BREAK,
    PHASE_WORK,
    STAT_BUCKETS,
    STORE_KEY_LAST_OPENED,
    STORE_KEY_SETTINGS,
    STORE_KEY_STATS,
)
from .errors import CorruptRecordError


@dataclass(frozen=True)
class Settings:
    """Phase durations in minutes and the number of work sessions per long break."""
    work_time: int = DEFAULT_WORK_TIME
    short_break_time: int = DEFAULT_SHORT_BREAK_TIME
    long_break_time: int = DEFAULT_LONG_BREAK_TIME
    long_break_interval: int = DEFAULT_LONG_BREAK_INTERVAL

    def duration_for(self, phase: str) -> int:
        if phase == PHASE_WORK:
            return self.work_time
        if phase == PHASE_SHORT_BREAK:
            return self.short_break_time
        if phase == PHASE_LONG_BREAK:
            return self.long_break_time
        raise ValueError(f"Unknown phase: {phase}")

    def to_dict(self) -> dict[str, int]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Any) -> "Settings":
        section = _as_mapping(raw, STORE_KEY_SETTINGS)
        return cls(
            work_time=_required_int(section, "work_time", STORE_KEY_SETTINGS),
            short_break_time=_required_int(
                section,
                "short_break_time",
                STORE_KEY_SETTINGS,
            ),
            long_break_time=_required_int(
                section,
                "long_break_time",
                STORE_KEY_SETTINGS,
            ),
            long_break_interval=_required_int(
                section,
                "long_break_interval",
                STORE_KEY_SETTINGS,
            ),
        )


@dataclass(frozen=True)
class Stat:
    """Accumulated minutes and completed work sessions for one bucket."""
    minutes: int = 0
    sessions: int = 0

    def add_session(self, minutes: int) -> "Stat":
        return Stat(minutes=self.minutes + minutes, sessions=self.sessions + 1)

    @classmethod
    def from_dict(cls, raw: Any, name: str) -> "Stat":
        section = _as_mapping(raw, name)
        return cls(
            minutes=_required_int(section, "minutes", name),
            sessions=_required_int(section, "sessions", name),
        )


@dataclass(frozen=True)
class Stats:
    """Rolling `today` and `week` aggregates plus the lifetime `total`."""
    today: Stat = field(default_factory=Stat)
    week: Stat = field(default_factory=Stat)
    total: Stat = field(default_factory=Stat)

    def add_session(self, minutes: int) -> "Stats":
        return Stats(
            today=self.today.add_session(minutes),
            week=self.week.add_session(minutes),
            total=self.total.add_session(minutes),
        )

    def to_dict(self) -> dict[str, dict[str, int]]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Any) -> "Stats":
        section = _as_mapping(raw, STORE_KEY_STATS)
        buckets = {
            bucket: Stat.from_dict(
                section.get(bucket),
                f"{STORE_KEY_STATS}.{bucket}",
            )
            for bucket in STAT_BUCKETS
        }
        return cls(**buckets)


def format_timestamp(value: dt.datetime) -> str:
    return value.astimezone(dt.timezone.utc).isoformat()


def parse_timestamp(raw: Any) -> dt.datetime:
    """Parse a stored ISO 8601 instant and normalize it to UTC."""
    if not isinstance(raw, str) or not raw.strip():
        raise CorruptRecordError(f"{STORE_KEY_LAST_OPENED} must be an ISO 8601 string.")

    text = raw.strip()
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    try:
        parsed = dt.datetime.fromisoformat(text)
    except ValueError as error:
        raise CorruptRecordError(
            f"{STORE_KEY_LAST_OPENED} is not a valid timestamp: {raw!r}"
        ) from error

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=dt.timezone.utc)
    return parsed.astimezone(dt.timezone.utc)


def store_defaults(now: dt.datetime) -> dict[str, Any]:
    """Default records seeded into a store the first time it is opened."""
    return {
        STORE_KEY_SETTINGS: Settings().to_dict(),
        STORE_KEY_STATS: Stats().to_dict(),
        STORE_KEY_LAST_OPENED: format_timestamp(now),
    }


def _as_mapping(raw: Any, name: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise CorruptRecordError(f"{name} must be an object.")
    return raw


def _required_int(section: Mapping[str, Any], field_name: str, name: str) -> int:
    if field_name not in section:
        raise CorruptRecordError(f"{name}.{field_name} is missing.")
    value = section[field_name]
    # bool is an int subclass but never a valid count.
    if isinstance(value, bool) or not isinstance(value, int):
        raise CorruptRecordError(f"{name}.{field_name} must be an integer.")
    return value
