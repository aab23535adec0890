"""Persisted session statistics with day and ISO-week rollover."""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import replace
from typing import Callable, Optional

from .constants import (
    RESET_NONE,
    RESET_TODAY,
    RESET_WEEK,
    STORE_KEY_LAST_OPENED,
    STORE_KEY_STATS,
)
from .contracts import KeyValueStore
from .records import Stat, Stats, format_timestamp, parse_timestamp


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class StatsTracker:
    """Reads and writes the `stats` record kept in the durable store."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        now_fn: Callable[[], dt.datetime] = _utc_now,
        logger: Optional[logging.Logger] = None,
    ):
        self._store = store
        self._now_fn = now_fn
        self._logger = logger or logging.getLogger("pomodoro.stats")

    def load(self) -> Stats:
        return Stats.from_dict(self._store.get(STORE_KEY_STATS))

    def record_session(self, minutes: int) -> Stats:
        """Add one completed work session to every bucket in a single write."""
        stats = self.load().add_session(minutes)
        self._store.set(STORE_KEY_STATS, stats.to_dict())
        self._logger.info(
            "Session recorded: minutes=%s total_sessions=%s",
            minutes,
            stats.total.sessions,
        )
        return stats

    def check_stat_reset(self) -> str:
        """Reset `today` or `week` if a boundary passed since the last start.

        A day rollover wins over a week rollover: when both happened only
        `today` is cleared and the week bucket keeps its value. `last_opened`
        is moved to now afterwards so the next start compares against this one.

        Returns which bucket was reset (`today`, `week` or `none`).
        """
        last_opened = parse_timestamp(self._store.get(STORE_KEY_LAST_OPENED))
        stats = self.load()
        now = self._now_fn().astimezone(dt.timezone.utc)

        reset = RESET_NONE
        if (
            now.year != last_opened.year
            or now.timetuple().tm_yday != last_opened.timetuple().tm_yday
        ):
            self._store.set(STORE_KEY_STATS, replace(stats, today=Stat()).to_dict())
            reset = RESET_TODAY
        elif (
            now.year != last_opened.year
            or now.isocalendar()[1] != last_opened.isocalendar()[1]
        ):
            self._store.set(STORE_KEY_STATS, replace(stats, week=Stat()).to_dict())
            reset = RESET_WEEK

        self._store.set(STORE_KEY_LAST_OPENED, format_timestamp(now))
        if reset != RESET_NONE:
            self._logger.info(
                "Stats bucket reset: bucket=%s last_opened=%s",
                reset,
                last_opened.isoformat(),
            )
        return reset
