import datetime as dt
import logging
import unittest

from pomodoro.records import format_timestamp, store_defaults
from pomodoro.stats import StatsTracker
from store import InMemoryStore

_UTC = dt.timezone.utc


def _store_with(
    *,
    last_opened: dt.datetime,
    today: tuple[int, int] = (0, 0),
    week: tuple[int, int] = (0, 0),
    total: tuple[int, int] = (0, 0),
) -> InMemoryStore:
    store = InMemoryStore(store_defaults(last_opened))
    store.set(
        "stats",
        {
            "today": {"minutes": today[0], "sessions": today[1]},
            "week": {"minutes": week[0], "sessions": week[1]},
            "total": {"minutes": total[0], "sessions": total[1]},
        },
    )
    return store


class StatsTrackerRecordTests(unittest.TestCase):
    def test_record_session_adds_minutes_and_session_everywhere(self) -> None:
        store = _store_with(
            last_opened=dt.datetime(2024, 3, 4, tzinfo=_UTC),
            today=(10, 1),
            week=(60, 3),
            total=(1000, 40),
        )
        tracker = StatsTracker(store)

        stats = tracker.record_session(25)

        self.assertEqual(
            {
                "today": {"minutes": 35, "sessions": 2},
                "week": {"minutes": 85, "sessions": 4},
                "total": {"minutes": 1025, "sessions": 41},
            },
            store.get("stats"),
        )
        self.assertEqual(stats.to_dict(), store.get("stats"))

    def test_record_session_logs(self) -> None:
        store = _store_with(last_opened=dt.datetime(2024, 3, 4, tzinfo=_UTC))
        tracker = StatsTracker(store, logger=logging.getLogger("test.stats"))
        with self.assertLogs("test.stats", level="INFO") as captured:
            tracker.record_session(25)
        self.assertIn("Session recorded", captured.output[0])


class StatsTrackerResetTests(unittest.TestCase):
    def test_new_day_resets_today_only(self) -> None:
        now = dt.datetime(2024, 3, 6, 9, 0, tzinfo=_UTC)  # Wednesday
        store = _store_with(
            last_opened=now - dt.timedelta(days=1),
            today=(30, 2),
            week=(90, 4),
            total=(300, 12),
        )
        tracker = StatsTracker(store, now_fn=lambda: now)

        reset = tracker.check_stat_reset()

        self.assertEqual("today", reset)
        stats = store.get("stats")
        self.assertEqual({"minutes": 0, "sessions": 0}, stats["today"])
        self.assertEqual({"minutes": 90, "sessions": 4}, stats["week"])
        self.assertEqual({"minutes": 300, "sessions": 12}, stats["total"])

    def test_day_and_week_rollover_only_resets_today(self) -> None:
        now = dt.datetime(2024, 3, 11, 9, 0, tzinfo=_UTC)  # Monday, ISO week 11
        store = _store_with(
            last_opened=dt.datetime(2024, 3, 8, 18, 0, tzinfo=_UTC),  # Friday, week 10
            today=(25, 1),
            week=(125, 5),
            total=(125, 5),
        )
        tracker = StatsTracker(store, now_fn=lambda: now)

        reset = tracker.check_stat_reset()

        self.assertEqual("today", reset)
        stats = store.get("stats")
        self.assertEqual({"minutes": 0, "sessions": 0}, stats["today"])
        self.assertEqual({"minutes": 125, "sessions": 5}, stats["week"])

    def test_year_change_resets_today(self) -> None:
        now = dt.datetime(2025, 1, 1, 0, 5, tzinfo=_UTC)
        store = _store_with(
            last_opened=dt.datetime(2024, 12, 31, 23, 55, tzinfo=_UTC),
            today=(50, 2),
            total=(50, 2),
        )
        tracker = StatsTracker(store, now_fn=lambda: now)

        self.assertEqual("today", tracker.check_stat_reset())
        self.assertEqual({"minutes": 50, "sessions": 2}, store.get("stats")["total"])

    def test_same_day_does_not_reset(self) -> None:
        now = dt.datetime(2024, 3, 6, 18, 0, tzinfo=_UTC)
        store = _store_with(
            last_opened=dt.datetime(2024, 3, 6, 7, 0, tzinfo=_UTC),
            today=(30, 2),
            week=(90, 4),
        )
        tracker = StatsTracker(store, now_fn=lambda: now)

        self.assertEqual("none", tracker.check_stat_reset())
        stats = store.get("stats")
        self.assertEqual({"minutes": 30, "sessions": 2}, stats["today"])
        self.assertEqual({"minutes": 90, "sessions": 4}, stats["week"])

    def test_check_moves_last_opened_to_now(self) -> None:
        now = dt.datetime(2024, 3, 6, 9, 0, tzinfo=_UTC)
        store = _store_with(last_opened=now - dt.timedelta(days=3))
        tracker = StatsTracker(store, now_fn=lambda: now)

        tracker.check_stat_reset()

        self.assertEqual(format_timestamp(now), store.get("last_opened"))
        # A second start on the same day finds nothing to reset.
        self.assertEqual("none", tracker.check_stat_reset())

    def test_total_survives_any_rollover(self) -> None:
        now = dt.datetime(2030, 6, 1, tzinfo=_UTC)
        store = _store_with(
            last_opened=dt.datetime(2024, 3, 6, tzinfo=_UTC),
            today=(5, 1),
            week=(5, 1),
            total=(900, 36),
        )
        StatsTracker(store, now_fn=lambda: now).check_stat_reset()
        self.assertEqual({"minutes": 900, "sessions": 36}, store.get("stats")["total"])


if __name__ == "__main__":
    unittest.main()
