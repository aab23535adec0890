import asyncio
import datetime as dt
import json
import unittest

from server.events import StickyEventStore, enqueue_all, make_event


def _drain(outbox: asyncio.Queue) -> list[str]:
    messages = []
    while not outbox.empty():
        messages.append(outbox.get_nowait())
    return messages


class ServerEventsTests(unittest.TestCase):
    def test_make_event_serializes_timestamp_and_payload(self) -> None:
        now = dt.datetime(2026, 2, 21, 10, 0, tzinfo=dt.timezone.utc)
        raw = make_event("switch-phase", now_fn=lambda: now, payload="LongBreak")
        payload = json.loads(raw)

        self.assertEqual("switch-phase", payload["type"])
        self.assertEqual(now.isoformat(), payload["timestamp"])
        self.assertEqual("LongBreak", payload["payload"])

    def test_sticky_store_ignores_non_sticky_events(self) -> None:
        store = StickyEventStore()
        store.remember("hello", '{"type":"hello"}')
        store.remember("command_result", '{"type":"command_result"}')
        store.remember("error", '{"type":"error"}')
        self.assertEqual([], store.snapshot())

    def test_sticky_store_snapshot_follows_stable_order(self) -> None:
        store = StickyEventStore()
        store.remember("stats", '{"type":"stats","n":1}')
        store.remember("remaining", '{"type":"remaining","n":2}')
        store.remember("session-number", '{"type":"session-number","n":3}')
        store.remember("switch-phase", '{"type":"switch-phase","n":4}')

        snapshot = store.snapshot()
        decoded_types = [json.loads(item)["type"] for item in snapshot]
        self.assertEqual(
            ["switch-phase", "session-number", "remaining", "stats"],
            decoded_types,
        )

    def test_sticky_store_overwrites_latest_event_by_type(self) -> None:
        store = StickyEventStore()
        store.remember("remaining", '{"type":"remaining","payload":25}')
        store.remember("remaining", '{"type":"remaining","payload":5}')
        snapshot = store.snapshot()

        self.assertEqual(1, len(snapshot))
        self.assertEqual(5, json.loads(snapshot[0])["payload"])

    def test_subscribe_queues_replay_before_live_events(self) -> None:
        store = StickyEventStore()
        store.remember("switch-phase", "phase-work")
        store.remember("remaining", "remaining-25")
        outbox: asyncio.Queue = asyncio.Queue()

        store.subscribe(outbox)
        store.dispatch("remaining", "remaining-5")

        self.assertEqual(["phase-work", "remaining-25", "remaining-5"], _drain(outbox))
        self.assertEqual(["phase-work", "remaining-5"], store.snapshot())

    def test_dispatch_reaches_every_subscriber_and_skips_departed_ones(self) -> None:
        store = StickyEventStore()
        staying: asyncio.Queue = asyncio.Queue()
        leaving: asyncio.Queue = asyncio.Queue()
        store.subscribe(staying)
        store.subscribe(leaving)

        store.dispatch("session-number", "session-1")
        store.unsubscribe(leaving)
        store.dispatch("session-number", "session-2")

        self.assertEqual(["session-1", "session-2"], _drain(staying))
        self.assertEqual(["session-1"], _drain(leaving))
        self.assertEqual(1, store.subscriber_count)

    def test_non_sticky_dispatch_is_delivered_but_not_replayed(self) -> None:
        store = StickyEventStore()
        outbox: asyncio.Queue = asyncio.Queue()
        store.subscribe(outbox)

        store.dispatch("error", "error-1")

        self.assertEqual(["error-1"], _drain(outbox))
        self.assertEqual([], store.snapshot())

    def test_enqueue_all_keeps_order(self) -> None:
        outbox: asyncio.Queue = asyncio.Queue()
        enqueue_all(outbox, ["a", "b", "c"])
        self.assertEqual(["a", "b", "c"], _drain(outbox))


if __name__ == "__main__":
    unittest.main()
