"""Event envelopes and per-client fan-out with sticky replay."""

from __future__ import annotations

import asyncio
import json
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Iterable

from contracts.ui_protocol import STICKY_EVENT_ORDER, STICKY_EVENT_TYPES


def make_event(
    event_type: str,
    *,
    now_fn: Callable[[], datetime] | None = None,
    **payload: Any,
) -> str:
    """Encode `{"type", "timestamp", ...payload}` as one websocket text frame."""
    now = now_fn() if now_fn is not None else datetime.now(timezone.utc)
    return json.dumps({"type": event_type, "timestamp": now.isoformat(), **payload})


class StickyEventStore:
    """Latest state events plus the outbound queue of every connected client.

    `subscribe`, `unsubscribe` and `dispatch` touch asyncio queues and must run
    on the server loop. `remember` may be called from any thread while no loop
    is serving. Subscribing copies the replay into the new queue and registers
    it under one lock, so a client never sees a replayed event that is older
    than a live one.
    """

    def __init__(self):
        self._events: dict[str, str] = {}
        self._subscribers: set[asyncio.Queue[str]] = set()
        self._lock = threading.Lock()

    def remember(self, event_type: str, message: str) -> None:
        if event_type not in STICKY_EVENT_TYPES:
            return
        with self._lock:
            self._events[event_type] = message

    def snapshot(self) -> list[str]:
        with self._lock:
            return self._snapshot_locked()

    def subscribe(self, outbox: asyncio.Queue[str]) -> None:
        with self._lock:
            for message in self._snapshot_locked():
                outbox.put_nowait(message)
            self._subscribers.add(outbox)

    def unsubscribe(self, outbox: asyncio.Queue[str]) -> None:
        with self._lock:
            self._subscribers.discard(outbox)

    def dispatch(self, event_type: str, message: str) -> None:
        with self._lock:
            if event_type in STICKY_EVENT_TYPES:
                self._events[event_type] = message
            for outbox in self._subscribers:
                outbox.put_nowait(message)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def _snapshot_locked(self) -> list[str]:
        return [self._events[key] for key in STICKY_EVENT_ORDER if key in self._events]


def enqueue_all(outbox: asyncio.Queue[str], messages: Iterable[str]) -> None:
    for message in messages:
        outbox.put_nowait(message)
