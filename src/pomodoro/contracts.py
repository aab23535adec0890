"""Protocols describing the store, event sink and notifier used by the state machine."""

from __future__ import annotations

from typing import Any, Protocol


class KeyValueStore(Protocol):
    """Durable record store keyed by name; the source of truth for persisted state."""
    def get(self, key: str) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


class EventSink(Protocol):
    """Fire-and-forget channel towards the front-end."""
    def publish(self, event_type: str, **payload: Any) -> None:
        ...


class Notifier(Protocol):
    """Desktop notification delivery."""
    def notify(self, title: str, message: str) -> None:
        ...
