"""Front-end websocket event and command constants."""

from __future__ import annotations

# Websocket event types
EVENT_HELLO = "hello"
EVENT_SWITCH_PHASE = "switch-phase"
EVENT_SESSION_NUMBER = "session-number"
EVENT_REMAINING = "remaining"
EVENT_SETTINGS = "settings"
EVENT_STATS = "stats"
EVENT_COMMAND_RESULT = "command_result"
EVENT_ERROR = "error"

# Key carrying the event value next to `type` and `timestamp`
PAYLOAD_KEY = "payload"

# Key naming the command in inbound front-end messages
COMMAND_KEY = "command"

STICKY_EVENT_TYPES: frozenset[str] = frozenset(
    {
        EVENT_SWITCH_PHASE,
        EVENT_SESSION_NUMBER,
        EVENT_REMAINING,
        EVENT_SETTINGS,
        EVENT_STATS,
    }
)

STICKY_EVENT_ORDER: tuple[str, ...] = (
    EVENT_SWITCH_PHASE,
    EVENT_SESSION_NUMBER,
    EVENT_REMAINING,
    EVENT_SETTINGS,
    EVENT_STATS,
)
