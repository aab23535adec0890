"""Phase, command, reason and default constants used by pomodoro runtime logic."""

from __future__ import annotations

PHASE_WORK = "Work"
PHASE_SHORT_BREAK = "ShortBreak"
PHASE_LONG_BREAK = "LongBreak"

BREAK_PHASES: frozenset[str] = frozenset({PHASE_SHORT_BREAK, PHASE_LONG_BREAK})

DEFAULT_WORK_TIME = 25
DEFAULT_SHORT_BREAK_TIME = 5
DEFAULT_LONG_BREAK_TIME = 20
DEFAULT_LONG_BREAK_INTERVAL = 4

STORE_KEY_SETTINGS = "settings"
STORE_KEY_STATS = "stats"
STORE_KEY_LAST_OPENED = "last_opened"

STAT_BUCKETS: tuple[str, ...] = ("today", "week", "total")

NOTIFICATION_TITLE = "Phase changed"
NOTIFICATION_BODIES: dict[str, str] = {
    PHASE_WORK: "Time to get back to work!",
    PHASE_SHORT_BREAK: "Have a little rest!",
    PHASE_LONG_BREAK: "Take some extra time to relax!",
}

COMMAND_SWITCH_PHASE = "switch_phase"
COMMAND_RESET_PHASE = "reset_phase"
COMMAND_UPDATE_SETTINGS = "update_settings"
COMMAND_RESTORE_STATE = "restore_state"
COMMAND_GET_SETTINGS = "get_settings"
COMMAND_GET_STATS = "get_stats"

REASON_ADVANCED = "advanced"
REASON_REVERTED = "reverted"
REASON_RESET = "reset"
REASON_RESTORED = "restored"
REASON_SETTINGS_UPDATED = "settings_updated"
REASON_SETTINGS_SENT = "settings_sent"
REASON_STATS_SENT = "stats_sent"
REASON_UNSUPPORTED_COMMAND = "unsupported_command"
REASON_INVALID_ARGUMENTS = "invalid_arguments"
REASON_STORE_UNAVAILABLE = "store_unavailable"
REASON_CORRUPT_RECORD = "corrupt_record"

RESET_NONE = "none"
RESET_TODAY = "today"
RESET_WEEK = "week"
