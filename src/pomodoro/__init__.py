from .errors import (
    CorruptRecordError,
    InvalidCommandError,
    NotificationError,
    PomodoroError,
    StoreUnavailableError,
)
from .phases import phase_for_session
from .records import Settings, Stat, Stats, store_defaults
from .service import CommandResult, PomodoroSnapshot, PomodoroStateMachine
from .stats import StatsTracker

__all__ = [
    "CommandResult",
    "CorruptRecordError",
    "InvalidCommandError",
    "NotificationError",
    "PomodoroError",
    "PomodoroSnapshot",
    "PomodoroStateMachine",
    "Settings",
    "Stat",
    "Stats",
    "StatsTracker",
    "StoreUnavailableError",
    "phase_for_session",
    "store_defaults",
]
