from .constants import REASON_INVALID_ARGUMENTS


class PomodoroError(Exception):
    """Base exception for pomodoro runtime failures."""


class StoreUnavailableError(PomodoroError):
    """Raised when the durable store cannot be read or written."""


class CorruptRecordError(PomodoroError):
    """Raised when a stored record does not match its expected shape."""


class InvalidCommandError(PomodoroError):
    """Raised when a front-end command is unknown or has malformed arguments."""

    def __init__(self, message: str, *, reason: str = REASON_INVALID_ARGUMENTS):
        super().__init__(message)
        self.reason = reason


class NotificationError(PomodoroError):
    """Raised when a desktop notification cannot be delivered."""
