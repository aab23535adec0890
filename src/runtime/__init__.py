"""Runtime wiring exports."""

from .bootstrap import PomodoroRuntime, create_runtime
from .commands import CommandDispatcher
from .ui import RuntimeUIPublisher

__all__ = [
    "CommandDispatcher",
    "PomodoroRuntime",
    "RuntimeUIPublisher",
    "create_runtime",
]
