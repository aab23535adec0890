"""Desktop notification module for phase changes."""

from .config import NotificationConfig, NotificationConfigurationError
from .service import PhaseNotifier

__all__ = [
    "NotificationConfig",
    "NotificationConfigurationError",
    "PhaseNotifier",
]
