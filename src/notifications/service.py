"""Desktop notification delivery through plyer."""

from __future__ import annotations

import logging
from typing import Optional

from plyer import notification

from pomodoro.errors import NotificationError

from .config import NotificationConfig


class PhaseNotifier:
    """Shows a native notification each time the pomodoro phase changes."""

    def __init__(
        self,
        config: NotificationConfig,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._logger = logger or logging.getLogger("notifications")

    def notify(self, title: str, message: str) -> None:
        try:
            notification.notify(
                title=title,
                message=message,
                app_name=self._config.app_name,
                timeout=self._config.timeout_seconds,
            )
        except Exception as error:
            raise NotificationError(f"Failed to show notification: {error}") from error
        self._logger.debug("Notification shown: %s - %s", title, message)
