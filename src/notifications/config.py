"""Configuration model for desktop phase notifications."""

from __future__ import annotations

from dataclasses import dataclass


class NotificationConfigurationError(Exception):
    """Raised when notification configuration is invalid."""


@dataclass(frozen=True)
class NotificationConfig:
    """Validated notification configuration derived from app settings."""
    enabled: bool = True
    app_name: str = "Pomodorio"
    timeout_seconds: int = 5

    def __post_init__(self) -> None:
        if not self.app_name.strip():
            raise NotificationConfigurationError("NOTIFICATIONS_APP_NAME cannot be empty")
        if self.timeout_seconds < 0:
            raise NotificationConfigurationError(
                f"NOTIFICATIONS_TIMEOUT_SECONDS must be >= 0, got: {self.timeout_seconds}"
            )

    @classmethod
    def from_settings(cls, settings) -> "NotificationConfig":
        return cls(
            enabled=bool(settings.enabled),
            app_name=settings.app_name,
            timeout_seconds=settings.timeout_seconds,
        )
