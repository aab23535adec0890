"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_DATA_DIR = "~/.local/share/pomodorio"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class StoreSettings:
    """Durable store backend and location from `[store]`."""
    backend: str = "json"
    data_dir: str = DEFAULT_DATA_DIR


@dataclass(frozen=True)
class UIServerSettings:
    """Front-end websocket server settings from `[ui_server]`."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    command_workers: int = 4


@dataclass(frozen=True)
class NotificationSettings:
    """Desktop notification settings from `[notifications]`."""
    enabled: bool = True
    app_name: str = "Pomodorio"
    timeout_seconds: int = 5


@dataclass(frozen=True)
class LoggingSettings:
    """Root logger settings from `[logging]`."""
    level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    store: StoreSettings = field(default_factory=StoreSettings)
    ui_server: UIServerSettings = field(default_factory=UIServerSettings)
    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    source_file: str = ""
