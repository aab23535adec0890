"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from app_config_schema import (
    DEFAULT_DATA_DIR,
    AppConfig,
    AppConfigurationError,
    LoggingSettings,
    NotificationSettings,
    StoreSettings,
    UIServerSettings,
)

_ALLOWED_STORE_BACKENDS = {"json", "memory"}
_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    store = _parse_store_settings(_section(raw, "store"), base_dir=base_dir)
    ui_server = _parse_ui_server_settings(_section(raw, "ui_server"))
    notifications = _parse_notification_settings(_section(raw, "notifications"))
    logging_settings = _parse_logging_settings(_section(raw, "logging"))

    return AppConfig(
        store=store,
        ui_server=ui_server,
        notifications=notifications,
        logging=logging_settings,
        source_file=source_file,
    )


def _parse_store_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> StoreSettings:
    backend = _as_choice(
        section.get("backend", "json"),
        "store.backend",
        _ALLOWED_STORE_BACKENDS,
    )
    data_dir = _as_str(section.get("data_dir", DEFAULT_DATA_DIR), "store.data_dir")
    return StoreSettings(
        backend=backend,
        data_dir=_resolve_path(base_dir, data_dir or DEFAULT_DATA_DIR),
    )


def _parse_ui_server_settings(section: Mapping[str, Any]) -> UIServerSettings:
    return UIServerSettings(
        enabled=_as_bool(section.get("enabled", True), "ui_server.enabled"),
        host=_as_str(section.get("host", "127.0.0.1"), "ui_server.host"),
        port=_as_int(section.get("port", 8765), "ui_server.port"),
        command_workers=_as_int(
            section.get("command_workers", 4),
            "ui_server.command_workers",
        ),
    )


def _parse_notification_settings(section: Mapping[str, Any]) -> NotificationSettings:
    return NotificationSettings(
        enabled=_as_bool(section.get("enabled", True), "notifications.enabled"),
        app_name=_as_str(
            section.get("app_name", "Pomodorio"),
            "notifications.app_name",
        ),
        timeout_seconds=_as_int(
            section.get("timeout_seconds", 5),
            "notifications.timeout_seconds",
        ),
    )


def _parse_logging_settings(section: Mapping[str, Any]) -> LoggingSettings:
    level = _as_str(section.get("level", "INFO"), "logging.level").upper()
    if level not in _ALLOWED_LOG_LEVELS:
        allowed = ", ".join(sorted(_ALLOWED_LOG_LEVELS))
        raise AppConfigurationError(f"logging.level must be one of: {allowed}.")
    return LoggingSettings(level=level)


def log_level(settings: LoggingSettings) -> int:
    return logging.getLevelName(settings.level)


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_choice(value: Any, field: str, allowed: set[str]) -> str:
    name = _as_str(value, field).lower()
    if name not in allowed:
        choices = ", ".join(sorted(allowed))
        raise AppConfigurationError(f"{field} must be one of: {choices}.")
    return name


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)
