"""Durable key-value store backends for settings and statistics."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from pomodoro.contracts import KeyValueStore

from .config import BACKEND_JSON, BACKEND_MEMORY, StoreConfig, StoreConfigurationError
from .json_store import STORE_FILE_NAME, JsonFileStore
from .memory import InMemoryStore


def open_store(
    config: StoreConfig,
    *,
    defaults: Mapping[str, Any],
    logger: Optional[logging.Logger] = None,
) -> KeyValueStore:
    """Open the configured backend with `defaults` seeded for missing keys."""
    if config.backend == BACKEND_MEMORY:
        return InMemoryStore(defaults)
    return JsonFileStore(config.store_file, defaults=defaults, logger=logger)


__all__ = [
    "BACKEND_JSON",
    "BACKEND_MEMORY",
    "InMemoryStore",
    "JsonFileStore",
    "STORE_FILE_NAME",
    "StoreConfig",
    "StoreConfigurationError",
    "open_store",
]
