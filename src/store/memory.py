"""Ephemeral in-process key-value store."""

from __future__ import annotations

import copy
import threading
from typing import Any, Mapping, Optional

from pomodoro.errors import CorruptRecordError


class InMemoryStore:
    """Dict-backed store with the same copy semantics as the file store."""

    def __init__(self, defaults: Optional[Mapping[str, Any]] = None):
        self._lock = threading.Lock()
        self._data: dict[str, Any] = copy.deepcopy(dict(defaults or {}))

    def get(self, key: str) -> Any:
        with self._lock:
            if key not in self._data:
                raise CorruptRecordError(f"Store field does not exist: {key}")
            return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)
