"""JSON file backed key-value store with defaults seeded on first open."""

from __future__ import annotations

import copy
import json
import logging
import threading
from pathlib import Path
from typing import Any, Mapping, Optional

from pomodoro.errors import CorruptRecordError, StoreUnavailableError

STORE_FILE_NAME = ".store.dat"

_MISSING = object()


class JsonFileStore:
    """Whole-file JSON store; every `set` rewrites the file atomically."""

    def __init__(
        self,
        path: str | Path,
        *,
        defaults: Optional[Mapping[str, Any]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._path = Path(path)
        self._logger = logger or logging.getLogger("store")
        self._lock = threading.Lock()
        self._data: dict[str, Any] = self._load()

        seeded = [key for key in (defaults or {}) if key not in self._data]
        for key in seeded:
            self._data[key] = copy.deepcopy(defaults[key])  # type: ignore[index]
        if seeded or not self._path.exists():
            with self._lock:
                self._save_locked()
            self._logger.info(
                "Store defaults seeded: path=%s keys=%s",
                self._path,
                ", ".join(seeded) or "-",
            )

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> Any:
        with self._lock:
            if key not in self._data:
                raise CorruptRecordError(f"Store field does not exist: {key}")
            return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            previous = self._data.get(key, _MISSING)
            self._data[key] = copy.deepcopy(value)
            try:
                self._save_locked()
            except (StoreUnavailableError, CorruptRecordError):
                if previous is _MISSING:
                    self._data.pop(key, None)
                else:
                    self._data[key] = previous
                raise
        self._logger.debug("Store field written: %s", key)

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as error:
            raise StoreUnavailableError(
                f"Failed to read store file {self._path}: {error}"
            ) from error

        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as error:
            raise CorruptRecordError(
                f"Store file {self._path} is not valid JSON: {error}"
            ) from error
        if not isinstance(data, dict):
            raise CorruptRecordError(f"Store file {self._path} must hold a JSON object.")
        return data

    def _save_locked(self) -> None:
        try:
            content = json.dumps(self._data, indent=2, sort_keys=True)
        except (TypeError, ValueError) as error:
            raise CorruptRecordError(f"Store record is not JSON serializable: {error}") from error

        temp_path = self._path.with_suffix(f"{self._path.suffix}.tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(content, encoding="utf-8")
            temp_path.replace(self._path)
        except OSError as error:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    pass
            raise StoreUnavailableError(
                f"Failed to write store file {self._path}: {error}"
            ) from error
