"""Configuration model for the durable record store."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .json_store import STORE_FILE_NAME

BACKEND_JSON = "json"
BACKEND_MEMORY = "memory"
_BACKENDS = (BACKEND_JSON, BACKEND_MEMORY)


class StoreConfigurationError(Exception):
    """Raised when store configuration is invalid."""


@dataclass(frozen=True)
class StoreConfig:
    """Validated store configuration derived from app settings."""
    backend: str = BACKEND_JSON
    data_dir: str = ""

    def __post_init__(self) -> None:
        if self.backend not in _BACKENDS:
            allowed = ", ".join(_BACKENDS)
            raise StoreConfigurationError(f"STORE_BACKEND must be one of: {allowed}")

        if self.backend == BACKEND_JSON:
            if not self.data_dir:
                raise StoreConfigurationError("STORE_DATA_DIR cannot be empty")
            data_path = Path(self.data_dir)
            if data_path.exists() and not data_path.is_dir():
                raise StoreConfigurationError(
                    f"Store data path is not a directory: {data_path}"
                )

    @property
    def store_file(self) -> Path:
        return Path(self.data_dir) / STORE_FILE_NAME

    @classmethod
    def from_settings(cls, settings) -> "StoreConfig":
        raw_backend = getattr(settings, "backend", BACKEND_JSON)
        backend = raw_backend.strip().lower() if raw_backend else BACKEND_JSON
        return cls(backend=backend, data_dir=settings.data_dir)
