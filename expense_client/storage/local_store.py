from __future__ import annotations

import logging
import os

from ..errors.internal import StorageError
from .json_file import atomic_write_json, read_json


class LocalStore:
    """Durable string key/value store backed by a JSON file.

    Values are strings and every mutation is persisted immediately, so the
    file survives between runs. Reads go through an in-memory copy loaded
    on first use.
    """

    def __init__(self, path: str | os.PathLike[str]):
        """Initialize the LocalStore.

        Args:
            path: Path to the backing JSON file.
        """
        if not isinstance(path, str | os.PathLike):
            raise TypeError("path must be str or os.PathLike")
        self.path = str(path)
        self._data: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._data is None:
            raw = read_json(self.path)
            self._data = {str(k): v for k, v in raw.items() if isinstance(v, str)}
        return self._data

    def _persist(self, data: dict[str, str]) -> None:
        try:
            atomic_write_json(self.path, data)
        except (OSError, ValueError, TypeError) as e:
            # Force a reload next time so memory never drifts from disk.
            self._data = None
            raise StorageError(f"Cannot write local store {self.path}: {e}") from e

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError("LocalStore values must be strings")
        data = dict(self._load())
        data[key] = value
        self._persist(data)
        self._data = data

    def remove(self, key: str) -> None:
        data = self._load()
        if key not in data:
            return
        data = {k: v for k, v in data.items() if k != key}
        self._persist(data)
        self._data = data
        logging.debug(f"🗑️ Local store entry removed key={key}")

    def keys(self) -> list[str]:
        return sorted(self._load())
