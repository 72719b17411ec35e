"""Key/value storage backends for the cache and preference records.

Every call either completes or raises :class:`~catwiki.errors.StorageError`;
backends never return partial results.
"""

from __future__ import annotations

import asyncio
import json
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from catwiki.errors import StorageError

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class StorageBackend(ABC):
    """Abstract async key/value store."""

    @abstractmethod
    async def get(self, key: str) -> Any:
        """Return the stored value, or ``None`` if *key* is absent."""

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store a JSON-serialisable *value* under *key*."""

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Delete *key*; removing an absent key is not an error."""

    async def set_many(self, values: dict[str, Any]) -> None:
        for key, value in values.items():
            await self.set(key, value)


class MemoryStorage(StorageBackend):
    """Process-local store, used by tests and as a throwaway backend."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    async def get(self, key: str) -> Any:
        return self._data.get(key)

    async def set(self, key: str, value: Any) -> None:
        try:
            # Round-trip so stored values behave like the file backend's
            self._data[key] = json.loads(json.dumps(value))
        except (TypeError, ValueError) as exc:
            raise StorageError(key, f"value is not JSON-serialisable ({exc})") from exc

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage(StorageBackend):
    """One JSON document per key under *directory*.

    Writes go to a temporary file in the same directory and are moved into
    place with :func:`os.replace`, so a crash never leaves a truncated record.
    File access runs in the loop's default executor.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise StorageError(key, "invalid storage key")
        return self.directory / f"{key}.json"

    async def get(self, key: str) -> Any:
        path = self._path(key)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read, key, path)

    async def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise StorageError(key, f"value is not JSON-serialisable ({exc})") from exc

        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._write, key, path, payload)

    async def remove(self, key: str) -> None:
        path = self._path(key)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._unlink, key, path)

    # ------------------------------------------------------------------
    # Blocking helpers (executor threads only)
    # ------------------------------------------------------------------
    @staticmethod
    def _read(key: str, path: Path) -> Any:
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageError(key, f"read failed ({exc})") from exc

    def _write(self, key: str, path: Path, payload: str) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(key, f"write failed ({exc})") from exc

    @staticmethod
    def _unlink(key: str, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(key, f"remove failed ({exc})") from exc
