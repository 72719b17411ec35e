"""User preferences consumed by the cache refresh controller."""

from __future__ import annotations

import logging
from typing import Any

from catwiki.config import settings
from catwiki.storage.backend import StorageBackend

logger = logging.getLogger(__name__)


class Preferences:
    AUTO_UPDATE_PAGESDB_KEY = "autoUpdatePagesDB"
    AUTO_UPDATE_PAGESDB_INTERVAL_KEY = "autoUpdatePagesDBInterval"

    def __init__(self, storage: StorageBackend) -> None:
        self._storage = storage

    @staticmethod
    def defaults() -> dict[str, Any]:
        return {
            Preferences.AUTO_UPDATE_PAGESDB_KEY: settings.auto_update_default,
            Preferences.AUTO_UPDATE_PAGESDB_INTERVAL_KEY: settings.auto_update_interval_days,
        }

    async def init_defaults(self) -> None:
        """Write the default value of every preference that is not yet stored."""
        for key, value in self.defaults().items():
            if await self._storage.get(key) is None:
                await self._storage.set(key, value)
                logger.debug("[prefs] %s defaulted to %r", key, value)

    async def get_preference(self, key: str) -> Any:
        value = await self._storage.get(key)
        if value is None:
            return self.defaults().get(key)
        return value

    async def set_preference(self, key: str, value: Any) -> None:
        if key not in self.defaults():
            raise KeyError(f"unknown preference {key!r}")
        await self._storage.set(key, value)

    async def auto_update_enabled(self) -> bool:
        return bool(await self.get_preference(self.AUTO_UPDATE_PAGESDB_KEY))

    async def auto_update_interval_days(self) -> int:
        return int(await self.get_preference(self.AUTO_UPDATE_PAGESDB_INTERVAL_KEY))

    async def as_dict(self) -> dict[str, Any]:
        return {key: await self.get_preference(key) for key in self.defaults()}
