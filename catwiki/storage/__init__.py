"""Storage package: key/value backends, preferences and the refresh controller."""

from catwiki.storage.backend import JsonFileStorage, MemoryStorage, StorageBackend
from catwiki.storage.cache import CacheRefreshController, RefreshOutcome
from catwiki.storage.preferences import Preferences

__all__ = [
    "StorageBackend",
    "JsonFileStorage",
    "MemoryStorage",
    "Preferences",
    "CacheRefreshController",
    "RefreshOutcome",
]
