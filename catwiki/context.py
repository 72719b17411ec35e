"""The application context: one index, one store, one refresh controller.

Built once by the CLI or the API lifespan and passed to whatever needs it.
There are no module-level instances of these objects.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from catwiki.config import settings
from catwiki.errors import StorageError
from catwiki.pages.index import PageIndex
from catwiki.scanners.pipeline import ScannerPipeline
from catwiki.storage.backend import JsonFileStorage, StorageBackend
from catwiki.storage.cache import CacheRefreshController, RefreshOutcome
from catwiki.storage.preferences import Preferences

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    pages_db: PageIndex
    storage: StorageBackend
    preferences: Preferences
    cache: CacheRefreshController
    pipeline: ScannerPipeline = field(default_factory=ScannerPipeline)


def build_context(
    storage: Optional[StorageBackend] = None,
    storage_dir: Optional[Path] = None,
) -> AppContext:
    """Wire up a context whose index already holds the embedded default data."""
    if storage is None:
        directory = storage_dir or settings.storage_dir
        storage = JsonFileStorage(directory)

    pages_db = PageIndex()
    pages_db.init_default_pages()
    preferences = Preferences(storage)
    cache = CacheRefreshController(pages_db, storage, preferences)
    return AppContext(pages_db=pages_db, storage=storage, preferences=preferences, cache=cache)


async def load_cached_pages(ctx: AppContext) -> bool:
    """Swap a valid persisted export into the index without touching the network."""
    cached = await ctx.cache.get_cached_pages_db()
    if cached is not None and ctx.cache.validate_pages_db(cached):
        ctx.pages_db.set_pages(cached)
        return True
    logger.debug("No valid cached pages database; keeping embedded defaults.")
    return False


async def _init_preferences(ctx: AppContext) -> None:
    try:
        await ctx.preferences.init_defaults()
    except StorageError as exc:
        logger.warning("Could not write preference defaults: %s", exc)


async def start_background_refresh(ctx: AppContext) -> None:
    """Write preference defaults and start the refresh timer."""
    await _init_preferences(ctx)
    ctx.cache.start()


async def refresh_once(ctx: AppContext, force: bool = False) -> RefreshOutcome:
    await _init_preferences(ctx)
    return await ctx.cache.update_pages_db(force=force)
