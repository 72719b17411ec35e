"""Background refresh of the page index from the remote cargo export.

One refresh cycle::

    CheckStaleness ──fresh──▶ UseCache ──valid──▶ swap into index
          │                       │
          └──stale / forced──▶ Fetch ◀──missing / invalid
                                  │
                              Validate ──invalid──▶ discard (index unchanged)
                                  │
                              Commit: persist blob + timestamp, swap into index

Cycles run once at startup and then on a recurring asyncio timer.  At most
one cycle is in flight at a time; a second request while one is running
returns :attr:`RefreshOutcome.IN_PROGRESS` straight away.  Nothing raised
inside a cycle escapes :meth:`CacheRefreshController.update_pages_db`.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from enum import Enum
from typing import Any, Callable, Optional

import httpx

from catwiki.config import settings
from catwiki.errors import FetchError, StorageError
from catwiki.pages.cargo import validate_cargo_export
from catwiki.pages.index import PageIndex
from catwiki.storage.backend import StorageBackend
from catwiki.storage.preferences import Preferences

logger = logging.getLogger(__name__)

_MS_PER_DAY = 24 * 60 * 60 * 1000

_DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "catwiki-page-matcher/0.1 (+https://consumerrights.wiki)",
}


def epoch_millis() -> int:
    return int(time.time() * 1000)


class RefreshOutcome(str, Enum):
    CACHE = "cache"
    FETCHED = "fetched"
    DISCARDED = "discarded"
    FAILED = "failed"
    IN_PROGRESS = "in_progress"


class CacheRefreshController:
    """Keeps a :class:`PageIndex` in step with the remote cargo export."""

    CACHE_KEY = "cachedPagesDB"
    CACHE_TIMESTAMP_KEY = "cachedPagesDBTimestamp"

    def __init__(
        self,
        pages_db: PageIndex,
        storage: StorageBackend,
        preferences: Preferences,
        *,
        cargo_url: Optional[str] = None,
        period_minutes: Optional[float] = None,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self._pages_db = pages_db
        self._storage = storage
        self._preferences = preferences
        self.cargo_url = cargo_url or settings.cargo_url
        self.period_minutes = (
            settings.refresh_period_minutes if period_minutes is None else period_minutes
        )
        self._clock = clock
        self._refresh_in_progress = False
        self._timer_task: Optional[asyncio.Task[None]] = None

    @property
    def refresh_in_progress(self) -> bool:
        return self._refresh_in_progress

    def set_database_target(self, pages_db: PageIndex) -> None:
        self._pages_db = pages_db

    # ------------------------------------------------------------------
    # Staleness
    # ------------------------------------------------------------------
    async def is_cache_stale(self, epoch: Optional[int] = None) -> bool:
        """Whether the cached export is older than the configured interval.

        Always ``False`` while auto-update is disabled.
        """
        now = self._clock() if epoch is None else epoch
        enabled, interval_days = await self._refresh_preferences()
        if not enabled:
            return False

        try:
            last_updated = await self.get_last_updated()
        except StorageError as exc:
            logger.warning("[cache] Could not read cache timestamp, treating as stale: %s", exc)
            return True

        if last_updated is None:
            return True
        return now - last_updated >= interval_days * _MS_PER_DAY

    async def _refresh_preferences(self) -> tuple[bool, int]:
        """Auto-update flag and interval, falling back to defaults when unreadable."""
        defaults = Preferences.defaults()
        try:
            enabled = await self._preferences.auto_update_enabled()
        except StorageError as exc:
            logger.warning("[cache] Could not read auto-update preference, using default: %s", exc)
            enabled = bool(defaults[Preferences.AUTO_UPDATE_PAGESDB_KEY])

        try:
            interval_days = await self._preferences.auto_update_interval_days()
        except (StorageError, TypeError, ValueError) as exc:
            logger.warning("[cache] Could not read update interval, using default: %s", exc)
            interval_days = int(defaults[Preferences.AUTO_UPDATE_PAGESDB_INTERVAL_KEY])
        return enabled, interval_days

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    async def get_last_updated(self) -> Optional[int]:
        value = await self._storage.get(self.CACHE_TIMESTAMP_KEY)
        if not value:
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning("[cache] Ignoring malformed cache timestamp %r", value)
            return None

    async def save_cache(self, data: Any, timestamp: Optional[int] = None) -> int:
        """Persist *data* with a timestamp strictly greater than the last one.

        Returns the timestamp actually written.
        """
        stamp = self._clock() if timestamp is None else timestamp
        previous = await self.get_last_updated()
        if previous is not None and stamp <= previous:
            stamp = previous + 1
        await self._storage.set_many({self.CACHE_KEY: data, self.CACHE_TIMESTAMP_KEY: stamp})
        return stamp

    async def get_cached_pages_db(self) -> Any:
        """Return the persisted export, or ``None`` if absent or unreadable."""
        try:
            return await self._storage.get(self.CACHE_KEY)
        except StorageError as exc:
            logger.warning("[cache] Could not read cached pages database: %s", exc)
            return None

    async def clear_cache(self) -> None:
        await self._storage.remove(self.CACHE_KEY)
        await self._storage.remove(self.CACHE_TIMESTAMP_KEY)

    # ------------------------------------------------------------------
    # Network
    # ------------------------------------------------------------------
    async def fetch_json(self, url: str) -> Any:
        """GET *url* and decode its JSON body.

        Raises:
            FetchError: on a non-2xx status, a transport error or timeout, or a
                body that is not JSON.
        """
        try:
            async with httpx.AsyncClient(
                headers=_DEFAULT_HEADERS,
                timeout=settings.request_timeout,
                follow_redirects=True,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as exc:
            raise FetchError(f"GET {url} failed: {exc}") from exc
        except ValueError as exc:
            raise FetchError(f"GET {url} returned invalid JSON: {exc}") from exc

    def validate_pages_db(self, data: Any) -> bool:
        return validate_cargo_export(data)

    # ------------------------------------------------------------------
    # Refresh cycle
    # ------------------------------------------------------------------
    async def update_pages_db(self, force: bool = False) -> RefreshOutcome:
        """Run one refresh cycle.  Never raises."""
        if self._refresh_in_progress:
            logger.info("[cache] Refresh already in progress, skipping.")
            return RefreshOutcome.IN_PROGRESS

        self._refresh_in_progress = True
        try:
            return await self._refresh(force)
        except Exception:
            logger.exception("[cache] Failed to update pages database.")
            return RefreshOutcome.FAILED
        finally:
            self._refresh_in_progress = False

    async def _refresh(self, force: bool) -> RefreshOutcome:
        now = self._clock()
        needs_update = force or await self.is_cache_stale(now)

        if not needs_update:
            logger.info("[cache] Skipping update: cache TTL not reached.")
            cached = await self.get_cached_pages_db()
            if cached is not None and self.validate_pages_db(cached):
                self._pages_db.set_pages(cached)
                logger.info("[cache] Loaded pages database from cache.")
                return RefreshOutcome.CACHE
            logger.info("[cache] No usable cached pages database, fetching instead.")

        logger.info("[cache] Fetching updated pages database from %s", self.cargo_url)
        try:
            data = await self.fetch_json(self.cargo_url)
        except FetchError as exc:
            logger.error("[cache] %s", exc)
            return RefreshOutcome.FAILED

        if not self.validate_pages_db(data):
            logger.warning("[cache] Fetched pages database failed validation; keeping current data.")
            return RefreshOutcome.DISCARDED

        try:
            await self.save_cache(data, now)
        except StorageError as exc:
            logger.warning("[cache] Could not persist pages database: %s", exc)
        self._pages_db.set_pages(data)
        logger.info("[cache] Pages database updated successfully.")
        return RefreshOutcome.FETCHED

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------
    def start(self) -> asyncio.Task[None]:
        """Run a cycle now and then every ``period_minutes`` on the current loop."""
        if self._timer_task is None or self._timer_task.done():
            self._timer_task = asyncio.get_running_loop().create_task(self._run_timer())
        return self._timer_task

    async def stop(self) -> None:
        task, self._timer_task = self._timer_task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _run_timer(self) -> None:
        period_seconds = self.period_minutes * 60
        while True:
            await self.update_pages_db()
            await asyncio.sleep(period_seconds)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    async def status(self) -> dict[str, Any]:
        try:
            last_updated = await self.get_last_updated()
        except StorageError:
            last_updated = None
        return {
            "last_updated": last_updated,
            "stale": await self.is_cache_stale(),
            "refresh_in_progress": self._refresh_in_progress,
            "cargo_url": self.cargo_url,
            "pages": self._pages_db.counts(),
        }
