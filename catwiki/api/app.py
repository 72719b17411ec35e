"""FastAPI application factory.

Lifespan
--------
On startup the app builds one :class:`~catwiki.context.AppContext` (shared
across all requests via ``request.app.state.ctx``), loads any valid cached
export into the index and starts the background refresh timer.  On shutdown
it stops the timer.

Routers
-------
    /search  the page index search strategies
    /scan    run the scanner pipeline for a visited URL
    /cache   refresh controller status and manual refresh
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from catwiki.api.routers import cache as cache_router
from catwiki.api.routers import scan as scan_router
from catwiki.api.routers import search as search_router
from catwiki.context import AppContext, build_context, load_cached_pages, start_background_refresh


def create_app(
    ctx: Optional[AppContext] = None,
    background_refresh: bool = True,
) -> FastAPI:
    """Return a fully-configured FastAPI application instance.

    Args:
        ctx: Context to serve; built from settings on startup when omitted.
        background_refresh: Start the periodic cache refresh timer.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        context = ctx or build_context()
        await load_cached_pages(context)
        app.state.ctx = context
        if background_refresh:
            await start_background_refresh(context)
        try:
            yield
        finally:
            await context.cache.stop()

    app = FastAPI(
        title="CATWiki Page Matcher API",
        description=(
            "Looks up CATWiki catalog pages by name, category or free text, "
            "and runs the per-site scanner cascade for a visited URL."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(search_router.router, prefix="/search", tags=["search"])
    app.include_router(scan_router.router, prefix="/scan", tags=["scan"])
    app.include_router(cache_router.router, prefix="/cache", tags=["cache"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn catwiki.api.app:app --reload
app = create_app()
