"""Cache refresh endpoints.

Routes
------
GET  /cache/status
POST /cache/refresh?force=false
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from catwiki.api.deps import get_context
from catwiki.context import AppContext, refresh_once

router = APIRouter()


@router.get("/status")
async def cache_status(ctx: AppContext = Depends(get_context)) -> dict[str, Any]:
    return await ctx.cache.status()


@router.post("/refresh")
async def cache_refresh(force: bool = False, ctx: AppContext = Depends(get_context)) -> dict[str, Any]:
    """Run one refresh cycle now; reports ``in_progress`` if one is running."""
    outcome = await refresh_once(ctx, force=force)
    return {"outcome": outcome.value, "pages": ctx.pages_db.counts()}
