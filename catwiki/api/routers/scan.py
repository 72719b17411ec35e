"""Scan endpoint: runs the scanner pipeline for one visited page.

Routes
------
POST /scan   {"url": ..., "html": optional page HTML, "fetch": bool}
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from catwiki.api.deps import get_context, page_dict
from catwiki.context import AppContext
from catwiki.pages.index import SearchResultSet
from catwiki.scanners.base import ScanParameters
from catwiki.scraper.document import HtmlDocument
from catwiki.scraper.fetcher import fetch_url

router = APIRouter()


class ScanRequest(BaseModel):
    url: str
    html: Optional[str] = None
    fetch: bool = False


@router.post("")
def scan(body: ScanRequest, ctx: AppContext = Depends(get_context)) -> dict[str, Any]:
    """Return whether any strategy matched and the unique pages to surface."""
    html = body.html
    if html is None and body.fetch:
        try:
            html = fetch_url(body.url).html
        except httpx.HTTPError as exc:
            raise HTTPException(status_code=502, detail=f"Could not fetch {body.url}: {exc}") from exc

    notified: list[SearchResultSet] = []
    params = ScanParameters(
        url=body.url,
        pages_db=ctx.pages_db,
        notify=notified.append,
        document=HtmlDocument(html, url=body.url) if html is not None else None,
    )
    found = ctx.pipeline.scan(params)

    pages = [page_dict(p) for results in notified for p in results]
    return {"found": found, "main_domain": params.main_domain, "pages": pages}
