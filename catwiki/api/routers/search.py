"""Search endpoints over the page index.

Routes
------
GET /search?q=<query>&mode=simple|prefix|fuzzy|all-words
GET /search/category/{name}
POST /search/text
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from catwiki.api.deps import get_context, page_dict
from catwiki.config import settings
from catwiki.context import AppContext

router = APIRouter()


class TextSearchRequest(BaseModel):
    text: str
    threshold: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    min_length: Optional[int] = Field(default=None, ge=0)


@router.get("")
def search(
    q: str,
    mode: Literal["simple", "prefix", "fuzzy", "all-words"] = "fuzzy",
    ctx: AppContext = Depends(get_context),
) -> list[dict[str, Any]]:
    """Search page names.

    Args:
        q: Search query string.
        mode: ``simple`` substring match; ``prefix`` best leading-word match;
            ``fuzzy`` any whole word; ``all-words`` every whole word.
    """
    pages_db = ctx.pages_db
    if mode == "simple":
        results = pages_db.simple_search(q)
    elif mode == "prefix":
        results = pages_db.find_consecutive_words(q)
    elif mode == "all-words":
        results = pages_db.fuzzy_search(q, match_all_words=True)
    else:
        results = pages_db.fuzzy_search(q)
    return [page_dict(p) for p in results]


@router.get("/category/{name}")
def search_category(name: str, ctx: AppContext = Depends(get_context)) -> list[dict[str, Any]]:
    return [page_dict(p) for p in ctx.pages_db.get_pages_for_category(name)]


@router.post("/text")
def search_text(body: TextSearchRequest, ctx: AppContext = Depends(get_context)) -> list[dict[str, Any]]:
    """Approximate matching of catalog names against free-form page text."""
    results = ctx.pages_db.fuzzy_search_inner_text(
        body.text,
        settings.inner_text_threshold if body.threshold is None else body.threshold,
        settings.inner_text_min_length if body.min_length is None else body.min_length,
    )
    return [page_dict(p) for p in results]
