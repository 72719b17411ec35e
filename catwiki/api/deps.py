"""Request helpers shared by the routers."""

from __future__ import annotations

from typing import Any

from fastapi import Request

from catwiki.context import AppContext
from catwiki.pages.models import Page


def get_context(request: Request) -> AppContext:
    return request.app.state.ctx


def page_dict(page: Page) -> dict[str, Any]:
    return page.to_dict()
