"""Plain-text rendering of pages and result sets for the CLI."""

from __future__ import annotations

from typing import Iterable

from catwiki.pages.models import CompanyPage, IncidentPage, Page, ProductLinePage, ProductPage


def _detail(page: Page) -> str:
    if isinstance(page, CompanyPage):
        return ", ".join(page.industries)
    if isinstance(page, IncidentPage):
        return page.company
    if isinstance(page, (ProductPage, ProductLinePage)):
        return page.company
    return ""


def render_page(page: Page) -> str:
    detail = _detail(page)
    suffix = f"  ({detail})" if detail else ""
    return f"  {page.page_id:>6}  [{page.kind}]  {page.page_name}{suffix}"


def render_pages(pages: Iterable[Page]) -> list[str]:
    return [render_page(p) for p in pages]
