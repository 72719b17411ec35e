"""Scraper package: page fetch and read-only document access."""

from catwiki.scraper.document import HtmlDocument, PageDocument
from catwiki.scraper.fetcher import fetch_url
from catwiki.scraper.models import ElementData, RawPage

__all__ = ["fetch_url", "HtmlDocument", "PageDocument", "RawPage", "ElementData"]
