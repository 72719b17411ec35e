"""Read-only view over a fetched HTML page.

Stands in for the browser DOM: scanners ask it for elements matching a CSS
selector and for the page's readable text.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

import trafilatura
from bs4 import BeautifulSoup

from catwiki.scraper.models import ElementData


class PageDocument(Protocol):
    def query_selector_all(self, selector: str) -> List[ElementData]: ...

    def inner_text(self) -> str: ...


def _bs4_text(soup: BeautifulSoup) -> str:
    """Line-separated visible text, ignoring scripts, styles and chrome."""
    for tag in soup(["script", "style", "noscript", "template"]):
        tag.decompose()
    container = soup.body or soup
    return container.get_text(separator="\n", strip=True)


class HtmlDocument:
    """A :class:`PageDocument` backed by BeautifulSoup."""

    def __init__(self, html: str, url: Optional[str] = None) -> None:
        self.html = html
        self.url = url
        self._soup = BeautifulSoup(html, "html.parser")
        self._text: Optional[str] = None

    def query_selector_all(self, selector: str) -> List[ElementData]:
        return [
            ElementData(
                inner_text=element.get_text(separator=" ", strip=True),
                tag=element.name or "",
                attributes={
                    key: " ".join(value) if isinstance(value, list) else str(value)
                    for key, value in element.attrs.items()
                },
            )
            for element in self._soup.select(selector)
        ]

    def inner_text(self) -> str:
        """Readable page text, one block per line.

        Tries ``trafilatura`` first and falls back to the full visible text of
        the body when it finds no main content (search result pages usually
        have none).
        """
        if self._text is None:
            text = trafilatura.extract(
                self.html,
                include_links=False,
                include_images=False,
                include_tables=True,
                no_fallback=False,
                url=self.url,
            )
            if not text:
                text = _bs4_text(BeautifulSoup(self.html, "html.parser"))
            self._text = text or ""
        return self._text
