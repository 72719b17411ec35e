"""HTTP fetcher for pages handed to the scanner pipeline."""

from __future__ import annotations

import httpx

from catwiki.config import settings
from catwiki.scraper.models import RawPage

_DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/131.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


def fetch_url(url: str) -> RawPage:
    """Fetch *url* and return a :class:`RawPage`.

    Redirects are followed; the returned ``url`` is the one requested.

    Raises:
        httpx.HTTPStatusError: If the server returns a 4xx/5xx status code.
    """
    with httpx.Client(
        headers=_DEFAULT_HEADERS,
        timeout=settings.request_timeout,
        follow_redirects=True,
    ) as client:
        response = client.get(url)
        response.raise_for_status()
        html = response.text
        status_code = response.status_code

    return RawPage(url=url, html=html, status_code=status_code)
