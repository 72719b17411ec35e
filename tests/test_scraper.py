"""Tests for page fetching and the HTML document view.

Mocking strategy:
- ``respx`` patches ``httpx`` at the transport layer so no real network calls
  are made during ``fetch_url`` tests.
- ``trafilatura.extract`` is patched in the fallback test to simulate a page
  with no main content.
"""

from __future__ import annotations

from unittest.mock import patch

import httpx
import pytest
import respx

from catwiki.scraper.document import HtmlDocument
from catwiki.scraper.fetcher import fetch_url
from catwiki.scraper.models import RawPage

_RESULTS_HTML = """\
<!DOCTYPE html>
<html>
<head><title>Shopping</title><style>.gkQHve { color: red; }</style></head>
<body>
  <div class="gkQHve" data-pid="1">Kindle  Paperwhite</div>
  <div class="gkQHve other" data-pid="2">Echo <b>Dot</b></div>
  <script>var q = "Ring Doorbell";</script>
  <p>Sponsored results</p>
</body>
</html>
"""


class TestFetchUrl:
    @respx.mock
    def test_returns_raw_page(self) -> None:
        respx.get("https://shop.example.com/item").mock(
            return_value=httpx.Response(200, text="<html><body>ok</body></html>")
        )
        page = fetch_url("https://shop.example.com/item")
        assert isinstance(page, RawPage)
        assert page.status_code == 200
        assert "ok" in page.html
        assert page.url == "https://shop.example.com/item"

    @respx.mock
    def test_follows_redirects(self) -> None:
        respx.get("https://shop.example.com/old").mock(
            return_value=httpx.Response(301, headers={"Location": "https://shop.example.com/new"})
        )
        respx.get("https://shop.example.com/new").mock(
            return_value=httpx.Response(200, text="moved")
        )
        page = fetch_url("https://shop.example.com/old")
        assert page.html == "moved"
        assert page.url == "https://shop.example.com/old"

    @respx.mock
    def test_http_error_raises(self) -> None:
        respx.get("https://shop.example.com/missing").mock(return_value=httpx.Response(404))
        with pytest.raises(httpx.HTTPStatusError):
            fetch_url("https://shop.example.com/missing")


class TestHtmlDocument:
    def test_query_selector_all(self) -> None:
        elements = HtmlDocument(_RESULTS_HTML).query_selector_all(".gkQHve")
        assert [e.inner_text for e in elements] == ["Kindle  Paperwhite", "Echo Dot"]
        assert elements[0].tag == "div"
        assert elements[1].attributes["class"] == "gkQHve other"
        assert elements[1].attributes["data-pid"] == "2"

    def test_no_matches(self) -> None:
        assert HtmlDocument(_RESULTS_HTML).query_selector_all(".missing") == []

    def test_inner_text_prefers_trafilatura(self) -> None:
        with patch("catwiki.scraper.document.trafilatura.extract", return_value="Main article") as extract:
            document = HtmlDocument(_RESULTS_HTML, url="https://shop.example.com/")
            assert document.inner_text() == "Main article"
            assert document.inner_text() == "Main article"
        extract.assert_called_once()

    def test_inner_text_falls_back_to_visible_text(self) -> None:
        with patch("catwiki.scraper.document.trafilatura.extract", return_value=None):
            text = HtmlDocument(_RESULTS_HTML).inner_text()
        lines = text.splitlines()
        assert "Kindle  Paperwhite" in lines
        assert "Sponsored results" in lines
        assert "Ring Doorbell" not in text
        assert "color: red" not in text
