"""Tests for the FastAPI endpoints.

Every test serves a context built on :class:`MemoryStorage` with the fixture
export loaded, and the background timer disabled.  The remote export is
mocked with ``respx``; nothing touches the network or the user's workspace.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest
import respx
from fastapi.testclient import TestClient

from catwiki.api.app import create_app
from catwiki.context import build_context
from catwiki.storage.backend import MemoryStorage
from catwiki.storage.cache import CacheRefreshController
from conftest import make_cargo

CARGO_URL = "https://example.test/cargo.json"


@pytest.fixture()
def ctx(monkeypatch):
    monkeypatch.setattr("catwiki.config.settings.auto_update_default", True)
    monkeypatch.setattr("catwiki.config.settings.auto_update_interval_days", 1)
    context = build_context(storage=MemoryStorage())
    context.pages_db.set_pages(make_cargo())
    context.cache.cargo_url = CARGO_URL
    return context


@pytest.fixture()
def client(ctx):
    app = create_app(ctx, background_refresh=False)
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c


def _ids(resp) -> list[int]:
    return [page["page_id"] for page in resp.json()]


# ---------------------------------------------------------------------------
# /search
# ---------------------------------------------------------------------------

class TestSearch:
    def test_default_mode_is_fuzzy(self, client) -> None:
        resp = client.get("/search", params={"q": "gizmo pro"})
        assert resp.status_code == 200
        assert _ids(resp) == [4, 5]

    def test_simple(self, client) -> None:
        resp = client.get("/search", params={"q": "media", "mode": "simple"})
        assert resp.json() == [
            {
                "kind": "Company",
                "page_id": 2,
                "page_name": "Wiki Media Group",
                "industries": ["Publishing"],
                "parent_company": "Alpha Beta Gamma",
                "company_type": "Subsidiary",
                "website": "",
            }
        ]

    def test_prefix(self, client) -> None:
        resp = client.get("/search", params={"q": "gizmo pro max", "mode": "prefix"})
        assert _ids(resp) == [4]

    def test_all_words(self, client) -> None:
        resp = client.get("/search", params={"q": "pro gizmo", "mode": "all-words"})
        assert _ids(resp) == [4]

    def test_unknown_mode(self, client) -> None:
        resp = client.get("/search", params={"q": "gizmo", "mode": "regex"})
        assert resp.status_code == 422

    def test_missing_query(self, client) -> None:
        assert client.get("/search").status_code == 422

    def test_category(self, client) -> None:
        resp = client.get("/search/category/GADGETS")
        assert _ids(resp) == [1, 4, 5]
        assert [p["kind"] for p in resp.json()] == ["Company", "Product", "ProductLine"]

    def test_text(self, client) -> None:
        resp = client.post("/search/text", json={"text": "I just bought the Gizmo Pro from a store"})
        assert _ids(resp) == [3, 4, 5]

    def test_text_threshold_bounds(self, client) -> None:
        resp = client.post("/search/text", json={"text": "anything", "threshold": 1.5})
        assert resp.status_code == 422


# ---------------------------------------------------------------------------
# /scan
# ---------------------------------------------------------------------------

class TestScan:
    def test_search_engine_url(self, client) -> None:
        resp = client.post("/scan", json={"url": "https://www.bing.com/search?q=gizmo+pro"})
        body = resp.json()
        assert resp.status_code == 200
        assert body["found"] is True
        assert body["main_domain"] == "bing"
        assert [p["page_id"] for p in body["pages"]] == [4, 5]

    def test_google_shopping_html(self, client) -> None:
        html = '<html><body><div class="gkQHve">Wiki Media Group</div></body></html>'
        resp = client.post(
            "/scan",
            json={"url": "https://www.google.com/search?q=zzz&udm=3", "html": html},
        )
        assert [p["page_id"] for p in resp.json()["pages"]] == [2]

    def test_unclaimed_url_without_html(self, client) -> None:
        resp = client.post("/scan", json={"url": "https://shop.example.com/item"})
        assert resp.json() == {"found": False, "main_domain": "example", "pages": []}

    @respx.mock
    def test_fetch_failure(self, client) -> None:
        respx.get("https://shop.example.com/item").mock(return_value=httpx.Response(503))
        resp = client.post("/scan", json={"url": "https://shop.example.com/item", "fetch": True})
        assert resp.status_code == 502


# ---------------------------------------------------------------------------
# /cache
# ---------------------------------------------------------------------------

class TestCache:
    def test_status(self, client) -> None:
        body = client.get("/cache/status").json()
        assert body["last_updated"] is None
        assert body["stale"] is True
        assert body["refresh_in_progress"] is False
        assert body["cargo_url"] == CARGO_URL
        assert body["pages"] == {"Company": 2, "Incident": 1, "Product": 1, "ProductLine": 1}

    def test_refresh(self, client, ctx) -> None:
        remote = make_cargo()
        remote["Product"].append({**remote["Product"][0], "PageID": "6", "PageName": "Gizmo Mini"})
        with respx.mock(assert_all_called=False) as router:
            router.get(CARGO_URL).mock(return_value=httpx.Response(200, json=remote))
            resp = client.post("/cache/refresh")

        assert resp.json() == {
            "outcome": "fetched",
            "pages": {"Company": 2, "Incident": 1, "Product": 2, "ProductLine": 1},
        }
        assert client.get("/cache/status").json()["stale"] is False

    def test_refresh_failure(self, client) -> None:
        with respx.mock(assert_all_called=False) as router:
            router.get(CARGO_URL).mock(return_value=httpx.Response(500))
            resp = client.post("/cache/refresh", params={"force": True})
        assert resp.json()["outcome"] == "failed"


class TestLifespan:
    def test_loads_valid_cache_on_startup(self, ctx) -> None:
        cached = make_cargo()
        cached["Company"][0]["PageName"] = "Cached Co"
        asyncio.run(ctx.storage.set(CacheRefreshController.CACHE_KEY, cached))
        with TestClient(create_app(ctx, background_refresh=False)) as c:
            resp = c.get("/search", params={"q": "cached", "mode": "simple"})
        assert [p["page_id"] for p in resp.json()] == [1]
