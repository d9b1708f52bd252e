"""Tests for the FastAPI registry endpoints and badge rendering."""

import tempfile
from pathlib import Path

import httpx
from fastapi.testclient import TestClient

from toolindex.badge import STATUS_COLORS, render_badge
from toolindex.registry.local_registry import LocalRegistry
from toolindex.scoring import combined_score
from web.backend.app.main import app
from web.backend.app.routers.registry import get_registry

MANIFEST = {
    "manifest_version": "0.1",
    "origin": "https://shop.example.com",
    "tools": [
        {
            "name": "search_products",
            "description": "Search the product catalog",
            "version": "1.0.0",
            "tags": ["commerce"],
            "risk_level": "low",
            "requires_user_confirm": False,
            "input_schema": {"type": "object"},
            "output_schema": {"type": "object"},
            "pricing": {"model": "free"},
        }
    ],
    "auth": {"requires_login": False},
}


def _handler(request: httpx.Request) -> httpx.Response:
    if request.url.host == "shop.example.com":
        return httpx.Response(200, json=MANIFEST)
    return httpx.Response(503)


def _client(tmpdir: str) -> TestClient:
    upstream = httpx.Client(transport=httpx.MockTransport(_handler))
    registry_dir = Path(tmpdir) / "registry"
    app.dependency_overrides[get_registry] = lambda: LocalRegistry(registry_dir, client=upstream)
    return TestClient(app)


def teardown_function():
    app.dependency_overrides.clear()


def test_health():
    with tempfile.TemporaryDirectory() as tmpdir:
        resp = _client(tmpdir).get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "healthy"}


def test_submit_and_lookup():
    with tempfile.TemporaryDirectory() as tmpdir:
        client = _client(tmpdir)

        resp = client.post("/submit", json={"origin": "shop.example.com"})
        assert resp.status_code == 200
        assert resp.json() == {
            "origin": "https://shop.example.com",
            "status": "verified",
            "tool_count": 1,
            "errors": [],
        }

        status = client.get("/verify", params={"origin": "https://shop.example.com/"}).json()
        assert status["status"] == "verified"
        assert status["last_checked"]

        detail = client.get("/origin/shop.example.com")
        assert detail.status_code == 200
        body = detail.json()
        assert body["trust_breakdown"]["verified"] == 30
        assert body["checks_summary"]["total"] == 1
        assert body["tools"][0]["name"] == "search_products"
        assert body["manifest"]["manifest_version"] == "0.1"


def test_submit_failure_reports_errors():
    with tempfile.TemporaryDirectory() as tmpdir:
        resp = _client(tmpdir).post("/submit", json={"origin": "https://down.example.com"})
        body = resp.json()
        assert body["status"] == "invalid"
        assert body["tool_count"] == 0
        assert "503" in body["errors"][0]


def test_submit_requires_origin():
    with tempfile.TemporaryDirectory() as tmpdir:
        client = _client(tmpdir)
        assert client.post("/submit", json={"origin": "  "}).status_code == 400
        assert client.post("/submit", json={"origin": "https://"}).status_code == 400


def test_verify_unknown_origin():
    with tempfile.TemporaryDirectory() as tmpdir:
        client = _client(tmpdir)
        body = client.get("/verify", params={"origin": "new.example.com"}).json()
        assert body == {
            "origin": "https://new.example.com",
            "status": "unknown",
            "last_checked": None,
            "attested": False,
        }
        assert client.get("/verify").status_code == 400


def test_origin_not_found():
    with tempfile.TemporaryDirectory() as tmpdir:
        assert _client(tmpdir).get("/origin/missing.example.com").status_code == 404


def test_tools_search():
    with tempfile.TemporaryDirectory() as tmpdir:
        client = _client(tmpdir)
        client.post("/submit", json={"origin": "shop.example.com"})

        results = client.get("/tools/search", params={"q": "search_products", "pricing": "free"}).json()
        assert len(results) == 1
        hit = results[0]
        assert hit["tool"]["name"] == "search_products"
        assert hit["relevance"]["breakdown"]["name_match"] == 30
        assert hit["relevance"]["breakdown"]["pricing_bonus"] == 5
        assert hit["origin"]["trust_score"] == hit["trust"]["total"]
        assert hit["score"] == combined_score(hit["relevance"]["total"], hit["trust"]["total"])

        assert client.get("/tools/search", params={"q": "nothing"}).json() == []


def test_origin_search():
    with tempfile.TemporaryDirectory() as tmpdir:
        client = _client(tmpdir)
        client.post("/submit", json={"origin": "shop.example.com"})
        results = client.get("/search", params={"q": "commerce"}).json()
        assert results == [
            {
                "origin": "https://shop.example.com",
                "status": "verified",
                "tool_count": 1,
                "top_tools": ["search_products"],
            }
        ]


def test_badge_endpoint():
    with tempfile.TemporaryDirectory() as tmpdir:
        client = _client(tmpdir)
        resp = client.get("/badge", params={"origin": "unseen.example.com"})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("image/svg+xml")
        assert ">unknown<" in resp.text

        client.post("/submit", json={"origin": "shop.example.com"})
        resp = client.get("/badge", params={"origin": "shop.example.com"})
        assert ">verified<" in resp.text
        assert client.get("/badge").status_code == 400


def test_render_badge_colors():
    assert STATUS_COLORS["verified"]["bg"] in render_badge("verified")
    assert STATUS_COLORS["stale"]["bg"] in render_badge("stale")
    fallback = render_badge("bogus")
    assert STATUS_COLORS["unknown"]["bg"] in fallback
    assert ">unknown<" in fallback


def test_badge_colors_immutable():
    try:
        STATUS_COLORS["verified"] = {"bg": "#000", "text": "#000"}
    except TypeError:
        return
    raise AssertionError("status colour table should be read-only")
