"""Tests for the bot access check endpoint."""

import warnings

import httpx
import pytest
from litestar.exceptions import ValidationException
from litestar.testing import TestClient

from app import _validation_error, create_app
from config import Settings
from controllers.bot_access import BOTS, CrawlerAccessProber

ENDPOINT = "/api/v1/tools/bot-access-check"


def site_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/robots.txt":
        return httpx.Response(
            200, text="User-agent: *\nDisallow: /admin\n\nUser-agent: GPTBot\nAllow: /\n"
        )
    return httpx.Response(200, text="ok")


class ExplodingProber(CrawlerAccessProber):
    async def check_access(self, target_url):
        raise RuntimeError("kaboom")


@pytest.fixture
def settings():
    return Settings(rate_limit_per_minute=1000)


@pytest.fixture
def client(settings):
    prober = CrawlerAccessProber(
        settings=settings, transport=httpx.MockTransport(site_handler)
    )
    with TestClient(app=create_app(settings, prober)) as client:
        yield client


class TestBotAccessCheck:
    def test_success(self, client):
        resp = client.post(ENDPOINT, json={"url": "https://example.com/admin/page"})
        assert resp.status_code == 200

        data = resp.json()
        assert data["url"] == "https://example.com/admin/page"
        assert data["robotsTxtUrl"] == "https://example.com/robots.txt"
        assert data["robotsTxtFound"] is True
        assert [r["agent"] for r in data["results"]] == [b.name for b in BOTS]

        results = {r["agent"]: r for r in data["results"]}
        assert results["GPTBot (OpenAI)"]["robotsAllowed"] is True
        assert results["Googlebot"]["robotsAllowed"] is False
        assert results["Googlebot"]["httpStatus"] == 200
        assert results["Googlebot"]["ok"] is True
        assert "error" not in results["Googlebot"]

    def test_url_echoed_as_submitted(self, client):
        resp = client.post(ENDPOINT, json={"url": "https://example.com"})
        assert resp.status_code == 200
        assert resp.json()["url"] == "https://example.com"

    def test_missing_url(self, client):
        resp = client.post(ENDPOINT, json={})
        assert resp.status_code == 400
        data = resp.json()
        assert data["message"] == "Invalid request body"
        assert data["issues"][0]["loc"] == ["url"]
        assert data["issues"][0]["type"] == "missing"

    @pytest.mark.parametrize(
        "url", ["not a url", "example.com", "ftp://example.com/file", "http://"]
    )
    def test_invalid_url(self, client, url):
        resp = client.post(ENDPOINT, json={"url": url})
        assert resp.status_code == 400
        assert resp.json()["issues"][0]["type"] == "value_error"

    def test_non_string_url(self, client):
        resp = client.post(ENDPOINT, json={"url": 42})
        assert resp.status_code == 400
        assert resp.json()["issues"][0]["type"] == "string_type"

    def test_malformed_json(self, client):
        resp = client.post(
            ENDPOINT,
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json()["issues"][0]["type"] == "json_invalid"

    def test_empty_body(self, client):
        resp = client.post(ENDPOINT)
        assert resp.status_code == 400

    def test_unexpected_error(self, settings):
        app = create_app(settings, ExplodingProber(settings))
        with TestClient(app=app) as client:
            resp = client.post(ENDPOINT, json={"url": "https://example.com/"})
        assert resp.status_code == 500
        assert resp.json() == {"message": "kaboom"}


class TestAppBehaviour:
    def test_prober_dependency_declared(self, settings):
        prober = CrawlerAccessProber(
            settings=settings, transport=httpx.MockTransport(site_handler)
        )
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            with TestClient(app=create_app(settings, prober)) as client:
                resp = client.post(ENDPOINT, json={"url": "https://example.com/"})
        assert resp.status_code == 200
        assert not [w for w in caught if "prober" in str(w.message)]

    def test_validation_exception_shape(self):
        exc = ValidationException(
            detail="Validation failed",
            extra=[{"key": "limit", "message": "expected int"}],
        )
        resp = _validation_error(None, exc)
        assert resp.status_code == 400
        assert resp.content == {
            "message": "Invalid request body",
            "issues": [{"key": "limit", "message": "expected int"}],
        }

    def test_validation_exception_without_extra(self):
        resp = _validation_error(None, ValidationException(detail="bad"))
        assert resp.status_code == 400
        assert resp.content == {"message": "Invalid request body", "issues": []}

    def test_unknown_route(self, client):
        resp = client.get("/api/v1/nope")
        assert resp.status_code == 404
        assert resp.json() == {"message": "Not Found"}

    def test_rate_limited(self):
        settings = Settings(rate_limit_per_minute=2)
        with TestClient(app=create_app(settings)) as client:
            assert client.get("/").status_code == 200
            assert client.get("/").status_code == 200
            resp = client.get("/")
            assert resp.status_code == 429
            assert "message" in resp.json()
            # health checks are never limited
            assert client.get("/healthz").status_code == 200

    def test_cors_preflight(self, client):
        resp = client.options(
            ENDPOINT,
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
            },
        )
        assert resp.headers["access-control-allow-origin"] == "http://localhost:3000"
