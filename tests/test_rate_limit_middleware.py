"""Behavior-focused tests for rate limiting middleware."""

from types import SimpleNamespace

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from page_presence.adapters.web.rate_limit_middleware import (
    RateLimitMiddleware,
    extract_client_ip,
)


def _request(headers: list[tuple[bytes, bytes]], client: tuple[str, int] | None) -> object:
    return SimpleNamespace(scope={"type": "http", "headers": headers, "client": client})


class TestExtractClientIp:
    """Tests for client IP extraction behavior."""

    def test_when_x_forwarded_for_has_chain_then_returns_first_ip(self) -> None:
        """Given X-Forwarded-For with IP chain, when extracting, then returns original client IP."""
        request = _request([(b"x-forwarded-for", b"203.0.113.50, 70.41.3.18")], None)

        assert extract_client_ip(request) == "203.0.113.50"

    def test_when_no_x_forwarded_for_then_uses_direct_client_ip(self) -> None:
        """Given no X-Forwarded-For, when extracting, then uses direct connection IP."""
        request = _request([], ("10.0.0.1", 5000))

        assert extract_client_ip(request) == "10.0.0.1"

    def test_when_no_client_info_available_then_returns_unknown(self) -> None:
        """Given no client information, when extracting, then returns 'unknown'."""
        request = _request([], None)

        assert extract_client_ip(request) == "unknown"


def _make_client(requests_per_minute: int) -> TestClient:
    async def ok(_request: object) -> PlainTextResponse:
        return PlainTextResponse("ok")

    app = Starlette(
        routes=[Route("/api/presence", ok), Route("/healthz", ok)],
        middleware=[Middleware(RateLimitMiddleware, requests_per_minute=requests_per_minute)],
    )
    return TestClient(app)


class TestRateLimitMiddleware:
    """Tests for request limiting."""

    def test_requests_over_quota_get_429(self) -> None:
        """Given a quota of 2, when a third request arrives, then it is rejected with 429."""
        client = _make_client(requests_per_minute=2)

        assert client.get("/api/presence").status_code == 200
        assert client.get("/api/presence").status_code == 200
        response = client.get("/api/presence")

        assert response.status_code == 429
        assert "Retry-After" in response.headers

    def test_health_checks_are_never_limited(self) -> None:
        """Given an exhausted quota, when calling /healthz, then it still succeeds."""
        client = _make_client(requests_per_minute=1)
        client.get("/api/presence")
        client.get("/api/presence")

        assert client.get("/healthz").status_code == 200

    def test_quota_is_per_forwarded_ip(self) -> None:
        """Given one IP over quota, when another IP calls, then it is still allowed."""
        client = _make_client(requests_per_minute=1)

        first = {"X-Forwarded-For": "192.0.2.1"}
        second = {"X-Forwarded-For": "192.0.2.2"}

        assert client.get("/api/presence", headers=first).status_code == 200
        assert client.get("/api/presence", headers=first).status_code == 429
        assert client.get("/api/presence", headers=second).status_code == 200
