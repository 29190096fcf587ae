"""Rate limiting middleware for Starlette using throttled-py."""

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from throttled import RateLimiterType, Throttled, rate_limiter, store

from page_presence.adapters.web.client_info import get_client_info_from_scope

logger = logging.getLogger(__name__)

_DEFAULT_RETRY_AFTER_SECONDS = 60.0


def extract_client_ip(request: Request) -> str:
    """Extract the client IP used as the rate limit key.

    Honors X-Forwarded-For (first entry) because throttled-py does not parse it.
    """
    return get_client_info_from_scope(request.scope).ip


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-IP token bucket for plain HTTP requests.

    WebSocket traffic never reaches ``dispatch``; BaseHTTPMiddleware only
    intercepts HTTP scopes.
    """

    def __init__(
        self,
        app: Callable,
        requests_per_minute: int = 100,
        exempt_paths: Iterable[str] = ("/healthz",),
    ) -> None:
        """Initialize rate limiting middleware.

        Args:
            app: The ASGI application to wrap.
            requests_per_minute: Maximum number of requests allowed per IP per minute.
            exempt_paths: Paths that are never limited (health checks).
        """
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.exempt_paths = frozenset(exempt_paths)
        self.quota = rate_limiter.per_min(requests_per_minute, burst=requests_per_minute)
        self.rate_limiter_store = store.MemoryStore()
        logger.info(f"Rate limiting enabled: {requests_per_minute} requests per minute per IP")

    def _extract_retry_after(self, result: Any) -> float:
        state = getattr(result, "state", None)
        retry_after = getattr(state, "retry_after", None)
        if retry_after is None:
            retry_after = getattr(result, "retry_after", None)
        return float(retry_after) if retry_after is not None else _DEFAULT_RETRY_AFTER_SECONDS

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Reject the request with 429 when its IP is over quota."""
        if request.url.path in self.exempt_paths:
            return await call_next(request)

        client_ip = extract_client_ip(request)
        throttle = Throttled(
            key=client_ip,
            using=RateLimiterType.TOKEN_BUCKET.value,
            quota=self.quota,
            store=self.rate_limiter_store,
        )
        result = throttle.limit()
        if result.limited:
            retry_after = self._extract_retry_after(result)
            logger.warning(f"Rate limit exceeded for IP {client_ip}, retry after {retry_after}s")
            return Response(
                content="Rate limit exceeded. Please try again later.",
                status_code=429,
                headers={"Retry-After": str(int(retry_after))},
            )

        return await call_next(request)
