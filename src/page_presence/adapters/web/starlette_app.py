"""Starlette web adapter serving the presence WebSocket and HTTP endpoints."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncIterator
from typing import Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse, Response
from starlette.routing import Route, WebSocketRoute

from page_presence.adapters.config import AppConfig
from page_presence.domain.contracts.presence_engine import PresenceEngineProtocol
from page_presence.domain.ports import PresenceServer

from .connection_hub import ConnectionHub
from .endpoint import PresenceWebSocketEndpoint
from .rate_limit_middleware import RateLimitMiddleware
from .servers import StaticFileServer

logger = logging.getLogger(__name__)


class PresenceWebAdapter(PresenceServer):
    """Starlette-based server for live page presence."""

    def __init__(
        self,
        engine: PresenceEngineProtocol,
        hub: ConnectionHub,
        config: AppConfig,
        static_file_server: StaticFileServer | None = None,
    ) -> None:
        """Initialize the web adapter.

        Args:
            engine: Presence engine owning all presence state.
            hub: Connection hub shared with the engine's broadcast gateway.
            config: Application configuration.
            static_file_server: Serves the counter widget (located automatically if None).
        """
        if not isinstance(config, AppConfig):
            raise TypeError("config must be an AppConfig instance")

        self.engine = engine
        self.hub = hub
        self.config = config
        self.static_file_server = static_file_server or StaticFileServer()
        self._server: Any | None = None
        self.app = self.build_app()

    def build_app(self) -> Starlette:
        """Build the ASGI application with all routes and middleware."""
        endpoint = PresenceWebSocketEndpoint(
            self.engine, self.hub, max_page_id_length=self.config.page_id_max_length
        )
        app = Starlette(
            routes=[
                WebSocketRoute(self.config.websocket_path, endpoint.handle),
                Route("/healthz", self.healthz, methods=["GET"]),
                Route("/api/presence", self.presence_snapshot, methods=["GET"]),
                Route("/admin/reset-connections", self.reset_connections, methods=["POST"]),
            ],
            middleware=[
                Middleware(
                    CORSMiddleware,
                    allow_origins=self.config.cors_allow_origins,
                    allow_methods=["GET", "POST"],
                ),
                Middleware(
                    RateLimitMiddleware,
                    requests_per_minute=self.config.rate_limit_per_minute,
                ),
            ],
            lifespan=self._lifespan,
        )
        self.static_file_server.register_routes(app)
        logger.info(f"Presence WebSocket registered at '{self.config.websocket_path}'")
        return app

    async def healthz(self, _request: Any) -> Response:
        """Health check endpoint for load balancers and monitoring."""
        return Response(content="Ok", media_type="text/plain")

    async def presence_snapshot(self, _request: Any) -> JSONResponse:
        """Return the live count of every page with at least one joiner."""
        return JSONResponse(self.engine.snapshot().model_dump())

    async def reset_connections(self, request: Any) -> JSONResponse:
        """Drop all presence state and close every live socket.

        Guarded by the X-Admin-Token header. Clients reconnect on their own
        and re-send join/monitor, which rebuilds the counts.

        Usage:
            curl -X POST https://host/admin/reset-connections -H "X-Admin-Token: $TOKEN"
        """
        expected_token = self.config.admin_command_token
        if not expected_token:
            return JSONResponse(
                {"error": "admin endpoint disabled - ADMIN_COMMAND_TOKEN not configured"},
                status_code=503,
            )

        if request.headers.get("X-Admin-Token", "") != expected_token:
            logger.warning("Unauthorized attempt to call reset_connections admin endpoint")
            return JSONResponse({"error": "forbidden"}, status_code=403)

        # State first, so the disconnects triggered by closing are no-ops
        forgotten = self.engine.reset()
        report = await self.hub.close_all()

        logger.info(
            f"Admin reset_connections completed: forgotten_connections={forgotten}, "
            f"closed_sockets={report.closed}, failed_sockets={len(report.failed)}"
        )
        return JSONResponse(
            {
                "status": "ok",
                "forgotten_connections": forgotten,
                "closed_sockets": report.closed,
                "failed_sockets": list(report.failed),
            }
        )

    @contextlib.asynccontextmanager
    async def _lifespan(self, _app: Starlette) -> AsyncIterator[None]:
        yield
        await self.hub.close_all()

    async def start(self) -> None:
        """Start the web server."""
        import uvicorn

        server_config = uvicorn.Config(
            self.app,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level,
        )
        self._server = uvicorn.Server(server_config)
        logger.info(f"Serving presence on http://{self.config.host}:{self.config.port}")
        await self._server.serve()

    async def stop(self) -> None:
        """Stop the web server."""
        await self.hub.close_all()
        if self._server:
            self._server.should_exit = True

