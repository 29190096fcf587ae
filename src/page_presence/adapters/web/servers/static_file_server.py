"""Static file server for the counter widget and other assets."""

from __future__ import annotations

import logging
from importlib.resources import files
from pathlib import Path
from typing import TYPE_CHECKING, Any

from starlette.responses import FileResponse, Response
from starlette.routing import Mount, Route
from starlette.staticfiles import StaticFiles

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, MutableMapping

    from starlette.applications import Starlette

logger = logging.getLogger(__name__)

WIDGET_FILENAME = "counter-widget.js"
CACHE_CONTROL = "public, max-age=60, must-revalidate"


def find_static_directory() -> Path | None:
    """Locate the static directory shipped inside the package."""
    path = Path(str(files("page_presence") / "static"))
    if path.is_dir():
        return path
    logger.warning(f"Static directory not found at {path}")
    return None


class StaticFileCacheApp:
    """ASGI app wrapper that adds cache headers to static file responses."""

    def __init__(self, static_files: StaticFiles) -> None:
        """Initialize with a StaticFiles instance."""
        self.static_files = static_files

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[[], Awaitable[dict[str, Any]]],
        send: Callable[[MutableMapping[str, Any]], Awaitable[None]],
    ) -> None:
        """Handle ASGI request and add cache headers."""

        async def send_with_cache_headers(message: MutableMapping[str, Any]) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                if not any(header[0].lower() == b"cache-control" for header in headers):
                    headers.append((b"cache-control", CACHE_CONTROL.encode()))
                    message["headers"] = headers
            await send(message)

        await self.static_files(scope, receive, send_with_cache_headers)


class StaticFileServer:
    """Serves the injectable counter widget and the static directory."""

    def __init__(self, static_path: Path | None = None) -> None:
        """Initialize with an explicit static directory, or locate one."""
        self.static_path = static_path if static_path is not None else find_static_directory()

    def register_routes(self, app: Starlette) -> None:
        """Register the widget route and mount the static directory.

        Args:
            app: The Starlette application instance.
        """
        # Specific routes must come before the mount
        app.routes.insert(0, Route(f"/{WIDGET_FILENAME}", self._serve_widget, methods=["GET"]))

        if self.static_path is not None:
            cached_static = StaticFileCacheApp(StaticFiles(directory=str(self.static_path)))
            app.routes.append(Mount("/static", app=cached_static, name="static"))
            logger.info(f"Mounted static files from {self.static_path} with 1-minute cache headers")

    async def _serve_widget(self, _request: Any) -> Response:
        """Serve the counter widget script."""
        if self.static_path is not None:
            widget_path = self.static_path / WIDGET_FILENAME
            if widget_path.is_file():
                response = FileResponse(str(widget_path), media_type="application/javascript")
                response.headers["Cache-Control"] = CACHE_CONTROL
                return response
        logger.error(f"Counter widget {WIDGET_FILENAME} not found in {self.static_path}")
        return Response(
            content="// counter widget not found",
            media_type="application/javascript",
            status_code=404,
        )
