"""WebSocket endpoint that turns transport events into presence operations."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from page_presence.adapters.web.client_info import get_client_info_from_socket
from page_presence.adapters.web.messages import InvalidMessageError, parse_inbound_message
from page_presence.domain.models import JoinMessage, MonitorMessage

if TYPE_CHECKING:
    from starlette.websockets import WebSocket

    from page_presence.adapters.web.connection_hub import ConnectionHub
    from page_presence.domain.contracts.presence_engine import PresenceEngineProtocol

logger = logging.getLogger(__name__)


def new_connection_id() -> str:
    """Return a fresh opaque connection identifier."""
    return uuid.uuid4().hex


class PresenceWebSocketEndpoint:
    """Dispatches join, monitor and close events from one WebSocket session."""

    def __init__(
        self,
        engine: PresenceEngineProtocol,
        hub: ConnectionHub,
        max_page_id_length: int = 2048,
    ) -> None:
        """Initialize the endpoint.

        Args:
            engine: Presence engine receiving the events.
            hub: Connection hub that delivers outbound updates.
            max_page_id_length: Longest page identifier accepted from clients.
        """
        self._engine = engine
        self._hub = hub
        self._max_page_id_length = max_page_id_length

    async def handle(self, websocket: WebSocket) -> None:
        """Serve one WebSocket session until it closes."""
        await websocket.accept()
        connection_id = new_connection_id()
        client_info = get_client_info_from_socket(websocket)
        self._hub.register(connection_id, websocket)
        self._engine.connect(connection_id)
        logger.info(
            f"Connection {connection_id} opened from ip={client_info.ip}, "
            f"agent={client_info.user_agent}"
        )

        close_code: int | None = None
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    close_code = message.get("code")
                    break
                raw = message.get("text")
                if raw is None:
                    raw = message.get("bytes")
                if raw is None:
                    continue
                self.dispatch(connection_id, raw)
        except RuntimeError as e:
            logger.warning(f"Connection {connection_id} receive failed: {e}")
        finally:
            # Exactly one disconnect per accepted session
            self._engine.disconnect(connection_id)
            await self._hub.unregister(connection_id)
            logger.info(f"Connection {connection_id} closed (code={close_code})")

    def dispatch(self, connection_id: str, raw: str | bytes) -> None:
        """Apply one client frame to the presence engine; invalid frames are ignored."""
        try:
            message = parse_inbound_message(raw, self._max_page_id_length)
        except InvalidMessageError as e:
            logger.warning(f"Ignoring message from {connection_id}: {e}")
            return

        if isinstance(message, JoinMessage):
            self._engine.join(connection_id, message.page_id)
        elif isinstance(message, MonitorMessage):
            self._engine.monitor(connection_id, message.page_id)
