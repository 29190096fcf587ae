"""Live WebSocket connections and their outbound queues."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from starlette.websockets import WebSocketDisconnect, WebSocketState

from page_presence.domain.ports import MessageSender

if TYPE_CHECKING:
    from starlette.websockets import WebSocket

logger = logging.getLogger(__name__)

# Service restart, so well-behaved clients reconnect
CLOSE_CODE_SERVICE_RESTART = 1012
# Internal error; the client reconnects and re-joins
CLOSE_CODE_DELIVERY_FAILED = 1011


@dataclass
class _Outbox:
    websocket: WebSocket
    queue: asyncio.Queue[dict[str, Any]]
    writer: asyncio.Task[None] | None = None
    closed: bool = field(default=False)


@dataclass(frozen=True)
class CloseReport:
    """Outcome of closing every registered socket."""

    closed: int
    failed: tuple[str, ...] = ()


class ConnectionHub(MessageSender):
    """Maps connection ids to WebSockets and delivers payloads to them.

    Each connection gets a bounded queue drained by its own writer task, so
    ``send`` never waits and a stalled client only ever delays itself. A socket
    whose send fails or times out is closed, so the transport reports its
    disconnect and presence state is cleaned up.
    """

    def __init__(self, queue_size: int = 64, send_timeout_seconds: float = 5.0) -> None:
        """Initialize the hub.

        Args:
            queue_size: Payloads buffered per connection before the oldest are dropped.
            send_timeout_seconds: Time allowed for a single WebSocket send or close.
        """
        self.queue_size = queue_size
        self.send_timeout_seconds = send_timeout_seconds
        self._outboxes: dict[str, _Outbox] = {}

    @property
    def connected_count(self) -> int:
        """Number of registered connections."""
        return len(self._outboxes)

    def register(self, connection_id: str, websocket: WebSocket) -> None:
        """Start delivering payloads to an accepted WebSocket.

        Must be called from a running event loop.
        """
        if connection_id in self._outboxes:
            logger.warning(f"Connection {connection_id} already registered, ignoring")
            return
        outbox = _Outbox(websocket=websocket, queue=asyncio.Queue(maxsize=self.queue_size))
        outbox.writer = asyncio.create_task(
            self._drain(connection_id, outbox), name=f"ws-writer-{connection_id}"
        )
        self._outboxes[connection_id] = outbox
        logger.debug(f"Registered connection {connection_id}, total: {len(self._outboxes)}")

    async def unregister(self, connection_id: str) -> None:
        """Stop the writer for a connection and forget it. Unknown ids are ignored."""
        outbox = self._outboxes.pop(connection_id, None)
        if outbox is None:
            return
        outbox.closed = True
        if outbox.writer is not None and not outbox.writer.done():
            outbox.writer.cancel()
            await asyncio.wait({outbox.writer})
        logger.debug(f"Unregistered connection {connection_id}, total: {len(self._outboxes)}")

    def send(self, connection_id: str, payload: dict[str, Any]) -> bool:
        """Queue a payload for a connection without waiting.

        When the queue is full the oldest pending payload is dropped, so a
        client that catches up ends on the most recent counts.
        """
        outbox = self._outboxes.get(connection_id)
        if outbox is None or outbox.closed:
            logger.debug(f"Dropping payload for unavailable connection {connection_id}")
            return False
        if outbox.queue.full():
            outbox.queue.get_nowait()
            logger.warning(
                f"Outbound queue full for connection {connection_id} "
                f"({self.queue_size} pending), dropping oldest payload"
            )
        outbox.queue.put_nowait(payload)
        return True

    async def _drain(self, connection_id: str, outbox: _Outbox) -> None:
        """Write queued payloads to the socket until it fails or is unregistered."""
        while True:
            payload = await outbox.queue.get()
            try:
                await asyncio.wait_for(
                    outbox.websocket.send_json(payload), timeout=self.send_timeout_seconds
                )
            except asyncio.TimeoutError:
                logger.warning(
                    f"Send to connection {connection_id} timed out after "
                    f"{self.send_timeout_seconds}s, closing it"
                )
            except (WebSocketDisconnect, RuntimeError, ConnectionError) as e:
                logger.info(f"Send to connection {connection_id} failed: {e!r}")
            else:
                continue
            outbox.closed = True
            await self._close_after_failure(connection_id, outbox)
            return

    async def _close_after_failure(self, connection_id: str, outbox: _Outbox) -> None:
        """Close a socket that can no longer be written to.

        The endpoint then sees the disconnect and removes the connection from
        presence state; the client's reconnect joins again.
        """
        if outbox.websocket.application_state == WebSocketState.DISCONNECTED:
            return
        try:
            await asyncio.wait_for(
                outbox.websocket.close(code=CLOSE_CODE_DELIVERY_FAILED),
                timeout=self.send_timeout_seconds,
            )
        except (asyncio.TimeoutError, RuntimeError, ConnectionError) as e:
            logger.warning(f"Closing undeliverable connection {connection_id} failed: {e!r}")

    async def close_all(self, code: int = CLOSE_CODE_SERVICE_RESTART) -> CloseReport:
        """Close every registered WebSocket.

        Returns:
            How many sockets a close was sent to, and the ids of those whose
            close failed and may still be open.
        """
        closed = 0
        failed: list[str] = []
        for connection_id, outbox in list(self._outboxes.items()):
            outbox.closed = True
            if outbox.websocket.application_state == WebSocketState.DISCONNECTED:
                continue
            try:
                await outbox.websocket.close(code=code)
                closed += 1
            except (RuntimeError, ConnectionError) as e:
                logger.warning(f"Closing connection {connection_id} failed: {e!r}")
                failed.append(connection_id)
        if failed:
            logger.warning(
                f"Closed {closed} connection(s); {len(failed)} could not be closed "
                f"and will receive no updates: {failed}"
            )
        else:
            logger.info(f"Closed {closed} connection(s)")
        return CloseReport(closed=closed, failed=tuple(failed))
