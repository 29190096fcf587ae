"""Broadcaster for page count updates."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from page_presence.domain.contracts.broadcast_gateway import BroadcastGatewayProtocol

if TYPE_CHECKING:
    from collections.abc import Iterable

    from page_presence.domain.models import CountUpdate
    from page_presence.domain.ports import MessageSender

logger = logging.getLogger(__name__)


class CountBroadcaster(BroadcastGatewayProtocol):
    """Fans count updates out to connections through a message sender."""

    def __init__(self, sender: MessageSender) -> None:
        """Initialize with the sender that reaches individual connections."""
        self._sender = sender

    def _deliver(self, connection_id: str, update: CountUpdate) -> bool:
        try:
            return self._sender.send(connection_id, update.to_payload())
        except Exception as e:
            logger.error(
                f"Failed to deliver count for '{update.page_id}' to {connection_id}: {e}",
                exc_info=True,
            )
            return False

    def broadcast(self, update: CountUpdate, recipients: Iterable[str]) -> None:
        """Deliver an update to every subscriber of its page.

        A failure for one recipient is logged and the rest still get the update.
        """
        targets = list(recipients)
        delivered = sum(1 for connection_id in targets if self._deliver(connection_id, update))
        logger.debug(
            f"Broadcast count {update.count} for '{update.page_id}' "
            f"to {delivered}/{len(targets)} subscriber(s)"
        )

    def unicast(self, update: CountUpdate, connection_id: str) -> None:
        """Deliver an update to a single connection."""
        if self._deliver(connection_id, update):
            logger.debug(f"Sent count {update.count} for '{update.page_id}' to {connection_id}")
