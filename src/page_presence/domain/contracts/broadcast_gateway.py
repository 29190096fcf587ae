"""Protocol for delivering count updates."""

from collections.abc import Iterable
from typing import Protocol

from page_presence.domain.models.count_update import CountUpdate


class BroadcastGatewayProtocol(Protocol):
    """Protocol for fire-and-forget delivery of count updates to connections."""

    def broadcast(self, update: CountUpdate, recipients: Iterable[str]) -> None:
        """Deliver an update to every connection in ``recipients``.

        Must return without waiting for delivery and must never raise. A failed
        delivery to one recipient does not affect the others.

        Args:
            update: The page and its current count.
            recipients: Connection identifiers subscribed to the page.
        """
        ...

    def unicast(self, update: CountUpdate, connection_id: str) -> None:
        """Deliver an update to a single connection.

        Args:
            update: The page and its current count.
            connection_id: The requesting connection.
        """
        ...
