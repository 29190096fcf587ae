"""Presence engine: the sole owner and mutator of presence state."""

import logging

from page_presence.application.services.connection_registry import ConnectionRegistry
from page_presence.application.services.page_tables import MembershipTable, SubscriptionTable
from page_presence.domain.contracts.broadcast_gateway import BroadcastGatewayProtocol
from page_presence.domain.models import CountUpdate, PresenceSnapshot

logger = logging.getLogger(__name__)


class PresenceEngine:
    """Tracks joiners and monitors per page and decides broadcast fan-out.

    Every operation is a synchronous critical section: it is meant to be called
    from a single event loop, which serializes all presence events. Nothing
    here awaits or performs I/O; updates are handed to the broadcast gateway,
    which only queues them.

    Page identifiers are opaque keys compared by exact string equality.
    """

    def __init__(
        self,
        gateway: BroadcastGatewayProtocol,
        registry: ConnectionRegistry | None = None,
        membership: MembershipTable | None = None,
        subscriptions: SubscriptionTable | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            gateway: Delivers count updates to connections.
            registry: Connection registry (a fresh one if not given).
            membership: Joiners per page (a fresh table if not given).
            subscriptions: Subscribers per page (a fresh table if not given).
        """
        self._gateway = gateway
        self._registry = registry if registry is not None else ConnectionRegistry()
        self._membership = membership if membership is not None else MembershipTable()
        self._subscriptions = subscriptions if subscriptions is not None else SubscriptionTable()

    def connect(self, connection_id: str) -> None:
        """Register a newly accepted connection."""
        self._registry.on_connect(connection_id)
        logger.debug(f"Connection {connection_id} registered, total: {len(self._registry)}")

    def join(self, connection_id: str, page_id: str) -> int | None:
        """Count a connection on a page and broadcast the new count.

        A connection is counted on at most one page; joining another page first
        leaves the previous one, which gets its own broadcast. Joining the same
        page again leaves the count unchanged but still broadcasts it.

        Returns:
            The new count for the page, or None if the connection is unknown.
        """
        if not self._registry.is_registered(connection_id):
            logger.debug(f"Join from unknown connection {connection_id} ignored")
            return None

        previous_page = self._registry.joined_page(connection_id)
        if previous_page is not None and previous_page != page_id:
            self._leave_joined_page(connection_id, previous_page)

        self._membership.add_member(page_id, connection_id)
        self._subscriptions.add_subscriber(page_id, connection_id)
        self._registry.set_joined_page(connection_id, page_id)

        count = self._membership.get_count(page_id)
        logger.info(f"Presence join: {connection_id} on page '{page_id}', count: {count}")
        self._gateway.broadcast(
            CountUpdate(page_id=page_id, count=count),
            self._subscriptions.get_subscribers(page_id),
        )
        return count

    def monitor(self, connection_id: str, page_id: str) -> int | None:
        """Subscribe a connection to a page without counting it.

        Only the requesting connection is sent the current count, since nothing
        changed for anyone else.

        Returns:
            The current count for the page, or None if the connection is unknown.
        """
        if not self._registry.is_registered(connection_id):
            logger.debug(f"Monitor from unknown connection {connection_id} ignored")
            return None

        self._subscriptions.add_subscriber(page_id, connection_id)
        count = self._membership.get_count(page_id)
        logger.info(f"Presence monitor: {connection_id} watching page '{page_id}', count: {count}")
        self._gateway.unicast(CountUpdate(page_id=page_id, count=count), connection_id)
        return count

    def disconnect(self, connection_id: str) -> None:
        """Remove a connection from every membership and subscription set.

        Only the joined page (if any) gets a broadcast. Repeated or unknown
        disconnects are no-ops.
        """
        joined_page = self._registry.on_disconnect(connection_id)
        monitored_pages = self._subscriptions.remove_connection(connection_id)

        if joined_page is None:
            if monitored_pages:
                logger.info(
                    f"Presence disconnect: monitor {connection_id} dropped from "
                    f"{len(monitored_pages)} page(s)"
                )
            return

        self._membership.remove_member(joined_page, connection_id)
        count = self._membership.get_count(joined_page)
        logger.info(
            f"Presence disconnect: {connection_id} left page '{joined_page}', count: {count}"
        )
        self._gateway.broadcast(
            CountUpdate(page_id=joined_page, count=count),
            self._subscriptions.get_subscribers(joined_page),
        )

    def _leave_joined_page(self, connection_id: str, page_id: str) -> None:
        """Stop counting a connection on a page and broadcast that page's count."""
        self._membership.remove_member(page_id, connection_id)
        self._subscriptions.remove_subscriber(page_id, connection_id)
        self._registry.set_joined_page(connection_id, None)

        count = self._membership.get_count(page_id)
        logger.info(f"Presence leave: {connection_id} left page '{page_id}', count: {count}")
        self._gateway.broadcast(
            CountUpdate(page_id=page_id, count=count),
            self._subscriptions.get_subscribers(page_id),
        )

    def count(self, page_id: str) -> int:
        """Return the number of joiners on a page."""
        return self._membership.get_count(page_id)

    def subscribers(self, page_id: str) -> frozenset[str]:
        """Return the connections that receive updates for a page."""
        return self._subscriptions.get_subscribers(page_id)

    def joined_page(self, connection_id: str) -> str | None:
        """Return the page a connection is counted on, if any."""
        return self._registry.joined_page(connection_id)

    def snapshot(self) -> PresenceSnapshot:
        """Return a read-only view of the current state."""
        page_counts = self._membership.counts()
        return PresenceSnapshot(
            page_counts=page_counts,
            total_joiners=sum(page_counts.values()),
            connection_count=len(self._registry),
            monitored_page_count=len(self._subscriptions),
        )

    def reset(self) -> int:
        """Forget all connections and pages without broadcasting.

        Returns:
            Number of connections that were forgotten.
        """
        forgotten = self._registry.clear()
        self._membership.clear()
        self._subscriptions.clear()
        logger.info(f"Presence reset: forgot {forgotten} connection(s)")
        return forgotten
