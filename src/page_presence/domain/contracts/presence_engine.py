"""Presence engine contract (protocol)."""

from typing import Protocol

from page_presence.domain.models.presence_snapshot import PresenceSnapshot


class PresenceEngineProtocol(Protocol):
    """Protocol for the component that owns all presence state."""

    def connect(self, connection_id: str) -> None:
        """Register a newly accepted connection."""
        ...

    def join(self, connection_id: str, page_id: str) -> int | None:
        """Count a connection on a page, leaving any previously joined page.

        Returns:
            The new count for the page, or None if the connection is unknown.
        """
        ...

    def monitor(self, connection_id: str, page_id: str) -> int | None:
        """Subscribe a connection to a page's count without counting it.

        Returns:
            The current count for the page, or None if the connection is unknown.
        """
        ...

    def disconnect(self, connection_id: str) -> None:
        """Remove every trace of a connection."""
        ...

    def count(self, page_id: str) -> int:
        """Return the number of joiners on a page."""
        ...

    def snapshot(self) -> PresenceSnapshot:
        """Return a read-only view of the current state."""
        ...

    def reset(self) -> int:
        """Forget all connections and pages.

        Returns:
            Number of connections that were forgotten.
        """
        ...
