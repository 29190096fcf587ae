"""Registry of live connections and the page each one is counted on."""

import logging

from page_presence.domain.models import ConnectionRecord

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """Tracks every live connection and its joined page.

    Never talks to the transport and never triggers broadcasts.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._records: dict[str, ConnectionRecord] = {}

    def on_connect(self, connection_id: str) -> None:
        """Register a connection with no joined page. No-op if already registered."""
        if connection_id in self._records:
            return
        self._records[connection_id] = ConnectionRecord(connection_id=connection_id)

    def on_disconnect(self, connection_id: str) -> str | None:
        """Remove a connection and return the page it was joined to.

        Unknown connections are tolerated and yield None.
        """
        record = self._records.pop(connection_id, None)
        if record is None:
            logger.debug(f"Disconnect for unknown connection {connection_id} ignored")
            return None
        return record.joined_page

    def is_registered(self, connection_id: str) -> bool:
        """Check whether a connection is currently registered."""
        return connection_id in self._records

    def joined_page(self, connection_id: str) -> str | None:
        """Return the page a connection is counted on, if any."""
        record = self._records.get(connection_id)
        return record.joined_page if record is not None else None

    def set_joined_page(self, connection_id: str, page_id: str | None) -> None:
        """Record the page a registered connection is counted on.

        Raises:
            KeyError: If the connection is not registered.
        """
        self._records[connection_id] = self._records[connection_id].with_joined_page(page_id)

    def clear(self) -> int:
        """Forget every connection and return how many there were."""
        forgotten = len(self._records)
        self._records.clear()
        return forgotten

    def __len__(self) -> int:
        return len(self._records)
