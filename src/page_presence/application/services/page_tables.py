"""Per-page sets of connection identifiers.

Both tables are plain hash-based containers. They never reject an operation;
the presence engine is responsible for keeping them consistent with each
other and with the connection registry. A page with an empty set is removed,
so an absent key and an empty set mean the same thing.
"""


class PageSetTable:
    """Maps page identifiers to sets of connection identifiers.

    Mutators are private; subclasses expose the operations that keep their
    own bookkeeping in step.
    """

    def __init__(self) -> None:
        """Initialize an empty table."""
        self._pages: dict[str, set[str]] = {}

    def _add(self, page_id: str, connection_id: str) -> None:
        """Add a connection to a page's set, creating the entry if needed."""
        self._pages.setdefault(page_id, set()).add(connection_id)

    def _remove(self, page_id: str, connection_id: str) -> None:
        """Remove a connection from a page's set and drop the entry once empty."""
        members = self._pages.get(page_id)
        if members is None:
            return
        members.discard(connection_id)
        if not members:
            del self._pages[page_id]

    def size(self, page_id: str) -> int:
        """Return the number of connections on a page."""
        return len(self._pages.get(page_id, ()))

    def members(self, page_id: str) -> frozenset[str]:
        """Return a snapshot of the connections on a page."""
        return frozenset(self._pages.get(page_id, ()))

    def clear(self) -> None:
        """Drop every page."""
        self._pages.clear()

    def __len__(self) -> int:
        return len(self._pages)


class MembershipTable(PageSetTable):
    """Joiners per page. A page's count is the size of its set."""

    def add_member(self, page_id: str, connection_id: str) -> None:
        """Count a connection on a page."""
        self._add(page_id, connection_id)

    def remove_member(self, page_id: str, connection_id: str) -> None:
        """Stop counting a connection on a page."""
        self._remove(page_id, connection_id)

    def get_count(self, page_id: str) -> int:
        """Return the number of joiners on a page."""
        return self.size(page_id)

    def counts(self) -> dict[str, int]:
        """Return the count of every page that has at least one joiner."""
        return {page_id: len(members) for page_id, members in self._pages.items()}


class SubscriptionTable(PageSetTable):
    """Connections that receive count updates per page (joiners and monitors)."""

    def __init__(self) -> None:
        """Initialize an empty table and its per-connection index."""
        super().__init__()
        # Reverse index so disconnect cleanup does not scan every page
        self._pages_by_connection: dict[str, set[str]] = {}

    def add_subscriber(self, page_id: str, connection_id: str) -> None:
        """Subscribe a connection to a page's updates."""
        self._add(page_id, connection_id)
        self._pages_by_connection.setdefault(connection_id, set()).add(page_id)

    def remove_subscriber(self, page_id: str, connection_id: str) -> None:
        """Unsubscribe a connection from one page."""
        self._remove(page_id, connection_id)
        pages = self._pages_by_connection.get(connection_id)
        if pages is None:
            return
        pages.discard(page_id)
        if not pages:
            del self._pages_by_connection[connection_id]

    def get_subscribers(self, page_id: str) -> frozenset[str]:
        """Return a snapshot of a page's subscribers."""
        return self.members(page_id)

    def remove_connection(self, connection_id: str) -> frozenset[str]:
        """Unsubscribe a connection from every page and return those pages."""
        pages = self._pages_by_connection.pop(connection_id, set())
        for page_id in pages:
            self._remove(page_id, connection_id)
        return frozenset(pages)

    def clear(self) -> None:
        """Drop every page and the per-connection index."""
        super().clear()
        self._pages_by_connection.clear()
