"""Application services for presence tracking."""

from page_presence.application.services.connection_registry import ConnectionRegistry
from page_presence.application.services.page_tables import (
    MembershipTable,
    PageSetTable,
    SubscriptionTable,
)
from page_presence.application.services.presence_engine import PresenceEngine

__all__ = [
    "ConnectionRegistry",
    "MembershipTable",
    "PageSetTable",
    "PresenceEngine",
    "SubscriptionTable",
]
