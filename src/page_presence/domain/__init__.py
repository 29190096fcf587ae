"""Domain layer - presence models, contracts and ports."""

from page_presence.domain.models import ConnectionRecord, CountUpdate, PresenceSnapshot
from page_presence.domain.ports import MessageSender, PresenceServer

__all__ = [
    "ConnectionRecord",
    "CountUpdate",
    "MessageSender",
    "PresenceServer",
    "PresenceSnapshot",
]
