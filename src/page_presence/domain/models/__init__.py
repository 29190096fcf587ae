"""Domain models for page presence."""

from page_presence.domain.models.client_info import ClientInfo
from page_presence.domain.models.connection_record import ConnectionRecord
from page_presence.domain.models.count_update import COUNT_UPDATE_EVENT, CountUpdate
from page_presence.domain.models.inbound_message import (
    InboundMessage,
    JoinMessage,
    MonitorMessage,
)
from page_presence.domain.models.presence_snapshot import PresenceSnapshot

__all__ = [
    "COUNT_UPDATE_EVENT",
    "ClientInfo",
    "ConnectionRecord",
    "CountUpdate",
    "InboundMessage",
    "JoinMessage",
    "MonitorMessage",
    "PresenceSnapshot",
]
