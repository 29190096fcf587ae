"""Protocols for internal presence collaborators."""

from page_presence.domain.contracts.broadcast_gateway import BroadcastGatewayProtocol
from page_presence.domain.contracts.presence_engine import PresenceEngineProtocol

__all__ = ["BroadcastGatewayProtocol", "PresenceEngineProtocol"]
