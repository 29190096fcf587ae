"""Ports (interfaces) for the ports-and-adapters architecture."""

from page_presence.domain.ports.message_sender import MessageSender
from page_presence.domain.ports.presence_server import PresenceServer

__all__ = ["MessageSender", "PresenceServer"]
