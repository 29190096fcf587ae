"""Broadcasters for web adapter."""

from page_presence.adapters.web.broadcasters.count_broadcaster import CountBroadcaster

__all__ = ["CountBroadcaster"]
