"""Web adapters for serving live presence counts."""

from page_presence.adapters.web.broadcasters import CountBroadcaster
from page_presence.adapters.web.connection_hub import ConnectionHub
from page_presence.adapters.web.starlette_app import PresenceWebAdapter

__all__ = ["ConnectionHub", "CountBroadcaster", "PresenceWebAdapter"]
