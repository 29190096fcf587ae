"""Static asset servers."""

from page_presence.adapters.web.servers.static_file_server import StaticFileServer

__all__ = ["StaticFileServer"]
