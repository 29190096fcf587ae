"""Utilities for extracting client information from ASGI connection scopes.

These helpers are small and tolerant of odd input so they can be used for
logging from any adapter module without coupling it to the web framework.
"""

from __future__ import annotations

from typing import Any

from page_presence.domain.models import ClientInfo

_UNKNOWN = "unknown"
_MAX_USER_AGENT_LENGTH = 200


def _decode_header_value(value: Any) -> str:
    """Decode a header value into a readable string."""
    if isinstance(value, bytes):
        return value.decode("latin1", errors="replace")
    return str(value)


def get_client_info_from_scope(scope: Any) -> ClientInfo:
    """Extract client IP and user agent from an ASGI scope-like mapping.

    Forwarding headers (``X-Forwarded-For``, then ``Fly-Client-IP``) take
    precedence over the direct peer address. Missing values fall back to
    ``"unknown"``.
    """
    if not isinstance(scope, dict):
        return ClientInfo(ip=_UNKNOWN, user_agent=_UNKNOWN)

    user_agent = _UNKNOWN
    forwarded_for: str | None = None
    fly_client_ip: str | None = None

    for name, value in scope.get("headers") or []:
        decoded_name = _decode_header_value(name).lower()
        if decoded_name == "user-agent":
            user_agent = _decode_header_value(value)
            if len(user_agent) > _MAX_USER_AGENT_LENGTH:
                user_agent = f"{user_agent[: _MAX_USER_AGENT_LENGTH - 3]}..."
        elif decoded_name == "x-forwarded-for":
            forwarded_for = _decode_header_value(value)
        elif decoded_name == "fly-client-ip":
            fly_client_ip = _decode_header_value(value)

    ip = _UNKNOWN
    first_forwarded = forwarded_for.split(",")[0].strip() if forwarded_for else ""
    if first_forwarded:
        ip = first_forwarded
    elif fly_client_ip:
        ip = fly_client_ip.strip()
    else:
        client = scope.get("client")
        if isinstance(client, (list, tuple)) and client and isinstance(client[0], (str, bytes)):
            ip = _decode_header_value(client[0])

    return ClientInfo(ip=ip, user_agent=user_agent)


def get_client_info_from_socket(socket: Any) -> ClientInfo:
    """Extract client info from anything exposing an ASGI ``scope`` attribute."""
    return get_client_info_from_scope(getattr(socket, "scope", None))
