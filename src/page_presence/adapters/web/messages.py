"""Parsing and validation of inbound WebSocket messages.

The presence engine accepts any string as a page identifier. Rejecting
unusable identifiers is the transport boundary's job, done here.
"""

from pydantic import TypeAdapter, ValidationError

from page_presence.domain.models import InboundMessage

_inbound_adapter: TypeAdapter[InboundMessage] = TypeAdapter(InboundMessage)


class InvalidMessageError(ValueError):
    """Raised when a client message cannot be turned into a presence event."""


def parse_inbound_message(raw: str | bytes, max_page_id_length: int) -> InboundMessage:
    """Parse a JSON text frame into a join or monitor message.

    Args:
        raw: The frame as received from the client.
        max_page_id_length: Longest page identifier to accept.

    Returns:
        The parsed message.

    Raises:
        InvalidMessageError: If the frame is not valid JSON, names an unknown
            event, or carries an empty or overlong page identifier.
    """
    try:
        message = _inbound_adapter.validate_json(raw)
    except ValidationError as e:
        raise InvalidMessageError(
            f"unrecognized message: {e.error_count()} validation error(s)"
        ) from e

    if not message.page_id:
        raise InvalidMessageError(f"empty page id in '{message.event}' message")
    if len(message.page_id) > max_page_id_length:
        raise InvalidMessageError(
            f"page id of length {len(message.page_id)} exceeds limit of {max_page_id_length}"
        )
    return message
