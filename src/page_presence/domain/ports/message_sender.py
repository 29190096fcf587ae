"""Message sender port."""

from abc import ABC, abstractmethod
from typing import Any


class MessageSender(ABC):
    """Port for handing a payload to the transport for one connection."""

    @abstractmethod
    def send(self, connection_id: str, payload: dict[str, Any]) -> bool:
        """Queue a payload for delivery without waiting for it.

        Returns:
            True if the payload was accepted for delivery, False if dropped.
        """
        ...
