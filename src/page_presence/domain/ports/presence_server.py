"""Presence server port."""

from abc import ABC, abstractmethod


class PresenceServer(ABC):
    """Port for the network server that feeds transport events to the engine."""

    @abstractmethod
    async def start(self) -> None:
        """Start serving connections."""
        ...

    @abstractmethod
    async def stop(self) -> None:
        """Stop serving connections."""
        ...
