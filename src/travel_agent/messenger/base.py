"""Abstract messenger adapter interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from travel_agent.messenger.models import IncomingMessage, OutgoingMessage


class MessengerAdapter(ABC):
    """Base class for chat platform adapters."""

    @abstractmethod
    async def start(self) -> None:
        """Connect to the platform and begin receiving messages."""
        ...

    @abstractmethod
    async def stop(self) -> None:
        """Gracefully disconnect."""
        ...

    @abstractmethod
    async def send_message(self, message: OutgoingMessage) -> None:
        """Send a message to a specific chat."""
        ...

    @abstractmethod
    async def send_typing_indicator(self, chat_id: str) -> None:
        ...

    @abstractmethod
    async def handle_incoming(self, message: IncomingMessage) -> None:
        """Answer one free-text message from the platform."""
        ...

    @property
    @abstractmethod
    def platform_name(self) -> str:
        ...
