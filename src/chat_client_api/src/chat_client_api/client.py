"""Abstract interfaces for chat platform messaging."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chat_client_api.models import ChatMessage, MessageRef

__all__ = ["ChatClient", "ChatClientError", "get_client"]


class ChatClientError(Exception):
    """Raised when a chat platform call fails."""


class ChatClient(ABC):
    """The contract for reading, posting and updating conversation messages."""

    @abstractmethod
    def fetch_message(self, ref: MessageRef) -> ChatMessage | None:
        """Fetch exactly one message, the one at ``ref``.

        Args:
            ref: Channel and timestamp of the message.

        Returns:
            The message, or None when the platform returned nothing.

        """
        raise NotImplementedError

    @abstractmethod
    def post_message(self, channel: str, text: str, *, thread_ts: str | None = None) -> MessageRef:
        """Post a new message, optionally as a thread reply.

        Args:
            channel: Conversation identifier.
            text: Message text.
            thread_ts: Timestamp of the thread anchor message.

        Returns:
            Reference to the posted message.

        """
        raise NotImplementedError

    @abstractmethod
    def update_message(self, ref: MessageRef, text: str) -> None:
        """Replace the text of a previously posted message.

        Args:
            ref: Reference returned by ``post_message``.
            text: Replacement text.

        """
        raise NotImplementedError


def get_client(token: str) -> ChatClient:
    """Return the default chat client implementation.

    Args:
        token: Bot credential for the platform.

    Returns:
        ChatClient implementation.

    """
    raise NotImplementedError
