"""Schemas for chat messages and message references."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

__all__ = ["ChatMessage", "MessageRef"]


class MessageRef(BaseModel):
    """Reference to a single message within a conversation."""

    model_config = ConfigDict(frozen=True)

    channel: str
    ts: str


class ChatMessage(BaseModel):
    """A message read back from the chat platform."""

    model_config = ConfigDict(frozen=True)

    ref: MessageRef
    text: str
