"""Pydantic schemas for inbound Slack events and pipeline requests."""

from __future__ import annotations

import json
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from chat_client_api import MessageRef

if TYPE_CHECKING:
    from collections.abc import Mapping

SIGNATURE_HEADER = "X-Slack-Signature"
TIMESTAMP_HEADER = "X-Slack-Request-Timestamp"


class EventType(str, Enum):
    """Inbound event kinds the webhook distinguishes."""

    REACTION_ADDED = "reaction_added"
    URL_VERIFICATION = "url_verification"
    OTHER = "other"


class InboundEvent(BaseModel):
    """A webhook request as received, before verification."""

    model_config = ConfigDict(frozen=True)

    type: EventType
    raw_body: str
    signature: str | None = None
    raw_timestamp: str | None = None
    challenge: str | None = None
    reaction: str | None = None
    target: MessageRef | None = None

    @classmethod
    def from_request(cls, raw_body: str, headers: Mapping[str, str]) -> InboundEvent:
        """Build an event from the raw body and request headers.

        Unparseable bodies become ``OTHER`` events; they are rejected or ignored later.
        """
        signature = headers.get(SIGNATURE_HEADER)
        timestamp = headers.get(TIMESTAMP_HEADER)
        payload = _load_json(raw_body)

        challenge = payload.get("challenge")
        if challenge:
            return cls(
                type=EventType.URL_VERIFICATION,
                raw_body=raw_body,
                signature=signature,
                raw_timestamp=timestamp,
                challenge=str(challenge),
            )

        event = payload.get("event")
        if not isinstance(event, dict) or event.get("type") != EventType.REACTION_ADDED.value:
            return cls(type=EventType.OTHER, raw_body=raw_body, signature=signature, raw_timestamp=timestamp)

        return cls(
            type=EventType.REACTION_ADDED,
            raw_body=raw_body,
            signature=signature,
            raw_timestamp=timestamp,
            reaction=event.get("reaction"),
            target=_message_ref(event.get("item")),
        )

    def is_trigger(self, trigger_emoji: str) -> bool:
        """Return True if this event should start a lookup."""
        return (
            self.type is EventType.REACTION_ADDED
            and self.reaction == trigger_emoji
            and self.target is not None
        )


class LookupRequest(BaseModel):
    """Inputs owned by a single pipeline run."""

    model_config = ConfigDict(frozen=True)

    source_text: str
    channel: str
    thread_ts: str


class DevLookupRequest(BaseModel):
    """Development-mode request body carrying plain message text."""

    message: str | None = None


class WebhookAck(BaseModel):
    """Generic acknowledgement returned for received events."""

    ok: bool = True


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_json(raw_body: str) -> dict[str, Any]:
    try:
        payload = json.loads(raw_body)
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


def _message_ref(item: object) -> MessageRef | None:
    if not isinstance(item, dict):
        return None
    channel = item.get("channel")
    ts = item.get("ts")
    if not channel or not ts:
        return None
    return MessageRef(channel=str(channel), ts=str(ts))
