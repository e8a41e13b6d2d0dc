"""Slack Chat Client Implementation.

Concrete chat_client_api.ChatClient backed by slack_sdk's WebClient. Reads the reacted-to
message via conversations.history and posts/updates thread replies via chat.postMessage
and chat.update. SDK failures are re-raised as ChatClientError.
"""

from __future__ import annotations

from slack_sdk import WebClient
from slack_sdk.errors import SlackClientError

import chat_client_api
from chat_client_api import ChatClient, ChatClientError, ChatMessage, MessageRef

# ---------------------------------------------------------------------------
# Client implementation
# ---------------------------------------------------------------------------


class SlackChatClient(ChatClient):
    """Concrete ChatClient that talks to the Slack Web API.

    Attributes:
        _client: slack_sdk WebClient bound to the bot token.

    """

    def __init__(self, token: str, client: WebClient | None = None) -> None:
        """Initialize the client with a bot token."""
        if not token:
            raise RuntimeError("SLACK_BOT_TOKEN is required.")  # noqa: TRY003, EM101
        self._client = client or WebClient(token=token)

    def fetch_message(self, ref: MessageRef) -> ChatMessage | None:
        """Read the single message at ``ref`` from the channel history."""
        try:
            response = self._client.conversations_history(
                channel=ref.channel,
                latest=ref.ts,
                limit=1,
                inclusive=True,
            )
        except (SlackClientError, OSError) as exc:
            raise ChatClientError(f"conversations.history failed for {ref.channel}") from exc  # noqa: TRY003, EM102
        messages = response.get("messages") or []
        if not messages:
            return None
        first = messages[0]
        return ChatMessage(ref=MessageRef(channel=ref.channel, ts=first.get("ts", ref.ts)), text=first.get("text") or "")

    def post_message(self, channel: str, text: str, *, thread_ts: str | None = None) -> MessageRef:
        """Post ``text`` into ``channel``, threaded under ``thread_ts`` when given."""
        try:
            response = self._client.chat_postMessage(channel=channel, text=text, thread_ts=thread_ts)
        except (SlackClientError, OSError) as exc:
            raise ChatClientError(f"chat.postMessage failed for {channel}") from exc  # noqa: TRY003, EM102
        return MessageRef(channel=response.get("channel") or channel, ts=response["ts"])

    def update_message(self, ref: MessageRef, text: str) -> None:
        """Replace the text of the message at ``ref``."""
        try:
            self._client.chat_update(channel=ref.channel, ts=ref.ts, text=text)
        except (SlackClientError, OSError) as exc:
            raise ChatClientError(f"chat.update failed for {ref.channel}/{ref.ts}") from exc  # noqa: TRY003, EM102


# ---------------------------------------------------------------------------
# Factory registration
# ---------------------------------------------------------------------------


def get_client_impl(token: str) -> SlackChatClient:
    """Return a new SlackChatClient for the bot token."""
    return SlackChatClient(token=token)


def register() -> None:
    """Bind the Slack client factory into chat_client_api.get_client."""
    chat_client_api.get_client = get_client_impl
