"""Public export surface for ``chat_client_api``."""

from chat_client_api.client import ChatClient, ChatClientError, get_client
from chat_client_api.models import ChatMessage, MessageRef

__all__ = ["ChatClient", "ChatClientError", "ChatMessage", "MessageRef", "get_client"]
