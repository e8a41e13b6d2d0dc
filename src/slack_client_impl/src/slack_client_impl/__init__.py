"""Public exports for the Slack chat client implementation package."""

from slack_client_impl.slack_impl import SlackChatClient, register

register()

__all__ = ["SlackChatClient", "register"]
