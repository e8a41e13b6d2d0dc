"""Shared fakes for orchestrator tests."""

from __future__ import annotations

from typing import Any

import pytest
from orchestrator.config import Settings
from orchestrator.pipeline import LookupPipeline

from chat_client_api import ChatClient, ChatClientError, ChatMessage, MessageRef
from research_client_api import LookupProvider, NameExtractor, OrganizationRecord


class FakeChat(ChatClient):
    """Records every messaging call in order."""

    def __init__(self, source_text: str | None = "Please research Oxfam") -> None:
        self.source_text = source_text
        self.calls: list[tuple[str, Any]] = []
        self.fail_fetch = False
        self.fail_post = False
        self.fail_update = False
        self._next_ts = 100

    def fetch_message(self, ref: MessageRef) -> ChatMessage | None:
        self.calls.append(("fetch", ref))
        if self.fail_fetch:
            raise ChatClientError("history unavailable")
        if self.source_text is None:
            return None
        return ChatMessage(ref=ref, text=self.source_text)

    def post_message(self, channel: str, text: str, *, thread_ts: str | None = None) -> MessageRef:
        self.calls.append(("post", {"channel": channel, "text": text, "thread_ts": thread_ts}))
        if self.fail_post:
            raise ChatClientError("post failed")
        self._next_ts += 1
        return MessageRef(channel=channel, ts=f"{self._next_ts}.0")

    def update_message(self, ref: MessageRef, text: str) -> None:
        self.calls.append(("update", {"ref": ref, "text": text}))
        if self.fail_update:
            raise ChatClientError("update failed")

    @property
    def outbound(self) -> list[tuple[str, Any]]:
        """Posts and updates only, in call order."""
        return [call for call in self.calls if call[0] in {"post", "update"}]


class FakeExtractor(NameExtractor):
    """Returns a fixed name, or raises a fixed error."""

    def __init__(self, name: str | None = "Oxfam", error: Exception | None = None) -> None:
        self.name = name
        self.error = error
        self.calls: list[str] = []

    def extract_name(self, text: str) -> str | None:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.name


class FakeProvider(LookupProvider):
    """Returns a fixed record, or raises a fixed error."""

    def __init__(self, record: OrganizationRecord | None = None, error: Exception | None = None) -> None:
        self.record = record
        self.error = error
        self.calls: list[str] = []

    def lookup(self, name: str) -> OrganizationRecord | None:
        self.calls.append(name)
        if self.error is not None:
            raise self.error
        return self.record


OXFAM = OrganizationRecord(
    name="Oxfam GB",
    registration_id="202918",
    activities="Fighting poverty worldwide",
    areas=("United Kingdom", "Kenya"),
    website="https://www.oxfam.org.uk",
    founded_year="1942",
    summary="A global movement against poverty.",
)


@pytest.fixture
def oxfam() -> OrganizationRecord:
    """A fully populated organization record."""
    return OXFAM


@pytest.fixture
def settings() -> Settings:
    """Production settings with test credentials."""
    return Settings(
        slack_bot_token="xoxb-test",
        slack_signing_secret="test-secret",
        anthropic_api_key="test-key",
    )


@pytest.fixture
def chat() -> FakeChat:
    """Recording chat client."""
    return FakeChat()


@pytest.fixture
def extractor() -> FakeExtractor:
    """Extractor that finds Oxfam."""
    return FakeExtractor()


@pytest.fixture
def provider() -> FakeProvider:
    """Provider that finds the Oxfam record."""
    return FakeProvider(record=OXFAM)


@pytest.fixture
def pipeline(chat: FakeChat, extractor: FakeExtractor, provider: FakeProvider) -> LookupPipeline:
    """Pipeline wired to the fakes."""
    return LookupPipeline(chat=chat, extractor=extractor, provider=provider)
