"""Tests for the lookup pipeline state machine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from orchestrator.report import ErrorKind, render_error
from orchestrator.results import (
    Delivered,
    DeliveredError,
    FailureKind,
    PipelineState,
    Unrecoverable,
)

from chat_client_api import MessageRef
from research_client_api import ResearchProviderError

if TYPE_CHECKING:
    from orchestrator.pipeline import LookupPipeline

TARGET = MessageRef(channel="C1", ts="1700000000.000100")


@pytest.mark.asyncio
async def test_found_posts_progress_then_updates_same_message(pipeline: LookupPipeline, chat: Any, provider: Any) -> None:
    """A found record yields exactly one post followed by one update of that post."""
    outcome = await pipeline.run(TARGET)

    assert isinstance(outcome, Delivered)
    assert [kind for kind, _ in chat.outbound] == ["post", "update"]
    post, update = chat.outbound[0][1], chat.outbound[1][1]
    assert "Oxfam" in post["text"]
    assert post["thread_ts"] == TARGET.ts
    assert update["ref"] == MessageRef(channel="C1", ts="101.0")
    assert "Oxfam GB" in update["text"]
    assert "oxfam.org.uk" in update["text"]
    assert "1942" in update["text"]
    assert outcome.report == update["text"]
    assert provider.calls == ["Oxfam"]


@pytest.mark.asyncio
async def test_reads_source_message_once(pipeline: LookupPipeline, chat: Any, extractor: Any) -> None:
    """The reacted-to message is read once and its text handed to the extractor."""
    await pipeline.run(TARGET)

    assert [call for call in chat.calls if call[0] == "fetch"] == [("fetch", TARGET)]
    assert extractor.calls == ["Please research Oxfam"]


@pytest.mark.asyncio
async def test_extraction_empty_posts_single_final_message(pipeline: LookupPipeline, chat: Any, extractor: Any, provider: Any) -> None:
    """No name found means one direct message and no placeholder."""
    extractor.name = None

    outcome = await pipeline.run(TARGET)

    assert outcome == DeliveredError(FailureKind.EXTRACTION_EMPTY)
    assert len(chat.outbound) == 1
    assert chat.outbound[0][0] == "post"
    assert chat.outbound[0][1]["text"] == render_error("", ErrorKind.EXTRACTION_FAILED)
    assert provider.calls == []


@pytest.mark.asyncio
async def test_extraction_failure_posts_api_error(pipeline: LookupPipeline, chat: Any, extractor: Any, provider: Any) -> None:
    """A throwing extractor is reported once without a placeholder."""
    extractor.error = ResearchProviderError("boom")

    outcome = await pipeline.run(TARGET)

    assert outcome == DeliveredError(FailureKind.EXTRACTION_FAILURE)
    assert [kind for kind, _ in chat.outbound] == ["post"]
    assert chat.outbound[0][1]["text"] == render_error("", ErrorKind.API_ERROR)
    assert provider.calls == []


@pytest.mark.asyncio
async def test_lookup_failure_updates_with_api_error(pipeline: LookupPipeline, chat: Any, provider: Any) -> None:
    """A throwing provider keeps the two-call shape with the api_error text."""
    provider.error = ResearchProviderError("quota exceeded")

    outcome = await pipeline.run(TARGET)

    assert outcome == DeliveredError(FailureKind.LOOKUP_FAILURE)
    assert [kind for kind, _ in chat.outbound] == ["post", "update"]
    assert chat.outbound[1][1]["text"] == render_error("Oxfam", ErrorKind.API_ERROR)
    assert '"Oxfam"' in chat.outbound[1][1]["text"]
    assert chat.outbound[1][1]["ref"] == MessageRef(channel="C1", ts="101.0")


@pytest.mark.asyncio
async def test_lookup_empty_updates_with_not_found(pipeline: LookupPipeline, chat: Any, provider: Any) -> None:
    """A provider returning nothing yields the not_found template."""
    provider.record = None

    outcome = await pipeline.run(TARGET)

    assert outcome == DeliveredError(FailureKind.LOOKUP_EMPTY)
    assert [kind for kind, _ in chat.outbound] == ["post", "update"]
    assert chat.outbound[1][1]["text"] == render_error("Oxfam", ErrorKind.NOT_FOUND)


@pytest.mark.asyncio
async def test_missing_source_message_posts_generic_error(pipeline: LookupPipeline, chat: Any, extractor: Any) -> None:
    """An empty history read stops the run before extraction."""
    chat.source_text = None

    outcome = await pipeline.run(TARGET)

    assert outcome == Unrecoverable(FailureKind.SOURCE_MESSAGE_MISSING, PipelineState.IDLE)
    assert extractor.calls == []
    assert [kind for kind, _ in chat.outbound] == ["post"]
    assert chat.outbound[0][1]["text"] == render_error("", ErrorKind.GENERIC)


@pytest.mark.asyncio
async def test_source_read_error_is_treated_as_missing(pipeline: LookupPipeline, chat: Any, extractor: Any) -> None:
    """A failing history read behaves like a missing message."""
    chat.fail_fetch = True

    outcome = await pipeline.run(TARGET)

    assert isinstance(outcome, Unrecoverable)
    assert outcome.kind is FailureKind.SOURCE_MESSAGE_MISSING
    assert extractor.calls == []


@pytest.mark.asyncio
async def test_error_post_failure_is_swallowed(pipeline: LookupPipeline, chat: Any) -> None:
    """If even the error message cannot be posted, the run ends quietly."""
    chat.source_text = None
    chat.fail_post = True

    outcome = await pipeline.run(TARGET)

    assert isinstance(outcome, Unrecoverable)
    assert len(chat.outbound) == 1


@pytest.mark.asyncio
async def test_placeholder_post_failure_skips_lookup(pipeline: LookupPipeline, chat: Any, provider: Any) -> None:
    """Without a placeholder there is nothing to update, so no lookup is made."""
    chat.fail_post = True

    outcome = await pipeline.run(TARGET)

    assert outcome == Unrecoverable(FailureKind.DELIVERY_FAILURE, PipelineState.SEARCHING)
    assert provider.calls == []
    assert [kind for kind, _ in chat.outbound] == ["post"]


@pytest.mark.asyncio
async def test_update_failure_never_posts_again(pipeline: LookupPipeline, chat: Any) -> None:
    """A failed update is logged and swallowed; no second placeholder appears."""
    chat.fail_update = True

    outcome = await pipeline.run(TARGET)

    assert outcome == Unrecoverable(FailureKind.DELIVERY_FAILURE, PipelineState.FOUND)
    assert [kind for kind, _ in chat.outbound] == ["post", "update"]


@pytest.mark.asyncio
async def test_preview_returns_report_without_posting(pipeline: LookupPipeline, chat: Any, oxfam: Any) -> None:
    """Preview runs extraction, lookup and rendering only."""
    preview = await pipeline.preview("Please research Oxfam")

    assert preview.success is True
    assert preview.extracted_name == "Oxfam"
    assert preview.record == oxfam
    assert preview.report is not None
    assert "Oxfam GB" in preview.report
    assert chat.calls == []


@pytest.mark.asyncio
async def test_preview_reports_lookup_failure(pipeline: LookupPipeline, provider: Any) -> None:
    """Lookup failures are described in the preview instead of raised."""
    provider.error = ResearchProviderError("quota exceeded")

    preview = await pipeline.preview("Please research Oxfam")

    assert preview.success is False
    assert preview.error == "Charity lookup failed"
    assert preview.error_report == render_error("Oxfam", ErrorKind.API_ERROR)
    assert preview.details == "quota exceeded"


@pytest.mark.asyncio
async def test_preview_without_name(pipeline: LookupPipeline, extractor: Any, provider: Any) -> None:
    """A message without an organization yields no extracted name."""
    extractor.name = None

    preview = await pipeline.preview("hello team")

    assert preview.success is False
    assert preview.extracted_name is None
    assert provider.calls == []


@pytest.mark.asyncio
async def test_preview_propagates_extraction_failure(pipeline: LookupPipeline, extractor: Any) -> None:
    """Extraction errors propagate to the development route."""
    extractor.error = ResearchProviderError("boom")
    with pytest.raises(ResearchProviderError, match="boom"):
        await pipeline.preview("Please research Oxfam")
