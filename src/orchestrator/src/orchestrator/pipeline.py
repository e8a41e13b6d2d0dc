"""Lookup pipeline: reaction trigger to delivered Slack report.

A run reads the reacted-to message, extracts an organization name, posts a single
progress placeholder, looks the organization up and finally updates that same
placeholder with the rendered report or an error template. Each external call is
made exactly once; failures are converted into user-visible messages wherever a
message can still be delivered.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from orchestrator.models import LookupRequest
from orchestrator.report import ErrorKind, progress_text, render_error, render_report
from orchestrator.results import (
    Delivered,
    DeliveredError,
    DeliveryOutcome,
    Empty,
    Failure,
    FailureKind,
    PipelineState,
    Unrecoverable,
    Value,
    attempt,
)

if TYPE_CHECKING:
    from chat_client_api import ChatClient, MessageRef
    from research_client_api import LookupProvider, NameExtractor, OrganizationRecord

logger = logging.getLogger("orchestrator.pipeline")


@dataclass(frozen=True)
class Preview:
    """Intermediate and final values of a lookup run that posts nothing."""

    message: str
    extracted_name: str | None = None
    record: OrganizationRecord | None = None
    report: str | None = None
    error: str | None = None
    error_report: str | None = None
    details: str | None = None

    @property
    def success(self) -> bool:
        """Return True when a report was rendered from a found record."""
        return self.report is not None


class LookupPipeline:
    """Sequences extraction, lookup, rendering and message delivery for one trigger.

    The pipeline holds no per-run state, so one instance serves concurrent runs.

    Attributes:
        _chat: Messaging client used to read, post and update messages.
        _extractor: Organization name extractor.
        _provider: Organization lookup provider.

    """

    def __init__(self, chat: ChatClient, extractor: NameExtractor, provider: LookupProvider) -> None:
        """Bind the pipeline to its collaborators."""
        self._chat = chat
        self._extractor = extractor
        self._provider = provider

    async def run(self, target: MessageRef) -> DeliveryOutcome:
        """Run one lookup for the message a trigger reaction was added to.

        Args:
            target: Channel and timestamp of the reacted-to message.

        Returns:
            Terminal outcome of the run. Never raises for collaborator failures.

        """
        fetched = await asyncio.to_thread(attempt, self._chat.fetch_message, target)
        if not isinstance(fetched, Value):
            _log_failure(fetched, "Could not retrieve original message %s/%s", target.channel, target.ts)
            await self._post(target.channel, target.ts, render_error("", ErrorKind.GENERIC))
            return Unrecoverable(FailureKind.SOURCE_MESSAGE_MISSING, PipelineState.IDLE)

        request = LookupRequest(source_text=fetched.value.text, channel=target.channel, thread_ts=target.ts)
        logger.info("Extracting organization name from %s/%s", request.channel, request.thread_ts)
        extracted = await asyncio.to_thread(attempt, self._extractor.extract_name, request.source_text)

        if isinstance(extracted, Failure):
            _log_failure(extracted, "Name extraction failed")
            return await self._reply_once(
                request,
                render_error("", ErrorKind.API_ERROR),
                FailureKind.EXTRACTION_FAILURE,
                PipelineState.EXTRACTING,
            )
        if isinstance(extracted, Empty):
            logger.info("No organization name found in message")
            return await self._reply_once(
                request,
                render_error("", ErrorKind.EXTRACTION_FAILED),
                FailureKind.EXTRACTION_EMPTY,
                PipelineState.EXTRACTION_FAILED,
            )

        name = extracted.value
        placeholder = await self._post(request.channel, request.thread_ts, progress_text(name))
        if placeholder is None:
            return Unrecoverable(FailureKind.DELIVERY_FAILURE, PipelineState.SEARCHING)

        logger.info("Searching for %r", name)
        looked_up = await asyncio.to_thread(attempt, self._provider.lookup, name)
        state, text, outcome = _settle(name, looked_up)
        logger.info("Lookup for %r finished in state %s", name, state.value)

        try:
            await asyncio.to_thread(self._chat.update_message, placeholder, text)
        except Exception:
            logger.exception("Failed to update progress message %s/%s", placeholder.channel, placeholder.ts)
            return Unrecoverable(FailureKind.DELIVERY_FAILURE, state)
        return outcome

    async def preview(self, message: str) -> Preview:
        """Run extraction, lookup and rendering without posting anything.

        Raises:
            Exception: Whatever the extractor raised; lookup failures are reported in the Preview.

        """
        extracted = await asyncio.to_thread(attempt, self._extractor.extract_name, message)
        if isinstance(extracted, Failure):
            raise extracted.error
        if isinstance(extracted, Empty):
            return Preview(message=message, error="Could not extract charity name from message")

        name = extracted.value
        looked_up = await asyncio.to_thread(attempt, self._provider.lookup, name)
        if isinstance(looked_up, Value):
            return Preview(
                message=message,
                extracted_name=name,
                record=looked_up.value,
                report=render_report(looked_up.value, name),
            )
        if isinstance(looked_up, Empty):
            return Preview(
                message=message,
                extracted_name=name,
                error="Charity not found",
                error_report=render_error(name, ErrorKind.NOT_FOUND),
            )
        _log_failure(looked_up, "Error during charity lookup")
        return Preview(
            message=message,
            extracted_name=name,
            error="Charity lookup failed",
            error_report=render_error(name, ErrorKind.API_ERROR),
            details=str(looked_up.error),
        )

    # -----------------------------------------------------------------------
    # Delivery helpers
    # -----------------------------------------------------------------------

    async def _post(self, channel: str, thread_ts: str, text: str) -> MessageRef | None:
        """Post a thread reply, returning None instead of raising on failure."""
        try:
            return await asyncio.to_thread(self._chat.post_message, channel, text, thread_ts=thread_ts)
        except Exception:
            logger.exception("Failed to post message to %s/%s", channel, thread_ts)
            return None

    async def _reply_once(
        self,
        request: LookupRequest,
        text: str,
        kind: FailureKind,
        state: PipelineState,
    ) -> DeliveryOutcome:
        """Post a final message directly, without a progress placeholder."""
        if await self._post(request.channel, request.thread_ts, text) is None:
            return Unrecoverable(FailureKind.DELIVERY_FAILURE, state)
        return DeliveredError(kind)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _settle(name: str, looked_up: object) -> tuple[PipelineState, str, DeliveryOutcome]:
    """Map a lookup result to its state, update text and outcome."""
    if isinstance(looked_up, Value):
        report = render_report(looked_up.value, name)
        return PipelineState.FOUND, report, Delivered(report)
    if isinstance(looked_up, Empty):
        return PipelineState.NOT_FOUND, render_error(name, ErrorKind.NOT_FOUND), DeliveredError(FailureKind.LOOKUP_EMPTY)
    _log_failure(looked_up, "Error during charity lookup for %r", name)
    return PipelineState.LOOKUP_FAILED, render_error(name, ErrorKind.API_ERROR), DeliveredError(FailureKind.LOOKUP_FAILURE)


def _log_failure(result: object, msg: str, *args: object) -> None:
    if isinstance(result, Failure):
        logger.error(msg, *args, exc_info=result.error)
    else:
        logger.error(msg, *args)
