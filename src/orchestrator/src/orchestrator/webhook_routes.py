"""Slack Events API webhook route."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from orchestrator.models import EventType, InboundEvent, WebhookAck
from orchestrator.signature import verify_signature

if TYPE_CHECKING:
    from orchestrator.config import Settings
    from orchestrator.pipeline import LookupPipeline

logger = logging.getLogger("orchestrator.webhook")


def build_webhook_router(
    settings: Settings,
    pipeline: LookupPipeline,
    *,
    clock: Callable[[], float] = time.time,
) -> APIRouter:
    """Build the verified Slack webhook router.

    Args:
        settings: Service settings holding the signing secret and trigger emoji.
        pipeline: Lookup pipeline run for trigger reactions.
        clock: Source of the current epoch time for replay checks.

    Returns:
        Router exposing ``POST /webhook``.

    """
    router = APIRouter(tags=["Slack"])

    @router.post("/webhook")
    async def slack_webhook(request: Request) -> JSONResponse:
        """Verify, filter and dispatch a Slack event, then acknowledge receipt."""
        try:
            raw_body = await request.body()
            event = InboundEvent.from_request(raw_body.decode("utf-8", errors="replace"), request.headers)

            if event.type is EventType.URL_VERIFICATION:
                return JSONResponse({"challenge": event.challenge})

            if not verify_signature(
                raw_body,
                event.signature,
                event.raw_timestamp,
                settings.slack_signing_secret,
                int(clock()),
            ):
                logger.warning("Invalid Slack signature")
                return JSONResponse({"error": "Invalid signature"}, status_code=401)

            # is_trigger already requires a target; the second test only narrows the type.
            if event.is_trigger(settings.trigger_emoji) and event.target is not None:
                outcome = await pipeline.run(event.target)
                logger.info("Lookup for %s/%s ended: %s", event.target.channel, event.target.ts, outcome)

            return JSONResponse(WebhookAck().model_dump())
        except Exception:
            logger.exception("Error handling Slack event")
            return JSONResponse({"error": "Internal server error"}, status_code=500)

    return router
