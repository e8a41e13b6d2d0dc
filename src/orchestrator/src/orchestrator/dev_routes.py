"""Development-mode webhook route.

Accepts plain message text and returns the extraction, lookup and rendered report
in the response instead of posting to Slack. Only mounted by ``create_app`` when
``APP_ENV=development``; the production app never contains this route.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from orchestrator.models import DevLookupRequest

if TYPE_CHECKING:
    from orchestrator.pipeline import LookupPipeline, Preview

logger = logging.getLogger("orchestrator.dev")

EXAMPLE_REQUEST = {"message": "Please research Oxfam charity"}


def build_dev_router(pipeline: LookupPipeline) -> APIRouter:
    """Build the unauthenticated development router exposing ``POST /webhook``."""
    router = APIRouter(tags=["Development"])

    @router.post("/webhook")
    async def dev_webhook(request: Request) -> JSONResponse:
        """Run a lookup for the ``message`` field and return every intermediate value."""
        try:
            body = DevLookupRequest.model_validate(await request.json())
        except ValueError:  # bad JSON and ValidationError alike
            body = DevLookupRequest()
        if not body.message:
            return JSONResponse(
                {"error": "Missing message field in request body", "example": EXAMPLE_REQUEST},
                status_code=400,
            )
        try:
            preview = await pipeline.preview(body.message)
        except Exception as exc:
            logger.exception("Error in dev mode handler")
            return JSONResponse({"error": "Internal server error", "details": str(exc)}, status_code=500)
        return JSONResponse(preview_payload(preview))

    return router


def preview_payload(preview: Preview) -> dict[str, Any]:
    """Serialize a Preview into the development response body."""
    payload: dict[str, Any] = {
        "success": preview.success,
        "message": preview.message,
        "extractedName": preview.extracted_name,
    }
    if preview.record is not None:
        payload["charityData"] = preview.record.model_dump(mode="json")
    if preview.report is not None:
        payload["report"] = preview.report
    if preview.error is not None:
        payload["error"] = preview.error
    if preview.error_report is not None:
        payload["errorReport"] = preview.error_report
    if preview.details is not None:
        payload["details"] = preview.details
    return payload
