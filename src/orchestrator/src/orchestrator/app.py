"""FastAPI application factory for the charity lookup service."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI

import chat_client_api
import claude_research_impl  # noqa: F401  # ensure research implementations register themselves
import research_client_api
import slack_client_impl  # noqa: F401  # ensure Slack implementation registers itself
from orchestrator.dev_routes import build_dev_router
from orchestrator.pipeline import LookupPipeline
from orchestrator.webhook_routes import build_webhook_router

if TYPE_CHECKING:
    from chat_client_api import ChatClient
    from orchestrator.config import Settings
    from research_client_api import LookupProvider, NameExtractor

logger = logging.getLogger("orchestrator")


def build_pipeline(
    settings: Settings,
    *,
    chat: ChatClient | None = None,
    extractor: NameExtractor | None = None,
    provider: LookupProvider | None = None,
) -> LookupPipeline:
    """Wire a LookupPipeline from settings, using registered implementations by default."""
    return LookupPipeline(
        chat=chat or chat_client_api.get_client(settings.slack_bot_token),
        extractor=extractor or research_client_api.get_extractor(settings.anthropic_api_key, settings.extraction_model),
        provider=provider or research_client_api.get_lookup_provider(settings.anthropic_api_key, settings.lookup_model),
    )


def create_app(settings: Settings, pipeline: LookupPipeline | None = None) -> FastAPI:
    """Create the service app.

    Exactly one ``POST /webhook`` route is mounted: the signature-verified Slack route,
    or the development route when ``settings.dev_mode`` is set.

    Args:
        settings: Frozen service settings.
        pipeline: Optional pre-built pipeline; built from settings when omitted.

    Returns:
        Configured FastAPI application.

    """
    pipeline = pipeline or build_pipeline(settings)
    app = FastAPI(title="Charity Lookup Service", version="0.1.0")

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Return a basic health payload."""
        return {"status": "ok"}

    if settings.dev_mode:
        logger.warning("Development mode: /webhook accepts unauthenticated plain-text lookups")
        app.include_router(build_dev_router(pipeline))
    else:
        app.include_router(build_webhook_router(settings, pipeline))
    return app
