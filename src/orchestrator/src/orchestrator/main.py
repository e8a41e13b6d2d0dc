"""Service entry point.

Loads settings once at import, failing fast on missing credentials, and exposes the
ASGI ``app`` for uvicorn.
"""

from __future__ import annotations

import logging

import uvicorn

from orchestrator.app import create_app
from orchestrator.config import load_settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("orchestrator")

settings = load_settings()
app = create_app(settings)


def main() -> None:
    """Run the service with uvicorn."""
    logger.info("Starting charity lookup service on %s:%s (env=%s)", settings.host, settings.port, settings.app_env)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
