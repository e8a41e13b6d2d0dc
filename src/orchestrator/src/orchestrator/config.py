"""Process-wide settings loaded once from the environment."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger("orchestrator.config")

REQUIRED_ENV = ("SLACK_BOT_TOKEN", "SLACK_SIGNING_SECRET", "ANTHROPIC_API_KEY")
DEFAULT_TRIGGER_EMOJI = "question"
DEVELOPMENT_ENV = "development"
DEFAULT_HOST = "0.0.0.0"  # noqa: S104
DEFAULT_PORT = 3000


class Settings(BaseModel):
    """Immutable service configuration passed to every component that needs it."""

    model_config = ConfigDict(frozen=True)

    slack_bot_token: str
    slack_signing_secret: str
    anthropic_api_key: str
    trigger_emoji: str = DEFAULT_TRIGGER_EMOJI
    extraction_model: str | None = None
    lookup_model: str | None = None
    app_env: str = "production"
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @property
    def dev_mode(self) -> bool:
        """Return True only when APP_ENV explicitly selects development."""
        return self.app_env == DEVELOPMENT_ENV


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from the environment, failing fast on missing credentials.

    Args:
        environ: Mapping to read from; defaults to ``os.environ`` after loading ``.env``.

    Returns:
        Frozen Settings instance.

    Raises:
        RuntimeError: If any required credential is absent or the port is not an integer.

    """
    if environ is None:
        load_dotenv()
        environ = os.environ
    missing = [key for key in REQUIRED_ENV if not environ.get(key)]
    if missing:
        for key in missing:
            logger.error("Missing required environment variable: %s", key)
        error_message = f"Missing required environment variables: {', '.join(missing)}"
        raise RuntimeError(error_message)
    raw_port = environ.get("ORCHESTRATOR_PORT") or str(DEFAULT_PORT)
    try:
        port = int(raw_port)
    except ValueError as exc:
        logger.error("Invalid ORCHESTRATOR_PORT: %s", raw_port)
        error_message = f"ORCHESTRATOR_PORT must be an integer, got {raw_port!r}"
        raise RuntimeError(error_message) from exc
    return Settings(
        slack_bot_token=environ["SLACK_BOT_TOKEN"],
        slack_signing_secret=environ["SLACK_SIGNING_SECRET"],
        anthropic_api_key=environ["ANTHROPIC_API_KEY"],
        trigger_emoji=environ.get("TRIGGER_EMOJI") or DEFAULT_TRIGGER_EMOJI,
        extraction_model=environ.get("ANTHROPIC_MODEL") or None,
        lookup_model=environ.get("ANTHROPIC_LOOKUP_MODEL") or None,
        app_env=(environ.get("APP_ENV") or "production").strip().lower(),
        host=environ.get("ORCHESTRATOR_HOST") or DEFAULT_HOST,
        port=port,
    )
