"""Claude Name Extractor.

Concrete research_client_api.NameExtractor backed by Anthropic's Claude Messages API.
Asks the model for a single charity/organization name and maps its "NONE" answer
to a None result.
"""

from __future__ import annotations

import logging
from typing import Any

import anthropic

import research_client_api
from research_client_api import NameExtractor, ResearchProviderError

DEFAULT_EXTRACTION_MODEL = "claude-haiku-4-5-20251001"
NO_NAME_SENTINEL = "NONE"
SYSTEM_PROMPT = (
    "You extract UK charity names from text. Return only the charity name or 'NONE' "
    "if no charity is mentioned. Focus on registered charities, organizations, and nonprofits."
)

logger = logging.getLogger("claude_research_impl.extractor")

# ---------------------------------------------------------------------------
# Extractor implementation
# ---------------------------------------------------------------------------


class ClaudeNameExtractor(NameExtractor):
    """Concrete NameExtractor that asks Claude to pick the organization out of a message.

    Attributes:
        _client: Anthropic SDK client.
        _model: Model name used for requests.
        _max_tokens: Max tokens for each completion.

    """

    def __init__(self, api_key: str, model: str | None = None) -> None:
        """Initialize the extractor with an explicit credential."""
        if not api_key:
            raise RuntimeError("ANTHROPIC_API_KEY is required.")  # noqa: TRY003, EM101
        self._client = anthropic.Anthropic(api_key=api_key)
        self._model = model or DEFAULT_EXTRACTION_MODEL
        self._max_tokens = 50

    def extract_name(self, text: str) -> str | None:
        """Invoke Claude and return the extracted organization name.

        Args:
            text: Raw message text.

        Returns:
            Organization name, or None if Claude reports no organization.

        Raises:
            ResearchProviderError: When the Anthropic API call fails.

        """
        try:
            api_response = self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                temperature=0,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": _build_prompt(text)}],
            )
        except anthropic.APIError as exc:
            logger.exception("Name extraction request failed")
            raise ResearchProviderError("Failed to extract charity name from message") from exc  # noqa: TRY003, EM101
        return parse_extraction(api_response)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _build_prompt(text: str) -> str:
    return (
        "Extract the charity or organization name from this message. "
        f'Return only the name, or "{NO_NAME_SENTINEL}" if no charity is mentioned:\n\n'
        f'Message: "{text}"\n\n'
        "Charity name:"
    )


def parse_extraction(api_response: Any) -> str | None:  # noqa: ANN401
    """Convert a Messages API response into an organization name or None."""
    text = "".join(block.text for block in api_response.content if block.type == "text").strip()
    text = text.strip("\"'").strip()
    if not text or text.upper() == NO_NAME_SENTINEL:
        return None
    return text


# ---------------------------------------------------------------------------
# Factory registration
# ---------------------------------------------------------------------------


def get_extractor_impl(api_key: str, model: str | None = None) -> ClaudeNameExtractor:
    """Return a new ClaudeNameExtractor."""
    return ClaudeNameExtractor(api_key=api_key, model=model)


def register() -> None:
    """Bind the Claude extractor factory into research_client_api.get_extractor."""
    research_client_api.get_extractor = get_extractor_impl
