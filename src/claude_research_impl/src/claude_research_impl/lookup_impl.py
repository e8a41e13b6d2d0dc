"""Claude Lookup Provider.

Concrete research_client_api.LookupProvider that runs Claude with the server-side
web search tool, restricted to charity registries and donation platforms, and
converts the model's JSON answer plus its search results into an OrganizationRecord.
"""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import urlparse

import anthropic

import research_client_api
from research_client_api import Citation, LookupProvider, OrganizationRecord, ResearchProviderError

DEFAULT_LOOKUP_MODEL = "claude-sonnet-4-5"
NOT_AVAILABLE = "Not available"
ACTIVITIES_FALLBACK = "Information not available"
MAX_SEARCHES = 5
ALLOWED_DOMAINS = (
    "charitycommission.gov.uk",
    "gov.uk",
    "charitybase.uk",
    "charitynavigator.org",
    "justgiving.com",
    "cafonline.org",
)
RECORD_FIELDS = {
    "official_name": "The official registered name of the charity",
    "registration_number": f"The charity registration number or ID (use '{NOT_AVAILABLE}' if unknown)",
    "activities": "Description of the charity's main activities, purposes, and work",
    "areas_of_operation": "Array of geographical areas or regions where the charity operates",
    "website": f"Official website URL (use '{NOT_AVAILABLE}' if unknown)",
    "founded_year": f"Year the charity was founded (use '{NOT_AVAILABLE}' if unknown)",
    "summary": "Brief summary of the charity and their impact",
}

logger = logging.getLogger("claude_research_impl.lookup")

# ---------------------------------------------------------------------------
# Lookup implementation
# ---------------------------------------------------------------------------


class ClaudeLookupProvider(LookupProvider):
    """Concrete LookupProvider that researches an organization with Claude web search.

    Attributes:
        _client: Anthropic SDK client.
        _model: Model name used for requests.
        _max_tokens: Max tokens for each completion.

    """

    def __init__(self, api_key: str, model: str | None = None) -> None:
        """Initialize the provider with an explicit credential."""
        if not api_key:
            raise RuntimeError("ANTHROPIC_API_KEY is required.")  # noqa: TRY003, EM101
        self._client = anthropic.Anthropic(api_key=api_key)
        self._model = model or DEFAULT_LOOKUP_MODEL
        self._max_tokens = 2048

    def lookup(self, name: str) -> OrganizationRecord | None:
        """Research an organization and return a structured record.

        Args:
            name: Organization name to search for.

        Returns:
            OrganizationRecord, or None when Claude returned no usable answer.

        Raises:
            ResearchProviderError: When the Anthropic API call fails.

        """
        logger.info("Looking up charity: %s", name)
        try:
            api_response = self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                system=_system_prompt(),
                messages=[{"role": "user", "content": _build_prompt(name)}],
                tools=[
                    {
                        "type": "web_search_20250305",
                        "name": "web_search",
                        "max_uses": MAX_SEARCHES,
                        "allowed_domains": list(ALLOWED_DOMAINS),
                    }
                ],
            )
        except anthropic.APIError as exc:
            logger.exception("Charity lookup request failed")
            raise ResearchProviderError(f'Failed to lookup charity "{name}": {exc}') from exc  # noqa: TRY003, EM102
        return to_record(api_response, name)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _system_prompt() -> str:
    fields = "\n".join(f'- "{key}": {description}' for key, description in RECORD_FIELDS.items())
    return (
        "You research UK charities using web search. Answer with a single JSON object "
        "and nothing else, containing exactly these keys:\n"
        f"{fields}"
    )


def _build_prompt(name: str) -> str:
    return (
        f'Find detailed information about the UK charity "{name}". Search official sources and '
        "provide accurate, up-to-date information about the charity's official name, registration "
        "details, activities, geographical focus, and mission."
    )


def _available(value: object) -> str | None:
    """Return a stripped string, or None for empty and "Not available" values.

    Numbers are kept as text so a year or registration number sent unquoted survives.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        value = str(value)
    elif isinstance(value, float):
        value = str(int(value)) if value.is_integer() else str(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value or value.lower() == NOT_AVAILABLE.lower():
        return None
    return value


def _domain(url: str) -> str:
    hostname = urlparse(url).hostname
    if not hostname:
        return url[:50] + "..."
    return hostname.removeprefix("www.")


def _answer_text(api_response: Any) -> str:  # noqa: ANN401
    return "".join(block.text for block in api_response.content if block.type == "text").strip()


def _parse_answer(text: str) -> dict[str, Any] | None:
    """Pull the JSON object out of the model's answer, tolerating code fences."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    try:
        payload = json.loads(text[start : end + 1])
    except json.JSONDecodeError:
        logger.warning("Failed to parse JSON response: %s", text)
        return None
    return payload if isinstance(payload, dict) else None


def collect_citations(api_response: Any) -> list[Citation]:  # noqa: ANN401
    """Gather web sources from search results and text citations, in first-seen order."""
    sources: dict[str, dict[str, str]] = {}
    for block in api_response.content:
        if block.type == "web_search_tool_result" and isinstance(block.content, list):
            for result in block.content:
                url = getattr(result, "url", None)
                if url and url not in sources:
                    sources[url] = {"title": getattr(result, "title", None) or "", "snippet": ""}
        elif block.type == "text":
            for citation in getattr(block, "citations", None) or []:
                url = getattr(citation, "url", None)
                if not url:
                    continue
                entry = sources.setdefault(url, {"title": getattr(citation, "title", None) or "", "snippet": ""})
                if not entry["snippet"]:
                    entry["snippet"] = getattr(citation, "cited_text", None) or ""
    return [
        Citation(url=url, title=entry["title"] or _domain(url), snippet=entry["snippet"])
        for url, entry in sources.items()
    ]


def to_record(api_response: Any, name: str) -> OrganizationRecord | None:  # noqa: ANN401
    """Convert a Messages API response into an OrganizationRecord."""
    text = _answer_text(api_response)
    if not text:
        logger.info("No response content received from Claude")
        return None
    payload = _parse_answer(text)
    if payload is None:
        return None

    areas = payload.get("areas_of_operation") or []
    if isinstance(areas, str):
        areas = [areas]
    return OrganizationRecord(
        name=_available(payload.get("official_name")) or name,
        registration_id=_available(payload.get("registration_number")),
        activities=_available(payload.get("activities")) or ACTIVITIES_FALLBACK,
        areas=tuple(str(area) for area in areas if str(area).strip()),
        website=_available(payload.get("website")),
        founded_year=_available(payload.get("founded_year")),
        summary=_available(payload.get("summary")) or "",
        citations=tuple(collect_citations(api_response)),
    )


# ---------------------------------------------------------------------------
# Factory registration
# ---------------------------------------------------------------------------


def get_lookup_provider_impl(api_key: str, model: str | None = None) -> ClaudeLookupProvider:
    """Return a new ClaudeLookupProvider."""
    return ClaudeLookupProvider(api_key=api_key, model=model)


def register() -> None:
    """Bind the Claude lookup factory into research_client_api.get_lookup_provider."""
    research_client_api.get_lookup_provider = get_lookup_provider_impl
