"""Slack-formatted report and error text for charity lookups."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING
from urllib.parse import urlparse

if TYPE_CHECKING:
    from research_client_api import OrganizationRecord

SLACK_MESSAGE_LIMIT = 39000
TRUNCATION_MARKER = "... _[truncated due to Slack message limit]_"
MAX_AREAS = 5
MAX_CITATIONS = 3
UNAVAILABLE_VALUES = {"information not available", "not available"}


class ErrorKind(str, Enum):
    """Error templates the renderer knows how to produce."""

    NOT_FOUND = "not_found"
    EXTRACTION_FAILED = "extraction_failed"
    API_ERROR = "api_error"
    GENERIC = "generic"


def progress_text(name: str) -> str:
    """Return the placeholder text shown while a lookup is running."""
    return f'🔍 Searching for "{name}"...'


def render_report(record: OrganizationRecord | None, original_name: str) -> str:
    """Format an organization record as a Slack message.

    Args:
        record: Lookup result; None renders the not-found template.
        original_name: Name that was searched for.

    Returns:
        Slack mrkdwn text, truncated to the message limit.

    """
    if record is None:
        return render_error(original_name, ErrorKind.NOT_FOUND)

    sections = [f"*{record.name}*"]
    if _available(record.summary):
        sections.append(f"📝 {record.summary}")
    if _available(record.registration_id):
        sections.append(f"🆔 *Registration ID:* {record.registration_id}")
    if _available(record.founded_year):
        sections.append(f"🗓️ *Founded:* {record.founded_year}")
    if _available(record.website):
        sections.append(f"🌐 *Website:* <{record.website}|{_display_domain(record.website)}>")
    if _available(record.activities):
        sections.append(f"*What they do:* {record.activities}")
    if record.areas:
        areas = ", ".join(record.areas[:MAX_AREAS])
        extra = len(record.areas) - MAX_AREAS
        more = f" (+{extra} more)" if extra > 0 else ""
        sections.append(f"📍 *Areas served:* {areas}{more}")
    if record.citations:
        lines = ["🔗 *Sources:*"]
        lines.extend(f"• <{citation.url}|{citation.title}>" for citation in record.citations[:MAX_CITATIONS])
        extra = len(record.citations) - MAX_CITATIONS
        if extra > 0:
            lines.append(f"  _... and {extra} more sources_")
        sections.append("\n".join(lines))
    sections.append("_Information gathered from web search_")
    return truncate("\n\n".join(sections) + "\n")


def render_error(name: str, kind: ErrorKind | str = ErrorKind.API_ERROR) -> str:
    """Return the user-facing text for a failed or empty lookup.

    Args:
        name: Organization name involved, possibly empty.
        kind: Which template to render; unknown kinds fall back to ``generic``.

    Returns:
        Slack mrkdwn text.

    """
    try:
        kind = ErrorKind(kind)
    except ValueError:
        kind = ErrorKind.GENERIC

    if kind is ErrorKind.NOT_FOUND:
        text = (
            f'❓ I couldn\'t find reliable information about "{name}" from available sources.\n\n'
            "💡 *Try:*\n"
            "• Check the spelling\n"
            "• Use the official charity name\n"
            "• Try searching for key words from the charity name"
        )
    elif kind is ErrorKind.EXTRACTION_FAILED:
        text = (
            "🤔 I couldn't identify a charity name in that message.\n\n"
            "💡 *Tip:* Make sure to mention a specific charity or organization name in your message."
        )
    elif kind is ErrorKind.API_ERROR:
        subject = f'"{name}"' if name else "charity information"
        text = f"⚠️ Sorry, I'm having trouble searching for {subject} right now.\n\n🔄 Please try again in a moment."
    else:
        subject = f' while searching for "{name}"' if name else ""
        text = f"❌ Something went wrong{subject}.\n\n🔄 Please try again later."
    return truncate(text)


def truncate(text: str, limit: int = SLACK_MESSAGE_LIMIT) -> str:
    """Cut text to ``limit`` characters, appending the truncation marker when cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _available(value: str | None) -> bool:
    return value is not None and bool(value.strip()) and value.strip().lower() not in UNAVAILABLE_VALUES


def _display_domain(url: str) -> str:
    hostname = urlparse(url).hostname
    if not hostname:
        return "Visit Website"
    return hostname.removeprefix("www.")
