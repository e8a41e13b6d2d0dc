"""Provider-agnostic schemas for organization research results."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["Citation", "OrganizationRecord"]


class Citation(BaseModel):
    """A web source backing an organization record."""

    model_config = ConfigDict(frozen=True)

    url: str
    title: str
    snippet: str = ""


class OrganizationRecord(BaseModel):
    """Structured result of a successful knowledge lookup."""

    model_config = ConfigDict(frozen=True)

    name: str
    registration_id: str | None = None
    activities: str = "Information not available"
    areas: tuple[str, ...] = ()
    website: str | None = None
    founded_year: str | None = None
    summary: str = ""
    citations: tuple[Citation, ...] = Field(default_factory=tuple)
