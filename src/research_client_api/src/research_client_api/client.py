"""Abstract interfaces for organization research providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from research_client_api.models import OrganizationRecord

__all__ = [
    "LookupProvider",
    "NameExtractor",
    "ResearchProviderError",
    "get_extractor",
    "get_lookup_provider",
]


class ResearchProviderError(Exception):
    """Raised when a research provider call fails (transport, quota, parse)."""


class NameExtractor(ABC):
    """The contract for pulling an organization name out of free text."""

    @abstractmethod
    def extract_name(self, text: str) -> str | None:
        """Extract an organization name from message text.

        Args:
            text: Raw message text.

        Returns:
            The organization name, or None when the text mentions none.

        Raises:
            ResearchProviderError: When the provider call itself fails.

        """
        raise NotImplementedError


class LookupProvider(ABC):
    """The contract for enriching an organization name with structured data."""

    @abstractmethod
    def lookup(self, name: str) -> OrganizationRecord | None:
        """Look up an organization by name.

        Args:
            name: Organization name as extracted from the message.

        Returns:
            The organization record, or None when nothing credible was found.

        Raises:
            ResearchProviderError: When the provider call itself fails.

        """
        raise NotImplementedError


def get_extractor(api_key: str, model: str | None = None) -> NameExtractor:
    """Return the default name extractor implementation.

    Args:
        api_key: Provider credential.
        model: Optional model override.

    Returns:
        NameExtractor implementation.

    """
    raise NotImplementedError


def get_lookup_provider(api_key: str, model: str | None = None) -> LookupProvider:
    """Return the default lookup provider implementation.

    Args:
        api_key: Provider credential.
        model: Optional model override.

    Returns:
        LookupProvider implementation.

    """
    raise NotImplementedError
