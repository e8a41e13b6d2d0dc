"""Public export surface for ``research_client_api``."""

from research_client_api.client import (
    LookupProvider,
    NameExtractor,
    ResearchProviderError,
    get_extractor,
    get_lookup_provider,
)
from research_client_api.models import Citation, OrganizationRecord

__all__ = [
    "Citation",
    "LookupProvider",
    "NameExtractor",
    "OrganizationRecord",
    "ResearchProviderError",
    "get_extractor",
    "get_lookup_provider",
]
