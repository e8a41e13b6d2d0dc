"""Public exports for the Claude research implementation package."""

from claude_research_impl.extractor_impl import register as _register_extractor
from claude_research_impl.lookup_impl import register as _register_lookup


def register() -> None:
    """Register the Claude extractor and lookup implementations."""
    _register_extractor()
    _register_lookup()


register()
