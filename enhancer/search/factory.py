"""Build the search chain from configuration."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from enhancer.errors import ConfigurationError

from .base import SearchProvider
from .browser import BrowserSearchProvider
from .chain import SearchProviderChain
from .mock import MockSearchProvider
from .serpapi import SerpApiSearchProvider

if TYPE_CHECKING:
    from enhancer.config import SearchSettings

logger = logging.getLogger(__name__)


class SearchProviderFactory:
    """Creates search providers by name.

    Unlike generative providers, search providers are constructed even when
    unconfigured; they report ``ProviderUnavailable`` at call time so the
    chain logs why they were passed over.
    """

    def __init__(self, settings: "SearchSettings", *, user_agent: Optional[str] = None):
        self.settings = settings
        self.user_agent = user_agent

    def create_provider(self, provider_name: str) -> SearchProvider:
        if provider_name == "serpapi":
            return SerpApiSearchProvider(
                self.settings.serpapi_key,
                endpoint=self.settings.serpapi_endpoint,
                num_results=self.settings.num_results,
                timeout=self.settings.timeout,
            )
        elif provider_name == "browser":
            return BrowserSearchProvider(
                self.settings.chromium_bin,
                results_page_url=self.settings.results_page_url,
                timeout=self.settings.timeout,
                max_results=self.settings.num_results,
                user_agent=self.user_agent,
            )
        elif provider_name == "mock":
            return MockSearchProvider()
        raise ConfigurationError(
            f"Unknown search provider: {provider_name}", stage="search", provider=provider_name
        )

    def create_chain(self) -> SearchProviderChain:
        """Chain in configured order, with the mock provider always last."""
        names = [name.strip().lower() for name in self.settings.providers]
        if "mock" not in names:
            names.append("mock")
        providers = [self.create_provider(name) for name in names]
        logger.info("Search chain configured", extra={"providers": names})
        return SearchProviderChain(providers)


def build_search_chain(
    settings: "SearchSettings", *, user_agent: Optional[str] = None
) -> SearchProviderChain:
    return SearchProviderFactory(settings, user_agent=user_agent).create_chain()
