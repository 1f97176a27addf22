from __future__ import annotations

import logging
from typing import List, Tuple

from enhancer.errors import ProviderUnavailable
from enhancer.models import SearchResult

from .base import SearchProvider

logger = logging.getLogger(__name__)


class SearchProviderChain:
    """Tries search providers strictly in priority order.

    The first provider that returns without raising wins, even with an empty
    list. Failures are logged and the next provider is tried.
    """

    def __init__(self, providers: List[SearchProvider]):
        if not providers:
            raise ValueError("Search chain requires at least one provider")
        self.providers = providers

    @property
    def provider_names(self) -> List[str]:
        return [provider.name for provider in self.providers]

    async def search_with_provider(self, query: str) -> Tuple[str, List[SearchResult]]:
        """Run the chain and report which provider answered.

        Raises:
            ProviderUnavailable: every provider failed
        """
        failures: list[tuple[str, str]] = []
        for provider in self.providers:
            logger.debug("Trying search provider", extra={"provider": provider.name})
            try:
                results = await provider.search(query)
            except ProviderUnavailable as exc:
                failures.append((provider.name, str(exc)))
                logger.warning(
                    "Search provider %s failed, trying next: %s",
                    provider.name,
                    exc,
                    extra={"provider": provider.name},
                )
                continue

            logger.info(
                "Search provider succeeded",
                extra={"provider": provider.name, "count": len(results)},
            )
            return provider.name, results

        summary = "; ".join(f"{name}: {msg}" for name, msg in failures)
        raise ProviderUnavailable(f"All search providers failed. Errors: {summary}", stage="search")

    async def search(self, query: str) -> List[SearchResult]:
        _, results = await self.search_with_provider(query)
        return results
