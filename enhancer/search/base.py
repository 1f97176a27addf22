from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from enhancer.models import SearchResult


class SearchProvider(ABC):
    """Base class for search providers.

    Providers turn a query into ranked results. They raise
    ``ProviderUnavailable`` when unconfigured or when the upstream fails; the
    chain then moves on to the next provider.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier (e.g., 'serpapi', 'browser')"""
        pass

    @abstractmethod
    async def search(self, query: str) -> List[SearchResult]:
        """Return results for ``query``; an empty list is a valid answer."""
        pass
