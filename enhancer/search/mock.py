from __future__ import annotations

import logging
from typing import List

from enhancer.models import SearchResult

from .base import SearchProvider

logger = logging.getLogger(__name__)


class MockSearchProvider(SearchProvider):
    """Deterministic placeholder results so a run can finish without search."""

    @property
    def name(self) -> str:
        return "mock"

    async def search(self, query: str) -> List[SearchResult]:
        logger.warning(
            "Using synthetic search results; configure SERPAPI_KEY for real searches",
            extra={"provider": self.name, "query": query},
        )
        return [
            SearchResult(
                title=f"Example Article 1 about {query}",
                link="https://example.com/article-1",
                snippet="This is a sample article for testing purposes.",
                synthetic=True,
            ),
            SearchResult(
                title=f"Example Article 2 about {query}",
                link="https://example.com/article-2",
                snippet="This is another sample article for testing.",
                synthetic=True,
            ),
        ]
