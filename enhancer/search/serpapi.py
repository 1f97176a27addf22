"""Credentialed search through the SerpAPI Google engine."""

from __future__ import annotations

import logging
from typing import List, Optional

import httpx

from enhancer.config import credential_configured
from enhancer.errors import ProviderUnavailable
from enhancer.models import SearchResult

from .base import SearchProvider

logger = logging.getLogger(__name__)


class SerpApiSearchProvider(SearchProvider):

    def __init__(
        self,
        api_key: Optional[str],
        *,
        endpoint: str = "https://serpapi.com/search.json",
        num_results: int = 10,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.endpoint = endpoint
        self.num_results = num_results
        self.timeout = timeout
        self._client = client

    @property
    def name(self) -> str:
        return "serpapi"

    async def _get(self, params: dict) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(self.endpoint, params=params, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(self.endpoint, params=params)

    async def search(self, query: str) -> List[SearchResult]:
        if not credential_configured(self.api_key):
            raise ProviderUnavailable(
                "SerpAPI key not configured", stage="search", provider=self.name
            )

        params = {
            "engine": "google",
            "q": query,
            "api_key": self.api_key,
            "num": self.num_results,
        }
        try:
            response = await self._get(params)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise ProviderUnavailable(
                "SerpAPI request failed", stage="search", provider=self.name, cause=exc
            ) from exc

        if payload.get("error"):
            raise ProviderUnavailable(
                f"SerpAPI error: {payload['error']}", stage="search", provider=self.name
            )

        results = []
        for item in payload.get("organic_results") or []:
            link = item.get("link")
            if not link:
                continue
            results.append(
                SearchResult(
                    title=item.get("title") or link,
                    link=link,
                    snippet=item.get("snippet") or "",
                )
            )
        logger.debug("SerpAPI results", extra={"query": query, "count": len(results)})
        return results
