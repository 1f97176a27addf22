"""Search by rendering a public results page in headless Chromium."""

from __future__ import annotations

import asyncio
import logging
import tempfile
from pathlib import Path
from typing import List, Optional
from urllib.parse import quote_plus, urljoin

from lxml import etree

from enhancer.chromium import ChromiumCommandBuilder
from enhancer.errors import ProviderUnavailable
from enhancer.extraction.extractor import normalize_text, parse_html
from enhancer.models import SearchResult

from .base import SearchProvider

logger = logging.getLogger(__name__)

RESULTS_CONTAINER = "#search"
RESULT_BLOCK = "#search .g"
SNIPPET_SELECTOR = '.VwiC3b, .yXK7lf, [data-sncf="1"]'


class BrowserSearchProvider(SearchProvider):
    """Scrape title/link/snippet from a results page rendered by Chromium.

    Each search runs in a throwaway user data directory.
    """

    def __init__(
        self,
        chromium_bin: str,
        *,
        results_page_url: str = "https://www.google.com/search?q={query}",
        timeout: float = 30.0,
        max_results: int = 10,
        user_agent: Optional[str] = None,
    ):
        self.chromium_bin = chromium_bin
        self.results_page_url = results_page_url
        self.timeout = timeout
        self.max_results = max_results
        self.user_agent = user_agent

    @property
    def name(self) -> str:
        return "browser"

    def build_url(self, query: str) -> str:
        return self.results_page_url.format(query=quote_plus(query))

    async def _dump_dom(self, url: str) -> str:
        with tempfile.TemporaryDirectory(prefix="enhancer-chromium-") as user_data_dir:
            builder = ChromiumCommandBuilder(
                self.chromium_bin, Path(user_data_dir), user_agent=self.user_agent
            )
            args = builder.build_dump_dom_args(url)
            try:
                proc = await asyncio.create_subprocess_exec(
                    *args,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as exc:
                raise ProviderUnavailable(
                    "Could not launch Chromium", stage="search", provider=self.name, cause=exc
                ) from exc

            try:
                stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
            except asyncio.TimeoutError as exc:
                proc.kill()
                await proc.wait()
                raise ProviderUnavailable(
                    f"Chromium timed out after {self.timeout}s",
                    stage="search",
                    provider=self.name,
                    cause=exc,
                ) from exc

        if proc.returncode != 0 or not stdout.strip():
            raise ProviderUnavailable(
                f"Chromium exited with {proc.returncode}",
                stage="search",
                provider=self.name,
                cause=RuntimeError(stderr.decode("utf-8", errors="replace")[-500:]),
            )
        return stdout.decode("utf-8", errors="replace")

    def parse_results(self, html: str, base_url: str = "https://www.google.com") -> List[SearchResult]:
        try:
            tree = parse_html(html)
        except (etree.ParserError, ValueError) as exc:
            raise ProviderUnavailable(
                "Results page could not be parsed", stage="search", provider=self.name, cause=exc
            ) from exc

        if not tree.cssselect(RESULTS_CONTAINER):
            raise ProviderUnavailable(
                "Results container not found", stage="search", provider=self.name
            )

        results: List[SearchResult] = []
        for block in tree.cssselect(RESULT_BLOCK)[: self.max_results]:
            title_el = block.cssselect("h3")
            link_el = block.cssselect("a[href]")
            if not title_el or not link_el:
                continue
            snippet_el = block.cssselect(SNIPPET_SELECTOR)
            results.append(
                SearchResult(
                    title=normalize_text(title_el[0].text_content()),
                    link=urljoin(base_url, link_el[0].get("href")),
                    snippet=normalize_text(snippet_el[0].text_content()) if snippet_el else "",
                )
            )
        return results

    async def search(self, query: str) -> List[SearchResult]:
        url = self.build_url(query)
        logger.info("Rendering results page", extra={"provider": self.name, "url": url})
        html = await self._dump_dom(url)
        return self.parse_results(html)
