"""Main-body text extraction for web pages.

Primary path is readability (the same algorithm browsers use for reader
mode). When it yields nothing, non-content tags are stripped and a ranked
list of structural selectors is probed; the first match with enough text
wins, and the whole page text is the last resort.
"""

from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, List, Optional, Sequence

import httpx
import lxml.html
from lxml import etree
from readability import Document

from enhancer.errors import ExtractionError

from .selectors import NON_CONTENT_SELECTORS, SelectorRule, build_rules

if TYPE_CHECKING:
    from enhancer.config import ExtractionSettings

logger = logging.getLogger(__name__)

_INLINE_SPACE = re.compile(r"[ \t\r\f\v\u00a0]+")


def normalize_text(text: str) -> str:
    """Collapse runs of whitespace and drop blank lines."""
    lines = (_INLINE_SPACE.sub(" ", line).strip() for line in text.splitlines())
    return "\n".join(line for line in lines if line)


def parse_html(html: str) -> lxml.html.HtmlElement:
    """Parse markup into an lxml tree, tolerating XML encoding declarations."""
    parser = lxml.html.HTMLParser(encoding="utf-8")
    return lxml.html.document_fromstring(html.encode("utf-8"), parser=parser)


class ContentExtractor:
    """Fetch a URL and return its normalised main-body text.

    Args:
        timeout: Fetch timeout in seconds
        user_agent: Browser-like identification header
        rules: Ranked selector rules for the fallback path
        client: Optional shared ``httpx.AsyncClient``; when omitted a client is
            opened per fetch
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        user_agent: str = "Mozilla/5.0",
        rules: Optional[Sequence[SelectorRule]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self.rules: List[SelectorRule] = list(rules or [])
        self._client = client

    @classmethod
    def from_settings(cls, settings: "ExtractionSettings") -> "ContentExtractor":
        return cls(
            timeout=settings.timeout,
            user_agent=settings.user_agent,
            rules=build_rules(settings.selectors, settings.min_selector_length),
        )

    @asynccontextmanager
    async def _client_context(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            yield client

    async def fetch_html(self, url: str) -> str:
        """GET the page.

        Raises:
            ExtractionError: network failure, timeout or non-2xx status
        """
        headers = {"User-Agent": self.user_agent}
        try:
            async with self._client_context() as client:
                response = await client.get(url, headers=headers, timeout=self.timeout)
                response.raise_for_status()
                return response.text
        except httpx.HTTPError as exc:
            raise ExtractionError(
                f"Failed to fetch {url}", url=url, cause=exc
            ) from exc

    async def extract(self, url: str) -> str:
        html = await self.fetch_html(url)
        if not html.strip():
            raise ExtractionError(f"Empty document at {url}", url=url)
        return self.extract_from_html(html, url=url)

    def extract_from_html(self, html: str, url: Optional[str] = None) -> str:
        text = self.readability_text(html, url=url)
        if text:
            return text
        logger.debug("Readability found no text, probing selectors", extra={"url": url})
        return self.selector_text(html)

    def readability_text(self, html: str, url: Optional[str] = None) -> str:
        """Main article text according to readability, or "" if it finds none."""
        try:
            summary_html = Document(html, url=url).summary(html_partial=True)
            tree = parse_html(summary_html)
        except (etree.ParserError, ValueError, TypeError) as exc:
            logger.debug(
                "Readability extraction failed",
                extra={"url": url, "error": str(exc)},
            )
            return ""
        return normalize_text(tree.text_content())

    def selector_text(self, html: str) -> str:
        """Structural fallback: strip boilerplate, probe ranked selectors."""
        try:
            tree = parse_html(html)
        except (etree.ParserError, ValueError):
            return ""

        for selector in NON_CONTENT_SELECTORS:
            for element in tree.cssselect(selector):
                if element.getparent() is not None:
                    element.drop_tree()

        for rule in self.rules:
            matches = tree.cssselect(rule.selector)
            if not matches:
                continue
            text = normalize_text(matches[0].text_content())
            if len(text) > rule.min_length:
                logger.debug(
                    "Selector matched",
                    extra={"selector": rule.selector, "length": len(text)},
                )
                return text

        body = tree.find("body")
        return normalize_text((body if body is not None else tree).text_content())
