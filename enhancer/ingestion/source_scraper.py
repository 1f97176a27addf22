"""Seed the article store with originals scraped from the source blog."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, List, Optional, Sequence
from urllib.parse import urljoin

import dateutil.parser
import lxml.html
from lxml import etree

from enhancer.errors import ExtractionError
from enhancer.extraction import (
    ContentExtractor,
    SelectorRule,
    build_rules,
    normalize_text,
    parse_html,
)
from enhancer.models import Article, ArticleCreate

if TYPE_CHECKING:
    from enhancer.config import AppSettings
    from enhancer.storage import ArticleStore

logger = logging.getLogger(__name__)


def _parse_page(html: str, url: str) -> lxml.html.HtmlElement:
    try:
        return parse_html(html)
    except (etree.ParserError, ValueError) as exc:
        raise ExtractionError(f"Unparseable document at {url}", url=url, cause=exc) from exc

LISTING_SELECTORS = (
    "article",
    ".blog-post",
    ".post",
    '[class*="post-"]',
    '[class*="article"]',
    ".card",
    '[class*="blog"]',
)
TITLE_SELECTORS = ("h1", "h2", "h3", ".title", '[class*="title"]', "a")
CONTENT_SELECTORS = (
    "article .content",
    ".post-content",
    ".entry-content",
    "article",
    "main",
    '[class*="content"]',
)
AUTHOR_SELECTORS = (".author", ".post-author", '[rel="author"]', '[class*="author"]', ".byline")
IMAGE_SELECTORS = (
    ".featured-image img",
    "article img",
    ".post-image img",
    'meta[property="og:image"]',
    "img",
)
DATE_SELECTORS = (
    "time",
    ".date",
    ".post-date",
    ".published",
    '[class*="date"]',
    'meta[property="article:published_time"]',
)

MISSING_CONTENT = "Content could not be extracted. Visit the original URL."
FAILED_CONTENT = "Content could not be scraped. Please visit the original URL."


@dataclass
class ListingEntry:
    title: str
    url: str


def _first(tree: lxml.html.HtmlElement, selector: str) -> Optional[lxml.html.HtmlElement]:
    matches = tree.cssselect(selector)
    return matches[0] if matches else None


class SourceScraper:
    """Scrape the blog listing page and store its oldest posts as originals.

    Args:
        store: Where the scraped originals are created
        extractor: Used for fetching pages with the configured timeout and
            User-Agent
        source_url: Blog listing page
        max_articles: How many posts to keep, taken from the end of the listing
        content_cap: Maximum stored content length
        default_author: Author used when the page names none
        pacing_delay: Seconds to wait between article fetches
    """

    def __init__(
        self,
        store: "ArticleStore",
        extractor: ContentExtractor,
        *,
        source_url: str,
        max_articles: int = 5,
        content_cap: int = 5000,
        default_author: str = "BeyondChats",
        pacing_delay: float = 1.0,
        content_rules: Optional[Sequence[SelectorRule]] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.store = store
        self.extractor = extractor
        self.source_url = source_url
        self.max_articles = max_articles
        self.content_cap = content_cap
        self.default_author = default_author
        self.pacing_delay = pacing_delay
        self.content_rules = list(content_rules or build_rules(CONTENT_SELECTORS, 100))
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: "AppSettings", store: "ArticleStore") -> "SourceScraper":
        return cls(
            store,
            ContentExtractor.from_settings(settings.extraction),
            source_url=settings.ingestion.source_url,
            max_articles=settings.ingestion.max_articles,
            content_cap=settings.ingestion.content_cap,
            default_author=settings.ingestion.default_author,
            pacing_delay=settings.pipeline.pacing_delay,
        )

    def parse_listing(self, html: str) -> List[ListingEntry]:
        """Title/link pairs from the listing page, deduplicated by URL."""
        tree = _parse_page(html, self.source_url)
        entries: List[ListingEntry] = []
        for selector in LISTING_SELECTORS:
            for element in tree.cssselect(selector):
                # Gather extra entries in case some posts fail later
                if len(entries) >= self.max_articles * 2:
                    break
                title = ""
                for title_selector in TITLE_SELECTORS:
                    match = _first(element, title_selector)
                    title = normalize_text(match.text_content()) if match is not None else ""
                    if len(title) > 10:
                        break
                link = _first(element, "a[href]")
                if title and link is not None:
                    url = urljoin(self.source_url, link.get("href"))
                    entries.append(ListingEntry(title=title, url=url))
            if len(entries) >= self.max_articles:
                break

        unique = {}
        for entry in entries:
            unique.setdefault(entry.url, entry)
        return list(unique.values())

    def extract_content(self, tree: lxml.html.HtmlElement) -> Optional[str]:
        for rule in self.content_rules:
            match = _first(tree, rule.selector)
            if match is None:
                continue
            text = normalize_text(match.text_content())
            if len(text) > rule.min_length:
                return text[: self.content_cap]
        return None

    def extract_author(self, tree: lxml.html.HtmlElement) -> Optional[str]:
        for selector in AUTHOR_SELECTORS:
            match = _first(tree, selector)
            if match is not None:
                author = normalize_text(match.text_content())
                if author:
                    return author
        return None

    def extract_image(self, tree: lxml.html.HtmlElement, page_url: str) -> Optional[str]:
        for selector in IMAGE_SELECTORS:
            match = _first(tree, selector)
            if match is None:
                continue
            src = match.get("src") or match.get("content")
            if src:
                return urljoin(page_url, src)
        return None

    def extract_date(self, tree: lxml.html.HtmlElement) -> Optional[str]:
        """Publication date as ``YYYY-MM-DD``."""
        for selector in DATE_SELECTORS:
            match = _first(tree, selector)
            if match is None:
                continue
            raw = (
                match.text_content().strip()
                or match.get("datetime")
                or match.get("content")
            )
            if not raw:
                continue
            try:
                return dateutil.parser.parse(raw).date().isoformat()
            except (ValueError, OverflowError):
                continue
        return None

    async def scrape_entry(self, entry: ListingEntry) -> ArticleCreate:
        html = await self.extractor.fetch_html(entry.url)
        tree = _parse_page(html, entry.url)
        return ArticleCreate(
            title=entry.title,
            content=self.extract_content(tree) or MISSING_CONTENT,
            author=self.extract_author(tree) or self.default_author,
            url=entry.url,
            published_date=self.extract_date(tree),
            image_url=self.extract_image(tree, entry.url),
            is_enhanced=False,
        )

    async def ingest(self) -> List[Article]:
        """Scrape the listing and create one original per kept post.

        Raises:
            ExtractionError: the listing page could not be fetched or parsed
            PersistenceError: the store rejected a write
        """
        logger.info("Fetching source listing", extra={"url": self.source_url})
        listing_html = await self.extractor.fetch_html(self.source_url)
        entries = self.parse_listing(listing_html)
        # Oldest posts sit at the end of the listing
        selected = entries[-self.max_articles :] if self.max_articles > 0 else []
        logger.info(
            "Source listing parsed",
            extra={"found": len(entries), "selected": len(selected)},
        )

        created: List[Article] = []
        for index, entry in enumerate(selected):
            if index and self.pacing_delay > 0:
                await self._sleep(self.pacing_delay)
            logger.info(
                "Scraping source article",
                extra={"position": index + 1, "total": len(selected), "url": entry.url},
            )
            try:
                fields = await self.scrape_entry(entry)
            except ExtractionError as exc:
                logger.warning(
                    "Source article %s failed, storing minimal record: %s",
                    entry.url,
                    exc,
                    extra={"url": entry.url},
                )
                fields = ArticleCreate(
                    title=entry.title,
                    content=FAILED_CONTENT,
                    author=self.default_author,
                    url=entry.url,
                    is_enhanced=False,
                )
            created.append(self.store.create(fields))
        return created
