"""Turns search results into a bounded set of reference documents."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence
from urllib.parse import urlsplit

from enhancer.errors import ExtractionError
from enhancer.models import ReferenceDocument, SearchResult

logger = logging.getLogger(__name__)

FALLBACK_REFERENCE = ReferenceDocument(
    title="Reference Article",
    url="https://example.com",
    content="Sample reference content for enhancement.",
    placeholder=True,
)


class Extractor(Protocol):
    async def extract(self, url: str) -> str:
        ...


def is_same_site(link: str, domain: Optional[str]) -> bool:
    """True when ``link`` is hosted on ``domain`` or one of its subdomains."""
    if not domain:
        return False
    host = (urlsplit(link).hostname or "").lower().rstrip(".")
    domain = domain.lower().strip().rstrip(".")
    return host == domain or host.endswith("." + domain)


def placeholder_document(candidate: SearchResult, cap: int = 3000) -> ReferenceDocument:
    content = (
        f"This is sample content from {candidate.title}. The article discusses "
        "relevant topics and provides insights on the subject matter."
    )
    return ReferenceDocument(
        title=candidate.title,
        url=candidate.link,
        content=content[:cap],
        placeholder=True,
    )


class ReferenceCollector:
    """Select external candidates and extract their text, one at a time.

    Args:
        extractor: Object with an async ``extract(url)``
        limit: Default number of candidates to visit
        content_cap: Maximum characters kept per document
        min_length: Extracted text must be longer than this to be used
        pacing_delay: Seconds to wait between successive extractions
        publishing_domain: Our own site; its pages are never used as references
    """

    def __init__(
        self,
        extractor: Extractor,
        *,
        limit: int = 2,
        content_cap: int = 3000,
        min_length: int = 100,
        pacing_delay: float = 1.0,
        publishing_domain: Optional[str] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.extractor = extractor
        self.limit = limit
        self.content_cap = content_cap
        self.min_length = min_length
        self.pacing_delay = pacing_delay
        self.publishing_domain = publishing_domain
        self._sleep = sleep

    def select(self, candidates: Sequence[SearchResult], limit: int) -> List[SearchResult]:
        selected = []
        for candidate in candidates:
            if len(selected) >= limit:
                break
            if not candidate.link:
                continue
            if is_same_site(candidate.link, self.publishing_domain):
                logger.debug("Skipping own-site candidate", extra={"url": candidate.link})
                continue
            selected.append(candidate)
        return selected

    async def collect(
        self, candidates: Sequence[SearchResult], limit: Optional[int] = None
    ) -> List[ReferenceDocument]:
        limit = self.limit if limit is None else limit
        selected = self.select(candidates, limit)
        documents: List[ReferenceDocument] = []

        for index, candidate in enumerate(selected):
            if index and self.pacing_delay > 0:
                await self._sleep(self.pacing_delay)

            logger.info(
                "Extracting reference",
                extra={"position": index + 1, "total": len(selected), "url": candidate.link},
            )
            try:
                text = await self.extractor.extract(candidate.link)
            except ExtractionError as exc:
                logger.warning(
                    "Reference extraction failed for %s, using placeholder: %s",
                    candidate.link,
                    exc,
                    extra={"url": candidate.link},
                )
                documents.append(placeholder_document(candidate, self.content_cap))
                continue

            if len(text) <= self.min_length:
                logger.info(
                    "Reference content too short, skipping",
                    extra={"url": candidate.link, "length": len(text)},
                )
                continue

            documents.append(
                ReferenceDocument(
                    title=candidate.title,
                    url=candidate.link,
                    content=text[: self.content_cap],
                )
            )

        if not documents:
            logger.warning("No references collected, using fallback reference")
            documents.append(FALLBACK_REFERENCE.model_copy())
        return documents
