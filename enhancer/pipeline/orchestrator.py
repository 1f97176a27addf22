"""Enhancement pipeline.

One run picks the newest article that has not been enhanced yet, searches
for competing pages on its title, extracts reference text, rewrites the
article and stores the result as a derived article. Nothing is written
unless every stage completed.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional

from enhancer.errors import EnhancementError, EnhancerError, ProviderUnavailable, TargetNotFound
from enhancer.models import Article, ArticleCreate, ReferenceDocument, SearchResult

from .collector import ReferenceCollector

if TYPE_CHECKING:
    from enhancer.config import AppSettings
    from enhancer.enhancement import EnhancementProviderChain
    from enhancer.search import SearchProviderChain
    from enhancer.storage import ArticleStore

logger = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    FETCH_TARGET = "fetch_target"
    SEARCH = "search"
    COLLECT = "collect"
    ENHANCE = "enhance"
    ASSEMBLE = "assemble"
    PERSIST = "persist"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class PipelineRun:
    """What happened during one pipeline invocation."""

    stage: PipelineStage = PipelineStage.FETCH_TARGET
    target: Optional[Article] = None
    derived: Optional[Article] = None
    search_provider: Optional[str] = None
    enhancement_provider: Optional[str] = None
    search_results: List[SearchResult] = field(default_factory=list)
    references: List[ReferenceDocument] = field(default_factory=list)
    timings: Dict[str, float] = field(default_factory=dict)
    aborted_at: Optional[PipelineStage] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.stage is PipelineStage.DONE


class EnhancementPipeline:
    """Sequences the stages of one enhancement run.

    Args:
        store: Article store to read the target from and write the result to
        search_chain: Search providers in priority order
        collector: Reference collector wrapping the content extractor
        enhancement_chain: Generative providers plus template composer
        author_label: Author recorded on derived articles
    """

    def __init__(
        self,
        store: "ArticleStore",
        search_chain: "SearchProviderChain",
        collector: ReferenceCollector,
        enhancement_chain: "EnhancementProviderChain",
        *,
        author_label: str = "AI Enhanced",
    ):
        self.store = store
        self.search_chain = search_chain
        self.collector = collector
        self.enhancement_chain = enhancement_chain
        self.author_label = author_label
        self.last_run: Optional[PipelineRun] = None

    @classmethod
    def from_settings(
        cls, settings: "AppSettings", store: Optional["ArticleStore"] = None
    ) -> "EnhancementPipeline":
        from enhancer.enhancement import build_enhancement_chain
        from enhancer.extraction import ContentExtractor
        from enhancer.search import build_search_chain
        from enhancer.storage import build_article_store

        pipeline_settings = settings.pipeline
        collector = ReferenceCollector(
            ContentExtractor.from_settings(settings.extraction),
            limit=pipeline_settings.reference_limit,
            content_cap=pipeline_settings.reference_content_cap,
            min_length=pipeline_settings.reference_min_length,
            pacing_delay=pipeline_settings.pacing_delay,
            publishing_domain=pipeline_settings.publishing_domain,
        )
        return cls(
            store if store is not None else build_article_store(settings),
            build_search_chain(settings.search, user_agent=settings.extraction.user_agent),
            collector,
            build_enhancement_chain(settings.enhancement),
            author_label=pipeline_settings.author_label,
        )

    def _enter(self, run: PipelineRun, stage: PipelineStage) -> float:
        run.stage = stage
        logger.info("Pipeline stage", extra={"stage": stage.value})
        return time.perf_counter()

    def _finish(self, run: PipelineRun, stage: PipelineStage, started: float) -> None:
        run.timings[stage.value] = round(time.perf_counter() - started, 4)

    def _abort(self, run: PipelineRun, exc: EnhancerError) -> None:
        run.aborted_at = run.stage
        run.error = str(exc)
        run.stage = PipelineStage.ABORTED
        logger.error(
            "Pipeline aborted at %s: %s",
            run.aborted_at.value,
            exc.message,
            extra={"aborted_at": run.aborted_at.value, **exc.context()},
        )

    async def run(self) -> PipelineRun:
        """Execute one run.

        Raises:
            TargetNotFound: no article is waiting to be enhanced
            EnhancementError: the target has no title or content
            PersistenceError: the store failed to read the target or write
                the derived article
        """
        run = PipelineRun()
        self.last_run = run
        try:
            target = self._fetch_target(run)
            candidates = await self._search(run, target)
            references = await self._collect(run, candidates)
            content = await self._enhance(run, target, references)
            fields = self._assemble(run, target, content, references)
            run.derived = self._persist(run, fields)
        except EnhancerError as exc:
            self._abort(run, exc)
            raise

        run.stage = PipelineStage.DONE
        logger.info(
            "Pipeline completed",
            extra={
                "original_article_id": target.id,
                "derived_article_id": run.derived.id,
                "search_provider": run.search_provider,
                "enhancement_provider": run.enhancement_provider,
            },
        )
        return run

    def _fetch_target(self, run: PipelineRun) -> Article:
        started = self._enter(run, PipelineStage.FETCH_TARGET)
        target = self.store.get_latest_unenhanced()
        self._finish(run, PipelineStage.FETCH_TARGET, started)

        if target is None:
            raise TargetNotFound(
                "No article is waiting to be enhanced", stage=PipelineStage.FETCH_TARGET.value
            )
        run.target = target
        if not target.title.strip() or not target.content.strip():
            raise EnhancementError(
                f"Article {target.id} is missing title or content",
                stage=PipelineStage.FETCH_TARGET.value,
            )
        logger.info(
            "Target selected",
            extra={"article_id": target.id, "title": target.title, "length": len(target.content)},
        )
        return target

    async def _search(self, run: PipelineRun, target: Article) -> List[SearchResult]:
        started = self._enter(run, PipelineStage.SEARCH)
        try:
            provider, results = await self.search_chain.search_with_provider(target.title)
        except ProviderUnavailable as exc:
            # Only reachable without the mock provider; references fall back to placeholders.
            logger.warning(
                "Search failed, continuing without candidates: %s", exc.message, extra=exc.context()
            )
            provider, results = None, []
        self._finish(run, PipelineStage.SEARCH, started)

        run.search_provider = provider
        run.search_results = list(results)
        return run.search_results

    async def _collect(
        self, run: PipelineRun, candidates: List[SearchResult]
    ) -> List[ReferenceDocument]:
        started = self._enter(run, PipelineStage.COLLECT)
        references = await self.collector.collect(candidates)
        self._finish(run, PipelineStage.COLLECT, started)

        run.references = references
        return references

    async def _enhance(
        self, run: PipelineRun, target: Article, references: List[ReferenceDocument]
    ) -> str:
        started = self._enter(run, PipelineStage.ENHANCE)
        result = await self.enhancement_chain.enhance(target, references)
        self._finish(run, PipelineStage.ENHANCE, started)

        run.enhancement_provider = result.provider
        return result.text

    def _assemble(
        self,
        run: PipelineRun,
        target: Article,
        content: str,
        references: List[ReferenceDocument],
    ) -> ArticleCreate:
        started = self._enter(run, PipelineStage.ASSEMBLE)
        fields = ArticleCreate(
            title=f"Enhanced: {target.title}",
            content=content,
            author=self.author_label,
            url=target.url,
            is_enhanced=True,
            original_article_id=target.id,
            reference_links=[reference.to_link() for reference in references],
        )
        self._finish(run, PipelineStage.ASSEMBLE, started)
        return fields

    def _persist(self, run: PipelineRun, fields: ArticleCreate) -> Article:
        started = self._enter(run, PipelineStage.PERSIST)
        derived = self.store.create(fields)
        self._finish(run, PipelineStage.PERSIST, started)
        return derived
