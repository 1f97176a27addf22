"""Pipeline scenarios using fakes for every collaborator."""

import httpx
import pytest

from enhancer.config import AppSettings
from enhancer.enhancement import EnhancementProviderChain, build_references_section
from enhancer.errors import EnhancementError, PersistenceError, TargetNotFound
from enhancer.models import Article, SearchResult
from enhancer.pipeline import EnhancementPipeline, PipelineStage, ReferenceCollector
from enhancer.search import MockSearchProvider, SearchProviderChain
from enhancer.storage import HttpArticleStore
from fakes import (
    FailingSearchProvider,
    FakeExtractor,
    InMemoryArticleStore,
    ScriptedGenerativeProvider,
    ScriptedSearchProvider,
)

EXTERNAL = [
    SearchResult(title="Own post", link="https://beyondchats.com/blogs/x/"),
    SearchResult(title="Zendesk guide", link="https://zendesk.example/guide"),
    SearchResult(title="Intercom post", link="https://intercom.example/post"),
]


async def _no_sleep(delay):
    return None


def _pipeline(store, *, search=None, pages=None, generators=None) -> EnhancementPipeline:
    search = search or [ScriptedSearchProvider("serpapi", EXTERNAL)]
    extractor = FakeExtractor(pages if pages is not None else {r.link: "r" * 300 for r in EXTERNAL})
    collector = ReferenceCollector(
        extractor, publishing_domain="beyondchats.com", sleep=_no_sleep
    )
    return EnhancementPipeline(
        store,
        SearchProviderChain(search),
        collector,
        EnhancementProviderChain(generators or []),
    )


def _seed(store: InMemoryArticleStore, count: int) -> Article:
    original = None
    for n in range(1, count + 1):
        original = store.add_original(
            f"Original {n}", f"Body of article {n}. " * 40, url=f"https://beyondchats.com/blogs/{n}/"
        )
    return original


@pytest.mark.asyncio
async def test_successful_run_creates_one_derived_article():
    store = InMemoryArticleStore()
    _seed(store, 7)
    target = store.find_by_id(7)
    provider = ScriptedGenerativeProvider("gemini", text="# Rewritten\n\nBetter body")

    run = await _pipeline(store, generators=[provider]).run()

    derived = run.derived
    assert run.stage is PipelineStage.DONE
    assert run.succeeded
    assert store.count() == 8
    assert derived.title == f"Enhanced: {target.title}"
    assert derived.original_article_id == 7
    assert derived.is_enhanced is True
    assert derived.author == "AI Enhanced"
    assert derived.url == target.url
    assert [(l.title, l.url) for l in derived.reference_links] == [
        ("Zendesk guide", "https://zendesk.example/guide"),
        ("Intercom post", "https://intercom.example/post"),
    ]
    assert derived.content.endswith(build_references_section(run.references))
    assert run.search_provider == "serpapi"
    assert run.enhancement_provider == "gemini"
    assert set(run.timings) == {"fetch_target", "search", "collect", "enhance", "assemble", "persist"}


@pytest.mark.asyncio
async def test_search_uses_article_title():
    store = InMemoryArticleStore()
    target = _seed(store, 1)
    search = ScriptedSearchProvider("serpapi", EXTERNAL)

    await _pipeline(store, search=[search]).run()

    assert search.queries == [target.title]


@pytest.mark.asyncio
async def test_degraded_run_uses_template_and_mock_references():
    store = InMemoryArticleStore()
    target = _seed(store, 1)
    search = [
        FailingSearchProvider("serpapi", "no key"),
        FailingSearchProvider("browser", "captcha"),
        MockSearchProvider(),
    ]

    # example.com pages are unreachable, so both slots become placeholders
    run = await _pipeline(store, search=search, pages={}).run()

    derived = run.derived
    assert run.search_provider == "mock"
    assert run.enhancement_provider == "template"
    assert derived.content.startswith(f"# {target.title}\n\n## Introduction")
    assert [l.url for l in derived.reference_links] == [
        "https://example.com/article-1",
        "https://example.com/article-2",
    ]
    assert all(r.placeholder for r in run.references)


@pytest.mark.asyncio
async def test_search_exhausted_still_produces_article():
    store = InMemoryArticleStore()
    _seed(store, 1)

    run = await _pipeline(store, search=[FailingSearchProvider("serpapi")]).run()

    assert run.search_provider is None
    assert [l.title for l in run.derived.reference_links] == ["Reference Article"]


@pytest.mark.asyncio
async def test_no_target_aborts_without_writing():
    store = InMemoryArticleStore()
    pipeline = _pipeline(store)

    with pytest.raises(TargetNotFound):
        await pipeline.run()

    assert pipeline.last_run.stage is PipelineStage.ABORTED
    assert pipeline.last_run.aborted_at is PipelineStage.FETCH_TARGET
    assert store.create_calls == []


@pytest.mark.asyncio
async def test_invalid_target_aborts():
    class BlankTargetStore(InMemoryArticleStore):
        def get_latest_unenhanced(self):
            return Article.model_construct(id=1, title="   ", content="body", is_enhanced=False)

    store = BlankTargetStore()
    pipeline = _pipeline(store)

    with pytest.raises(EnhancementError):
        await pipeline.run()
    assert pipeline.last_run.aborted_at is PipelineStage.FETCH_TARGET
    assert store.create_calls == []


@pytest.mark.asyncio
async def test_persistence_failure_propagates():
    store = InMemoryArticleStore()
    _seed(store, 1)
    store.fail_on_create = True
    pipeline = _pipeline(store)

    with pytest.raises(PersistenceError):
        await pipeline.run()

    assert pipeline.last_run.stage is PipelineStage.ABORTED
    assert pipeline.last_run.aborted_at is PipelineStage.PERSIST
    assert store.derived_articles() == []


@pytest.mark.asyncio
async def test_second_run_moves_to_next_original():
    store = InMemoryArticleStore()
    _seed(store, 2)

    first = await _pipeline(store).run()
    second = await _pipeline(store).run()

    assert first.target.id == 2
    assert second.target.id == 1
    with pytest.raises(TargetNotFound):
        await _pipeline(store).run()


@pytest.mark.asyncio
async def test_rederive_opt_in_reproduces_legacy_behaviour():
    store = InMemoryArticleStore(allow_rederive=True)
    _seed(store, 1)

    first = await _pipeline(store).run()
    second = await _pipeline(store).run()

    assert first.target.id == second.target.id == 1
    assert len(store.find_versions_derived_from(1)) == 2


@pytest.mark.asyncio
async def test_from_settings_wires_configuration(monkeypatch):
    monkeypatch.setenv("ENHANCED_AUTHOR", "Editor Bot")
    monkeypatch.setenv("REFERENCE_LIMIT", "3")
    monkeypatch.setenv("PUBLISHING_DOMAIN", "example.net")
    store = InMemoryArticleStore()

    pipeline = EnhancementPipeline.from_settings(AppSettings(), store=store)

    assert pipeline.store is store
    assert pipeline.author_label == "Editor Bot"
    assert pipeline.collector.limit == 3
    assert pipeline.collector.publishing_domain == "example.net"
    assert pipeline.search_chain.provider_names == ["serpapi", "browser", "mock"]
    assert pipeline.enhancement_chain.providers == []


@pytest.mark.asyncio
async def test_invalid_stored_article_aborts_at_fetch_target():
    rows = [{"id": 1, "title": "Scraped", "content": ""}]
    client = httpx.Client(
        base_url="http://api.test",
        transport=httpx.MockTransport(
            lambda request: httpx.Response(200, json={"success": True, "data": rows})
        ),
    )
    pipeline = _pipeline(HttpArticleStore("http://api.test", client=client))

    with pytest.raises(PersistenceError):
        await pipeline.run()

    assert pipeline.last_run.stage is PipelineStage.ABORTED
    assert pipeline.last_run.aborted_at is PipelineStage.FETCH_TARGET
