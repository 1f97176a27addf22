"""HttpArticleStore against an httpx.MockTransport fake of the article API."""

import json

import httpx
import pytest
from pydantic import ValidationError

from enhancer.errors import PersistenceError
from enhancer.models import ArticleCreate
from enhancer.storage import HttpArticleStore

ARTICLES = [
    {
        "id": 3,
        "title": "Enhanced: Second",
        "content": "rewritten",
        "is_updated": True,
        "original_article_id": 2,
        "created_at": "2024-05-03T10:00:00",
    },
    {"id": 2, "title": "Second", "content": "body", "is_updated": False, "created_at": "2024-05-02T10:00:00"},
    {"id": 1, "title": "First", "content": "body", "is_updated": False, "created_at": "2024-05-01T10:00:00"},
]


def _store(handler, **kwargs) -> HttpArticleStore:
    client = httpx.Client(base_url="http://api.test", transport=httpx.MockTransport(handler))
    return HttpArticleStore("http://api.test", client=client, **kwargs)


def _api(requests: list):
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        path = request.url.path
        if request.method == "GET" and path == "/api/articles":
            return httpx.Response(200, json={"success": True, "data": ARTICLES})
        if request.method == "GET" and path == "/api/articles/latest":
            return httpx.Response(200, json={"success": True, "data": ARTICLES[1]})
        if request.method == "GET" and path == "/api/articles/2":
            return httpx.Response(
                200, json={"success": True, "data": {**ARTICLES[1], "updated_versions": [ARTICLES[0]]}}
            )
        if request.method == "POST" and path == "/api/articles":
            body = json.loads(request.content)
            return httpx.Response(201, json={"success": True, "data": {"id": 4, **body}})
        return httpx.Response(404, json={"success": False, "error": "Article not found"})

    return handler


def test_latest_unenhanced_excludes_derived_originals():
    requests = []
    store = _store(_api(requests))

    latest = store.get_latest_unenhanced()

    assert latest.id == 1
    assert [r.url.path for r in requests] == ["/api/articles"]


def test_latest_unenhanced_with_rederive_uses_server_selection():
    requests = []
    store = _store(_api(requests), allow_rederive=True)

    latest = store.get_latest_unenhanced()

    assert latest.id == 2
    assert requests[0].url.path == "/api/articles/latest"


def test_find_by_id_and_missing_article():
    store = _store(_api([]))

    assert store.find_by_id(2).title == "Second"
    assert store.find_by_id(99) is None


def test_versions_derived_from_reads_updated_versions():
    store = _store(_api([]))

    versions = store.find_versions_derived_from(2)

    assert [v.id for v in versions] == [3]
    assert versions[0].is_enhanced is True


def test_create_sends_wire_flag():
    requests = []
    store = _store(_api(requests))

    created = store.create(
        ArticleCreate(
            title="Enhanced: First",
            content="rewritten",
            author="AI Enhanced",
            is_enhanced=True,
            original_article_id=1,
            reference_links=[{"title": "Ref", "url": "https://example.org"}],
        )
    )

    sent = json.loads(requests[-1].content)
    assert sent["is_updated"] is True
    assert "is_enhanced" not in sent
    assert sent["reference_links"] == [{"title": "Ref", "url": "https://example.org"}]
    assert created.id == 4
    assert created.is_enhanced is True


def test_server_error_raises_persistence_error():
    store = _store(lambda request: httpx.Response(500, json={"success": False}))

    with pytest.raises(PersistenceError) as excinfo:
        store.create(ArticleCreate(title="T", content="C"))
    assert excinfo.value.stage == "persist"
    assert excinfo.value.provider == "http"


def test_connection_error_raises_persistence_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    store = _store(refuse)

    with pytest.raises(PersistenceError):
        store.list_articles()


def test_invalid_row_raises_persistence_error():
    rows = [{"id": 1, "title": "Scraped", "content": ""}]
    store = _store(lambda request: httpx.Response(200, json={"success": True, "data": rows}))

    with pytest.raises(PersistenceError) as excinfo:
        store.get_latest_unenhanced()
    assert excinfo.value.provider == "http"
    assert excinfo.value.stage == "list"
    assert isinstance(excinfo.value.cause, ValidationError)


def test_non_list_payload_raises_persistence_error():
    store = _store(lambda request: httpx.Response(200, json={"success": True, "data": {"id": 1}}))

    with pytest.raises(PersistenceError):
        store.list_articles()


def test_invalid_created_article_raises_persistence_error():
    store = _store(lambda request: httpx.Response(201, json={"success": True, "data": {"id": 9}}))

    with pytest.raises(PersistenceError) as excinfo:
        store.create(ArticleCreate(title="T", content="C"))
    assert excinfo.value.stage == "persist"


def test_store_closes_its_client_on_exit():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(404)))

    with HttpArticleStore("http://api.test", client=client):
        pass

    assert client.is_closed
