"""Article store client for the article REST API.

The API wraps every payload in ``{"success": bool, "data": ...}`` and uses
``is_updated`` as the wire name of the enhanced flag.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from enhancer.errors import PersistenceError
from enhancer.models import Article, ArticleCreate

from .article_store import ArticleStore

logger = logging.getLogger(__name__)


def _validate_article(data: Any, stage: str) -> Article:
    try:
        return Article.model_validate(data)
    except ValidationError as exc:
        raise PersistenceError(
            "Article API returned an invalid article",
            stage=stage,
            provider="http",
            cause=exc,
        ) from exc


def _validate_articles(data: Any, stage: str) -> List[Article]:
    if not isinstance(data, list):
        raise PersistenceError(
            f"Article API returned {type(data).__name__} where a list was expected",
            stage=stage,
            provider="http",
        )
    return [_validate_article(item, stage) for item in data]


class HttpArticleStore(ArticleStore):
    """Article store talking to ``{base_url}/api/articles``.

    Args:
        base_url: API root, e.g. ``http://localhost:3000``
        timeout: Per-request timeout in seconds
        allow_rederive: Use the server's ``/latest`` selector as is, which keeps
            returning an original after it has been enhanced
        client: Optional preconfigured ``httpx.Client`` (tests inject one
            built on ``httpx.MockTransport``)
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        allow_rederive: bool = False,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.allow_rederive = allow_rederive
        self._client = client or httpx.Client(base_url=self.base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, *, stage: str, **kwargs) -> Optional[Any]:
        """Issue a request and unwrap the ``data`` envelope; 404 yields None."""
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise PersistenceError(
                f"{method} {path} failed",
                stage=stage,
                provider="http",
                cause=exc,
            ) from exc

        if response.status_code == 404:
            return None
        try:
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPStatusError, ValueError) as exc:
            raise PersistenceError(
                f"{method} {path} returned an unusable response",
                stage=stage,
                provider="http",
                cause=exc,
            ) from exc

        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    def list_articles(self) -> List[Article]:
        data = self._request("GET", "/api/articles", stage="list")
        return _validate_articles(data if data is not None else [], "list")

    def get_latest_unenhanced(self) -> Optional[Article]:
        if self.allow_rederive:
            data = self._request("GET", "/api/articles/latest", stage="fetch_target")
            return _validate_article(data, "fetch_target") if data else None

        # The server's /latest ignores lineage, so select client-side
        articles = self.list_articles()
        derived_from = {
            a.original_article_id for a in articles if a.original_article_id is not None
        }
        candidates = [
            a for a in articles if not a.is_enhanced and a.id not in derived_from
        ]
        if not candidates:
            return None
        candidates.sort(
            key=lambda a: (a.created_at is not None, a.created_at, a.id),
            reverse=True,
        )
        return candidates[0]

    def find_by_id(self, article_id: int) -> Optional[Article]:
        data = self._request("GET", f"/api/articles/{article_id}", stage="lookup")
        return _validate_article(data, "lookup") if data else None

    def find_versions_derived_from(self, article_id: int) -> List[Article]:
        data = self._request("GET", f"/api/articles/{article_id}", stage="lookup")
        if not data:
            return []
        if not isinstance(data, dict):
            raise PersistenceError(
                "Article API returned an invalid article",
                stage="lookup",
                provider="http",
            )
        versions = data.get("updated_versions")
        if versions is None:
            return [
                article
                for article in self.list_articles()
                if article.original_article_id == article_id
            ]
        return _validate_articles(versions, "lookup")

    def create(self, fields: ArticleCreate) -> Article:
        data = self._request("POST", "/api/articles", stage="persist", json=fields.to_wire())
        if not data:
            raise PersistenceError(
                "Article API did not return the created article",
                stage="persist",
                provider="http",
            )
        article = _validate_article(data, "persist")
        logger.info(
            "Article created",
            extra={"article_id": article.id, "original_article_id": article.original_article_id},
        )
        return article
