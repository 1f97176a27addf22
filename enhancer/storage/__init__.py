"""Article store backends and the factory that picks one from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from enhancer.errors import ConfigurationError

from .article_store import ArticleStore
from .database_store import DatabaseArticleStore
from .http_store import HttpArticleStore

if TYPE_CHECKING:
    from enhancer.config import AppSettings


def build_article_store(settings: "AppSettings") -> ArticleStore:
    """Create the store named by ``settings.store.backend``."""
    backend = settings.store.backend
    allow_rederive = settings.pipeline.allow_rederive
    if backend == "database":
        from enhancer.db.repositories import ArticleRepository

        repository = ArticleRepository(settings.database.sqlalchemy_url())
        return DatabaseArticleStore(repository, allow_rederive=allow_rederive)
    if backend == "http":
        return HttpArticleStore(
            settings.store.api_base_url,
            timeout=settings.store.timeout,
            allow_rederive=allow_rederive,
        )
    raise ConfigurationError(f"Unknown article store backend: {backend}", stage="config")


__all__ = [
    "ArticleStore",
    "DatabaseArticleStore",
    "HttpArticleStore",
    "build_article_store",
]
