"""SQLAlchemy-backed article store."""

from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from enhancer.db.models import ArticleRecord
from enhancer.db.repositories import ArticleRepository
from enhancer.errors import PersistenceError
from enhancer.models import Article, ArticleCreate

from .article_store import ArticleStore

logger = logging.getLogger(__name__)


def _to_article(record: ArticleRecord, stage: str) -> Article:
    try:
        return Article.model_validate(record)
    except ValidationError as exc:
        raise PersistenceError(
            f"Article {record.id} failed validation",
            stage=stage,
            provider="database",
            cause=exc,
        ) from exc


class DatabaseArticleStore(ArticleStore):
    """Article store backed by the ``articles`` table.

    Args:
        repository: Repository to query; defaults to the configured database
        allow_rederive: Let ``get_latest_unenhanced`` return originals that
            already have a derived version
    """

    def __init__(
        self,
        repository: Optional[ArticleRepository] = None,
        *,
        allow_rederive: bool = False,
    ):
        self.repository = repository or ArticleRepository()
        self.allow_rederive = allow_rederive

    def get_latest_unenhanced(self) -> Optional[Article]:
        try:
            record = self.repository.get_latest_unenhanced(
                exclude_derived=not self.allow_rederive
            )
        except SQLAlchemyError as exc:
            raise PersistenceError(
                "Failed to query latest unenhanced article",
                stage="fetch_target",
                provider="database",
                cause=exc,
            ) from exc
        return _to_article(record, "fetch_target") if record is not None else None

    def create(self, fields: ArticleCreate) -> Article:
        payload = fields.model_dump(mode="json")
        try:
            record = self.repository.create_article(payload)
        except (SQLAlchemyError, LookupError) as exc:
            raise PersistenceError(
                "Failed to create article",
                stage="persist",
                provider="database",
                cause=exc,
            ) from exc
        logger.info(
            "Article created",
            extra={"article_id": record.id, "original_article_id": record.original_article_id},
        )
        return _to_article(record, "persist")

    def find_by_id(self, article_id: int) -> Optional[Article]:
        try:
            record = self.repository.get_by_id(article_id)
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"Failed to load article {article_id}",
                provider="database",
                cause=exc,
            ) from exc
        return _to_article(record, "lookup") if record is not None else None

    def find_versions_derived_from(self, article_id: int) -> List[Article]:
        try:
            records = self.repository.get_versions_derived_from(article_id)
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"Failed to load versions of article {article_id}",
                provider="database",
                cause=exc,
            ) from exc
        return [_to_article(r, "lookup") for r in records]

    def list_articles(self) -> List[Article]:
        try:
            records = self.repository.list_recent()
        except SQLAlchemyError as exc:
            raise PersistenceError(
                "Failed to list articles", provider="database", cause=exc
            ) from exc
        return [_to_article(r, "list") for r in records]
