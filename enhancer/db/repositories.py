"""Repository classes for the article domain.

Each repository extends BaseRepository and adds domain-specific query methods.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import exists, select
from sqlalchemy.orm import aliased

from .base_repository import BaseRepository
from .models import ArticleRecord


class ArticleRepository(BaseRepository[ArticleRecord]):
    """Repository for original and derived article records."""

    model_class = ArticleRecord

    def list_recent(self, limit: Optional[int] = None) -> List[ArticleRecord]:
        """All articles, newest first."""
        with self._get_session() as session:
            stmt = select(ArticleRecord).order_by(
                ArticleRecord.created_at.desc(), ArticleRecord.id.desc()
            )
            if limit is not None:
                stmt = stmt.limit(limit)
            return list(session.execute(stmt).scalars().all())

    def get_latest_unenhanced(
        self, *, exclude_derived: bool = True
    ) -> Optional[ArticleRecord]:
        """Most recent article not flagged as enhanced.

        Args:
            exclude_derived: Skip articles that already have a derived version.
                When False every run can pick the same original again.

        Returns:
            ArticleRecord or None if nothing is waiting
        """
        with self._get_session() as session:
            stmt = select(ArticleRecord).where(ArticleRecord.is_enhanced.is_(False))
            if exclude_derived:
                derived = aliased(ArticleRecord)
                stmt = stmt.where(
                    ~exists().where(derived.original_article_id == ArticleRecord.id)
                )
            stmt = stmt.order_by(
                ArticleRecord.created_at.desc(), ArticleRecord.id.desc()
            ).limit(1)
            return session.execute(stmt).scalars().first()

    def get_versions_derived_from(self, original_id: int) -> List[ArticleRecord]:
        """Derived articles pointing at ``original_id``, newest first."""
        with self._get_session() as session:
            stmt = (
                select(ArticleRecord)
                .where(ArticleRecord.original_article_id == original_id)
                .order_by(ArticleRecord.created_at.desc(), ArticleRecord.id.desc())
            )
            return list(session.execute(stmt).scalars().all())

    def create_article(self, fields: Dict[str, Any]) -> ArticleRecord:
        """Insert an article, checking the back-reference in the same transaction.

        Raises:
            LookupError: ``original_article_id`` does not name an existing article
        """
        with self._get_session() as session:
            original_id = fields.get("original_article_id")
            if original_id is not None and self._get_by_id_session(session, original_id) is None:
                raise LookupError(f"original article {original_id} does not exist")
            record = self._create_session(session, **fields)
            session.refresh(record)
            return record
