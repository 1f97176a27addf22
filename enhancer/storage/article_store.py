"""
Article Store Abstraction Layer

Provides a unified interface for reading and creating articles across
different backends. Implementations: DatabaseArticleStore (SQLAlchemy),
HttpArticleStore (the article REST API).

The pipeline only reads articles and creates new ones; it never updates an
article in place.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from enhancer.models import Article, ArticleCreate


class ArticleStore(ABC):
    """Abstract interface for article persistence with lineage queries."""

    @abstractmethod
    def get_latest_unenhanced(self) -> Optional[Article]:
        """Most recent article still waiting to be enhanced.

        Returns:
            Article or None if nothing is waiting
        """

    @abstractmethod
    def create(self, fields: ArticleCreate) -> Article:
        """Persist a new article.

        Raises:
            PersistenceError: the backend rejected or failed the write
        """

    @abstractmethod
    def find_by_id(self, article_id: int) -> Optional[Article]:
        """Return an article by id, or None."""

    @abstractmethod
    def find_versions_derived_from(self, article_id: int) -> List[Article]:
        """Derived articles whose ``original_article_id`` is ``article_id``."""

    @abstractmethod
    def list_articles(self) -> List[Article]:
        """All articles, newest first."""

    def close(self) -> None:
        """Release connections held by the backend."""

    def __enter__(self) -> "ArticleStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
