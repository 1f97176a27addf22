from __future__ import annotations

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
    text as sa_text,
)
from sqlalchemy.orm import declarative_base


Base = declarative_base()


class ArticleRecord(Base):
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    author = Column(String, nullable=True)
    url = Column(Text, nullable=True)
    published_date = Column(String, nullable=True)
    image_url = Column(Text, nullable=True)
    is_enhanced = Column(Boolean, nullable=False, server_default=sa_text("false"))
    # Source article this one was derived from; NULL for originals
    original_article_id = Column(
        Integer,
        ForeignKey("articles.id", ondelete="SET NULL"),
        nullable=True,
    )
    # JSON array of {"title", "url"} objects
    reference_links = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime,
        nullable=True,
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (
        Index("idx_articles_original_article_id", "original_article_id"),
        Index("idx_articles_is_enhanced_created_at", "is_enhanced", "created_at"),
    )
