from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class ReferenceLink(BaseModel):
    title: str
    url: str


class Article(BaseModel):
    """An article as held by the article store."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    author: Optional[str] = None
    url: Optional[str] = None
    published_date: Optional[str] = None
    image_url: Optional[str] = None
    is_enhanced: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_enhanced", "is_updated"),
    )
    original_article_id: Optional[int] = None
    reference_links: Optional[List[ReferenceLink]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_original(self) -> bool:
        return self.original_article_id is None and not self.is_enhanced

    def to_wire(self) -> dict:
        """JSON shape used by the article REST API (``is_updated`` flag)."""
        payload = self.model_dump(mode="json", exclude={"is_enhanced"})
        payload["is_updated"] = self.is_enhanced
        return payload


class ArticleCreate(BaseModel):
    """Fields accepted by ``ArticleStore.create``."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    author: Optional[str] = None
    url: Optional[str] = None
    published_date: Optional[str] = None
    image_url: Optional[str] = None
    is_enhanced: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_enhanced", "is_updated"),
    )
    original_article_id: Optional[int] = None
    reference_links: Optional[List[ReferenceLink]] = None

    @model_validator(mode="after")
    def _check_lineage(self) -> "ArticleCreate":
        if not self.title.strip() or not self.content.strip():
            raise ValueError("title and content must not be blank")
        if self.is_enhanced and self.original_article_id is None:
            raise ValueError("enhanced articles must reference their original article")
        if not self.is_enhanced and self.reference_links:
            raise ValueError("only enhanced articles may carry reference links")
        return self

    def to_wire(self) -> dict:
        payload = self.model_dump(mode="json", exclude={"is_enhanced"})
        payload["is_updated"] = self.is_enhanced
        return payload


class SearchResult(BaseModel):
    title: str
    link: str
    snippet: str = ""
    synthetic: bool = False


class ReferenceDocument(BaseModel):
    title: str
    url: str
    content: str
    placeholder: bool = False

    def to_link(self) -> ReferenceLink:
        return ReferenceLink(title=self.title, url=self.url)
