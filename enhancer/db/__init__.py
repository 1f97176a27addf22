"""DB package assembling models, session helpers, and repositories."""

from .base_repository import BaseRepository
from .models import ArticleRecord, Base
from .repositories import ArticleRepository
from .session import get_engine, get_session, init_db

__all__ = [
    "ArticleRecord",
    "ArticleRepository",
    "Base",
    "BaseRepository",
    "get_engine",
    "get_session",
    "init_db",
]
