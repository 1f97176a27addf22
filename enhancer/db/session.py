"""
Database session management.

Provides SQLAlchemy engine and session factory configuration. Engines are
cached per URL so repositories pointed at the same database share a pool.
"""

from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from enhancer.config import get_settings
from .models import Base


def resolve_database_url(database_url: Optional[str] = None) -> str:
    return database_url or get_settings().database.sqlalchemy_url()


@lru_cache(maxsize=None)
def _engine_for_url(url: str) -> Engine:
    if url.startswith("sqlite"):
        return create_engine(url, future=True)
    # pool_pre_ping for resiliency against dropped Postgres connections
    return create_engine(url, pool_pre_ping=True, future=True)


def get_engine(database_url: Optional[str] = None) -> Engine:
    """Return the (cached) Engine for the given or configured database URL."""
    return _engine_for_url(resolve_database_url(database_url))


def get_sessionmaker(database_url: Optional[str] = None) -> sessionmaker[Session]:
    return sessionmaker(
        bind=get_engine(database_url),
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )


@contextmanager
def get_session(database_url: Optional[str] = None) -> Iterator[Session]:
    """Get a database session with automatic commit/rollback.

    Usage:
        with get_session() as session:
            session.add(model)
    """
    SessionLocal = get_sessionmaker(database_url)
    session: Session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(database_url: Optional[str] = None) -> None:
    """Create tables directly from the ORM metadata.

    Intended for development and tests; production schemas are managed by
    Alembic migrations.
    """
    Base.metadata.create_all(bind=get_engine(database_url))
