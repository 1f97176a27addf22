from __future__ import annotations

from pathlib import Path

import pytest

from enhancer.config import get_settings

# Variables that would otherwise leak provider credentials or a real
# database into the tests.
_ENV_VARS = (
    "DATABASE_URL",
    "STORE_BACKEND",
    "BACKEND_API_URL",
    "SEARCH_PROVIDERS",
    "SERPAPI_KEY",
    "ENHANCEMENT_PROVIDERS",
    "GEMINI_API_KEY",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "HF_API_BASE",
    "HF_API_KEY",
    "ALLOW_REDERIVE",
    "PIPELINE__ALLOW_REDERIVE",
    "PACING_DELAY",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Run every test away from the developer's .env and credentials."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sqlite_url(tmp_path: Path) -> str:
    """File-backed SQLite database with the articles table created."""
    from enhancer.db import init_db

    url = f"sqlite:///{tmp_path / 'articles.db'}"
    init_db(url)
    return url


@pytest.fixture
def article_repository(sqlite_url: str):
    from enhancer.db import ArticleRepository

    return ArticleRepository(sqlite_url)


@pytest.fixture
def memory_store():
    """
    Provide InMemoryArticleStore for tests.

    Example:
        def test_latest(memory_store):
            original = memory_store.add_original("Title", "Body")
            assert memory_store.get_latest_unenhanced().id == original.id
    """
    from fakes import InMemoryArticleStore

    return InMemoryArticleStore()


@pytest.fixture
def long_text() -> str:
    """Body text comfortably above every minimum length threshold."""
    return " ".join(["Customer support automation keeps response times low."] * 12)
