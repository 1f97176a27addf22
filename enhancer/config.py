"""
Configuration for the article enhancer.

Provides environment-based configuration with Pydantic settings. Every
section accepts both a flat variable name (``SERPAPI_KEY``) and a nested one
(``SEARCH__SERPAPI_KEY``).
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional
from urllib.parse import quote_plus

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Values shipped in the example .env files; treated the same as "not set".
PLACEHOLDER_KEYS = {
    "your_serpapi_key_here",
    "your_gemini_key_here",
    "your_openai_key_here",
    "your_anthropic_key_here",
    "-",
}

DEFAULT_CONTENT_SELECTORS = (
    "article",
    ".post-content",
    ".entry-content",
    ".article-content",
    "main",
    '[class*="content"]',
)


def credential_configured(value: Optional[str]) -> bool:
    """Return True when a credential is present and not a template placeholder."""
    if not value:
        return False
    value = value.strip()
    return bool(value) and value not in PLACEHOLDER_KEYS


def _parse_list(value, default: list[str]) -> list[str]:
    if value is None:
        return list(default)
    if isinstance(value, str):
        items = [item.strip() for item in value.split(",") if item.strip()]
        return items or list(default)
    if isinstance(value, (list, tuple, set)):
        items = [str(item).strip() for item in value if str(item).strip()]
        return items or list(default)
    return list(default)


class _Section(BaseSettings):
    """Base for config sections; each section reads its own variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
        enable_decoding=False,
    )


class DatabaseSettings(_Section):
    """Database connection settings."""

    url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL", "DATABASE__URL"),
    )
    host: str = Field(
        default="localhost",
        validation_alias=AliasChoices("DB_HOST", "DATABASE__HOST"),
    )
    port: int = Field(
        default=5432,
        validation_alias=AliasChoices("DB_PORT", "DATABASE__PORT"),
    )
    name: str = Field(
        default="articles",
        validation_alias=AliasChoices("DB_NAME", "DATABASE__NAME"),
    )
    user: str = Field(
        default="postgres",
        validation_alias=AliasChoices("DB_USER", "DATABASE__USER"),
    )
    password: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("DB_PASSWORD", "DATABASE__PASSWORD"),
    )

    def sqlalchemy_url(self) -> str:
        """Build SQLAlchemy database URL."""
        if self.url:
            return self.url
        user = quote_plus(self.user)
        pwd = quote_plus(self.password.get_secret_value())
        return f"postgresql+psycopg://{user}:{pwd}@{self.host}:{self.port}/{self.name}"


class StoreSettings(_Section):
    """Where articles are read from and written to."""

    backend: str = Field(
        default="database",
        validation_alias=AliasChoices("STORE_BACKEND", "STORE__BACKEND"),
    )
    api_base_url: str = Field(
        default="http://localhost:3000",
        validation_alias=AliasChoices("BACKEND_API_URL", "STORE__API_BASE_URL"),
    )
    timeout: float = Field(
        default=10.0,
        validation_alias=AliasChoices("STORE_TIMEOUT", "STORE__TIMEOUT"),
    )

    @field_validator("backend", mode="before")
    @classmethod
    def _normalize_backend(cls, value) -> str:
        return (str(value or "database")).strip().lower() or "database"


class SearchSettings(_Section):
    providers: list[str] = Field(
        default_factory=lambda: ["serpapi", "browser", "mock"],
        validation_alias=AliasChoices("SEARCH_PROVIDERS", "SEARCH__PROVIDERS"),
    )
    serpapi_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SERPAPI_KEY", "SEARCH__SERPAPI_KEY"),
    )
    serpapi_endpoint: str = Field(
        default="https://serpapi.com/search.json",
        validation_alias=AliasChoices("SERPAPI_ENDPOINT", "SEARCH__SERPAPI_ENDPOINT"),
    )
    num_results: int = Field(
        default=10,
        validation_alias=AliasChoices("SEARCH_NUM_RESULTS", "SEARCH__NUM_RESULTS"),
    )
    timeout: float = Field(
        default=30.0,
        validation_alias=AliasChoices("SEARCH_TIMEOUT", "SEARCH__TIMEOUT"),
    )
    chromium_bin: str = Field(
        default="/usr/bin/chromium",
        validation_alias=AliasChoices("CHROMIUM_BIN", "SEARCH__CHROMIUM_BIN"),
    )
    results_page_url: str = Field(
        default="https://www.google.com/search?q={query}",
        validation_alias=AliasChoices("SEARCH_RESULTS_URL", "SEARCH__RESULTS_PAGE_URL"),
    )

    @field_validator("providers", mode="before")
    @classmethod
    def _parse_providers(cls, value):
        return _parse_list(value, ["serpapi", "browser", "mock"])


class ExtractionSettings(_Section):
    timeout: float = Field(
        default=30.0,
        validation_alias=AliasChoices("EXTRACTION_TIMEOUT", "EXTRACTION__TIMEOUT"),
    )
    user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/124.0.0.0 Safari/537.36"
        ),
        validation_alias=AliasChoices("EXTRACTION_USER_AGENT", "EXTRACTION__USER_AGENT"),
    )
    selectors: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CONTENT_SELECTORS),
        validation_alias=AliasChoices("EXTRACTION_SELECTORS", "EXTRACTION__SELECTORS"),
    )
    min_selector_length: int = Field(
        default=200,
        validation_alias=AliasChoices(
            "EXTRACTION_MIN_SELECTOR_LENGTH",
            "EXTRACTION__MIN_SELECTOR_LENGTH",
        ),
    )

    @field_validator("selectors", mode="before")
    @classmethod
    def _parse_selectors(cls, value):
        # Comma separated; an empty value keeps the built-in ranking.
        return _parse_list(value, list(DEFAULT_CONTENT_SELECTORS))


class GeminiProviderSettings(_Section):
    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "ENHANCEMENT__GEMINI__API_KEY"),
    )
    model: str = Field(
        default="gemini-1.5-flash",
        validation_alias=AliasChoices("GEMINI_MODEL", "ENHANCEMENT__GEMINI__MODEL"),
    )
    api_base: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        validation_alias=AliasChoices("GEMINI_API_BASE", "ENHANCEMENT__GEMINI__API_BASE"),
    )


class OpenAIProviderSettings(_Section):
    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "ENHANCEMENT__OPENAI__API_KEY"),
    )
    model: str = Field(
        default="gpt-3.5-turbo",
        validation_alias=AliasChoices("OPENAI_MODEL", "ENHANCEMENT__OPENAI__MODEL"),
    )
    base_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_BASE_URL", "ENHANCEMENT__OPENAI__BASE_URL"),
    )


class AnthropicProviderSettings(_Section):
    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("ANTHROPIC_API_KEY", "ENHANCEMENT__ANTHROPIC__API_KEY"),
    )
    model: str = Field(
        default="claude-3-sonnet-20240229",
        validation_alias=AliasChoices("ANTHROPIC_MODEL", "ENHANCEMENT__ANTHROPIC__MODEL"),
    )


class HuggingFaceProviderSettings(_Section):
    """HuggingFace TGI provider configuration."""

    api_base: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("HF_API_BASE", "ENHANCEMENT__HUGGINGFACE__API_BASE"),
    )
    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("HF_API_KEY", "ENHANCEMENT__HUGGINGFACE__API_KEY"),
    )


class EnhancementSettings(_Section):
    providers: list[str] = Field(
        default_factory=lambda: ["gemini", "openai", "anthropic", "huggingface"],
        validation_alias=AliasChoices("ENHANCEMENT_PROVIDERS", "ENHANCEMENT__PROVIDERS"),
    )
    temperature: float = Field(
        default=0.7,
        validation_alias=AliasChoices("ENHANCEMENT_TEMPERATURE", "ENHANCEMENT__TEMPERATURE"),
    )
    max_tokens: int = Field(
        default=2000,
        validation_alias=AliasChoices("ENHANCEMENT_MAX_TOKENS", "ENHANCEMENT__MAX_TOKENS"),
    )
    timeout: float = Field(
        default=60.0,
        validation_alias=AliasChoices("ENHANCEMENT_TIMEOUT", "ENHANCEMENT__TIMEOUT"),
    )
    original_excerpt_chars: int = Field(
        default=1500,
        validation_alias=AliasChoices(
            "ENHANCEMENT_ORIGINAL_EXCERPT_CHARS",
            "ENHANCEMENT__ORIGINAL_EXCERPT_CHARS",
        ),
    )
    reference_excerpt_chars: int = Field(
        default=800,
        validation_alias=AliasChoices(
            "ENHANCEMENT_REFERENCE_EXCERPT_CHARS",
            "ENHANCEMENT__REFERENCE_EXCERPT_CHARS",
        ),
    )

    gemini: GeminiProviderSettings = Field(default_factory=GeminiProviderSettings)
    openai: OpenAIProviderSettings = Field(default_factory=OpenAIProviderSettings)
    anthropic: AnthropicProviderSettings = Field(default_factory=AnthropicProviderSettings)
    huggingface: HuggingFaceProviderSettings = Field(
        default_factory=HuggingFaceProviderSettings
    )

    @field_validator("providers", mode="before")
    @classmethod
    def _parse_providers(cls, value):
        if isinstance(value, str) and not value.strip():
            return []
        return _parse_list(value, ["gemini", "openai", "anthropic", "huggingface"])


class PipelineSettings(_Section):
    reference_limit: int = Field(
        default=2,
        validation_alias=AliasChoices("REFERENCE_LIMIT", "PIPELINE__REFERENCE_LIMIT"),
    )
    reference_content_cap: int = Field(
        default=3000,
        validation_alias=AliasChoices(
            "REFERENCE_CONTENT_CAP",
            "PIPELINE__REFERENCE_CONTENT_CAP",
        ),
    )
    reference_min_length: int = Field(
        default=100,
        validation_alias=AliasChoices(
            "REFERENCE_MIN_LENGTH",
            "PIPELINE__REFERENCE_MIN_LENGTH",
        ),
    )
    pacing_delay: float = Field(
        default=1.0,
        validation_alias=AliasChoices("PACING_DELAY", "PIPELINE__PACING_DELAY"),
    )
    publishing_domain: str = Field(
        default="beyondchats.com",
        validation_alias=AliasChoices("PUBLISHING_DOMAIN", "PIPELINE__PUBLISHING_DOMAIN"),
    )
    author_label: str = Field(
        default="AI Enhanced",
        validation_alias=AliasChoices("ENHANCED_AUTHOR", "PIPELINE__AUTHOR_LABEL"),
    )
    allow_rederive: bool = Field(
        default=False,
        validation_alias=AliasChoices("ALLOW_REDERIVE", "PIPELINE__ALLOW_REDERIVE"),
    )


class IngestionSettings(_Section):
    source_url: str = Field(
        default="https://beyondchats.com/blogs/",
        validation_alias=AliasChoices("SOURCE_BLOG_URL", "INGESTION__SOURCE_URL"),
    )
    max_articles: int = Field(
        default=5,
        validation_alias=AliasChoices("INGEST_MAX_ARTICLES", "INGESTION__MAX_ARTICLES"),
    )
    content_cap: int = Field(
        default=5000,
        validation_alias=AliasChoices("INGEST_CONTENT_CAP", "INGESTION__CONTENT_CAP"),
    )
    default_author: str = Field(
        default="BeyondChats",
        validation_alias=AliasChoices("INGEST_DEFAULT_AUTHOR", "INGESTION__DEFAULT_AUTHOR"),
    )


class AppSettings(BaseSettings):
    """Application configuration loaded from environment variables.

    Uses pydantic-settings to support .env and environment overrides.
    """

    log_level: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL"))
    log_format: str = Field(default="text", validation_alias=AliasChoices("LOG_FORMAT"))
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    enhancement: EnhancementSettings = Field(default_factory=EnhancementSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()
