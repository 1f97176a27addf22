"""Error taxonomy for the enhancement pipeline.

Recoverable errors (``ProviderUnavailable``, ``ExtractionError``) are caught
inside the stage that raised them and turned into fallback data. Fatal errors
(``TargetNotFound``, ``PersistenceError``, ``EnhancementError``) abort the run
and reach the caller.
"""

from __future__ import annotations

from typing import Optional


class EnhancerError(Exception):
    """Base error carrying the stage, provider and underlying cause."""

    def __init__(
        self,
        message: str,
        *,
        stage: Optional[str] = None,
        provider: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.provider = provider
        self.cause = cause

    def context(self) -> dict:
        """Fields suitable for a logging ``extra`` mapping."""
        return {
            "stage": self.stage,
            "provider": self.provider,
            "cause": repr(self.cause) if self.cause is not None else None,
        }

    def __str__(self) -> str:
        parts = [self.message]
        if self.stage:
            parts.append(f"stage={self.stage}")
        if self.provider:
            parts.append(f"provider={self.provider}")
        if self.cause is not None:
            parts.append(f"cause={self.cause!r}")
        return " | ".join(parts)


class ConfigurationError(EnhancerError):
    """Settings name an unknown provider or backend."""


class ProviderUnavailable(EnhancerError):
    """A provider is unconfigured or its upstream call failed."""


class ExtractionError(EnhancerError):
    """Fetching or parsing a single URL failed."""

    def __init__(self, message: str, *, url: str, **kwargs):
        kwargs.setdefault("stage", "extract")
        super().__init__(message, **kwargs)
        self.url = url


class TargetNotFound(EnhancerError):
    """No article is waiting to be enhanced."""


class EnhancementError(EnhancerError):
    """The template composer received an article without title or content."""


class PersistenceError(EnhancerError):
    """The article store rejected or failed a read/write."""
