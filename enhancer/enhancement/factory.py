"""Provider factory for creating generative providers from configuration."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from enhancer.errors import ConfigurationError

from .base import GenerativeProvider
from .providers import AnthropicProvider, GeminiProvider, HuggingFaceProvider, OpenAIProvider

if TYPE_CHECKING:
    from enhancer.config import EnhancementSettings

logger = logging.getLogger(__name__)

PROVIDER_CLASSES = {
    "gemini": GeminiProvider,
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
    "huggingface": HuggingFaceProvider,
}


class ProviderFactory:
    """Factory for creating generative providers from configuration.

    A provider without credentials is skipped and recorded in ``errors``;
    the chain then relies on the remaining providers and the template
    composer.
    """

    def __init__(self, settings: "EnhancementSettings"):
        self.settings = settings
        self._errors: list[tuple[str, str]] = []

    @property
    def errors(self) -> list[tuple[str, str]]:
        """Get list of (provider_name, error_message) tuples from creation attempts."""
        return self._errors.copy()

    def create_provider(self, provider_name: str) -> Optional[GenerativeProvider]:
        """Create provider by name.

        Raises:
            ConfigurationError: the name is not a known provider
        """
        provider_cls = PROVIDER_CLASSES.get(provider_name)
        if provider_cls is None:
            raise ConfigurationError(
                f"Unknown enhancement provider: {provider_name}",
                stage="enhance",
                provider=provider_name,
            )

        provider = provider_cls.from_settings(
            getattr(self.settings, provider_name),
            temperature=self.settings.temperature,
            max_tokens=self.settings.max_tokens,
            timeout=self.settings.timeout,
        )
        if provider is None:
            error_msg = "not configured"
            self._errors.append((provider_name, error_msg))
            logger.info(
                "Skipping unconfigured provider",
                extra={"provider": provider_name},
            )
        return provider

    def create_all_configured(self) -> list[GenerativeProvider]:
        """Create all providers listed in settings.providers, in order.

        Returns:
            Successfully created providers (may be empty)
        """
        providers: list[GenerativeProvider] = []
        for provider_name in self.settings.providers:
            provider = self.create_provider(provider_name.strip().lower())
            if provider is not None:
                providers.append(provider)

        logger.info(
            "Enhancement providers configured",
            extra={
                "providers": [p.name for p in providers],
                "skipped": [name for name, _ in self._errors],
            },
        )
        return providers
