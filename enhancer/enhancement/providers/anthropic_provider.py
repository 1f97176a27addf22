from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from anthropic import AnthropicError, AsyncAnthropic

from enhancer.config import credential_configured
from enhancer.errors import ProviderUnavailable

from ..base import GenerativeProvider

if TYPE_CHECKING:
    from enhancer.config import AnthropicProviderSettings

logger = logging.getLogger(__name__)


class AnthropicProvider(GenerativeProvider):
    """Anthropic messages API provider."""

    def __init__(
        self,
        api_key: str,
        model: str = "claude-3-sonnet-20240229",
        *,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout: float = 60.0,
        client: Optional[AsyncAnthropic] = None,
    ):
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._client = client or AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)

    @classmethod
    def from_settings(
        cls,
        settings: "AnthropicProviderSettings",
        *,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout: float = 60.0,
    ) -> Optional["AnthropicProvider"]:
        if not credential_configured(settings.api_key):
            logger.info("Anthropic API key not configured")
            return None
        return cls(
            api_key=settings.api_key,
            model=settings.model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

    @property
    def name(self) -> str:
        return "anthropic"

    async def generate(self, prompt: str) -> str:
        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except AnthropicError as exc:
            raise ProviderUnavailable(
                "Anthropic request failed", stage="enhance", provider=self.name, cause=exc
            ) from exc

        text_parts = []
        for block in getattr(response, "content", None) or []:
            text = getattr(block, "text", None)
            if getattr(block, "type", "text") == "text" and isinstance(text, str):
                text_parts.append(text)
        return "".join(text_parts)
