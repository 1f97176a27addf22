from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from openai import AsyncOpenAI, OpenAIError

from enhancer.config import credential_configured
from enhancer.errors import ProviderUnavailable

from ..base import GenerativeProvider
from ..prompt_builder import SYSTEM_INSTRUCTION

if TYPE_CHECKING:
    from enhancer.config import OpenAIProviderSettings

logger = logging.getLogger(__name__)


class OpenAIProvider(GenerativeProvider):
    """OpenAI chat completions provider."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        *,
        base_url: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout: float = 60.0,
        client: Optional[AsyncOpenAI] = None,
    ):
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._client = client or AsyncOpenAI(
            api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0
        )

    @classmethod
    def from_settings(
        cls,
        settings: "OpenAIProviderSettings",
        *,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout: float = 60.0,
    ) -> Optional["OpenAIProvider"]:
        if not credential_configured(settings.api_key):
            logger.info("OpenAI API key not configured")
            return None
        return cls(
            api_key=settings.api_key,
            model=settings.model,
            base_url=settings.base_url,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

    @property
    def name(self) -> str:
        return "openai"

    async def generate(self, prompt: str) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": SYSTEM_INSTRUCTION},
                    {"role": "user", "content": prompt},
                ],
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except OpenAIError as exc:
            raise ProviderUnavailable(
                "OpenAI request failed", stage="enhance", provider=self.name, cause=exc
            ) from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
