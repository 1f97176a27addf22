from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import httpx

from enhancer.config import credential_configured
from enhancer.errors import ProviderUnavailable

from ..base import GenerativeProvider

if TYPE_CHECKING:
    from enhancer.config import GeminiProviderSettings

logger = logging.getLogger(__name__)


class GeminiProvider(GenerativeProvider):
    """Google Gemini through the public ``generateContent`` REST endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-1.5-flash",
        *,
        api_base: str = "https://generativelanguage.googleapis.com/v1beta",
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout: float = 60.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._api_key = api_key
        self._model = model
        self._api_base = api_base.rstrip("/")
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._client = client

    @classmethod
    def from_settings(
        cls,
        settings: "GeminiProviderSettings",
        *,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout: float = 60.0,
    ) -> Optional["GeminiProvider"]:
        if not credential_configured(settings.api_key):
            logger.info("Gemini API key not configured")
            return None
        return cls(
            api_key=settings.api_key,
            model=settings.model,
            api_base=settings.api_base,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

    @property
    def name(self) -> str:
        return "gemini"

    @property
    def endpoint(self) -> str:
        return f"{self._api_base}/models/{self._model}:generateContent"

    async def _post(self, body: dict) -> httpx.Response:
        params = {"key": self._api_key}
        if self._client is not None:
            return await self._client.post(
                self.endpoint, params=params, json=body, timeout=self._timeout
            )
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.post(self.endpoint, params=params, json=body)

    async def generate(self, prompt: str) -> str:
        body = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self._temperature,
                "maxOutputTokens": self._max_tokens,
            },
        }
        try:
            response = await self._post(body)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise ProviderUnavailable(
                "Gemini request failed", stage="enhance", provider=self.name, cause=exc
            ) from exc

        return self._extract_text(payload)

    def _extract_text(self, payload: dict) -> str:
        candidates = payload.get("candidates") or []
        if not candidates:
            reason = (payload.get("promptFeedback") or {}).get("blockReason")
            raise ProviderUnavailable(
                f"Gemini returned no candidates (block reason: {reason})",
                stage="enhance",
                provider=self.name,
            )
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts if isinstance(part, dict))
