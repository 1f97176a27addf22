from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from huggingface_hub import AsyncInferenceClient

from enhancer.config import credential_configured
from enhancer.errors import ProviderUnavailable

from ..base import GenerativeProvider

if TYPE_CHECKING:
    from enhancer.config import HuggingFaceProviderSettings

logger = logging.getLogger(__name__)


class HuggingFaceProvider(GenerativeProvider):
    """HuggingFace Text Generation Inference (TGI) provider.

    Only constructed when an endpoint is configured; the token is optional
    for self-hosted servers.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        *,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout: float = 60.0,
    ):
        self._base_url = base_url
        self._token = token
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout

    @classmethod
    def from_settings(
        cls,
        settings: "HuggingFaceProviderSettings",
        *,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout: float = 60.0,
    ) -> Optional["HuggingFaceProvider"]:
        base = (settings.api_base or "").strip()
        if not base:
            logger.info("HuggingFace endpoint not configured")
            return None
        if base.endswith("/v1"):
            base = base[:-3]

        token = settings.api_key if credential_configured(settings.api_key) else None
        return cls(
            base_url=base,
            token=token,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

    @property
    def name(self) -> str:
        return "huggingface"

    async def generate(self, prompt: str) -> str:
        try:
            async with AsyncInferenceClient(
                self._base_url, token=self._token, timeout=self._timeout
            ) as client:
                raw = await client.text_generation(
                    prompt,
                    max_new_tokens=self._max_tokens,
                    temperature=self._temperature,
                    do_sample=True,
                    return_full_text=False,
                )
        except Exception as exc:
            raise ProviderUnavailable(
                "HuggingFace generation failed", stage="enhance", provider=self.name, cause=exc
            ) from exc
        return self._coerce_generated_text(raw)

    def _coerce_generated_text(self, raw: Any) -> str:
        """Extract text from various TGI response formats."""
        if raw is None:
            return ""
        if isinstance(raw, str):
            return raw
        text = getattr(raw, "generated_text", None)
        if isinstance(text, str):
            return text
        if isinstance(raw, dict):
            for key in ("generated_text", "text", "content"):
                value = raw.get(key)
                if isinstance(value, str):
                    return value
        return str(raw)
