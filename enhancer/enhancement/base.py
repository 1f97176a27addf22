from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class EnhancementResult:
    """Rewritten article body and the provider that produced it."""

    text: str
    provider: str


class GenerativeProvider(ABC):
    """Base class for text generation providers.

    Providers handle the LLM call (prompt in -> text out). The enhancement
    chain owns prompt building and the references section.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier (e.g., 'gemini', 'openai')"""
        pass

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Generate a single response.

        Raises:
            ProviderUnavailable: the upstream call failed or timed out
        """
        pass
