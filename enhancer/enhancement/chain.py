from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from enhancer.errors import ProviderUnavailable
from enhancer.models import Article, ReferenceDocument

from .base import EnhancementResult, GenerativeProvider
from .prompt_builder import PromptBuilder
from .template import TemplateComposer, build_references_section

logger = logging.getLogger(__name__)


class EnhancementProviderChain:
    """Generative providers in priority order, template composer last.

    Every provider receives the same prompt. The first non-empty answer wins
    and gets the references section appended. With no provider configured,
    or all of them failing, the composer produces the article.
    """

    def __init__(
        self,
        providers: Sequence[GenerativeProvider],
        *,
        prompt_builder: Optional[PromptBuilder] = None,
        composer: Optional[TemplateComposer] = None,
    ):
        self.providers: List[GenerativeProvider] = list(providers)
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.composer = composer or TemplateComposer()

    async def enhance(
        self, article: Article, references: Sequence[ReferenceDocument]
    ) -> EnhancementResult:
        """Rewrite ``article`` using ``references``.

        Raises:
            EnhancementError: no provider answered and the article has no
                title or content
        """
        if self.providers:
            prompt = self.prompt_builder.build(article, references)
            for provider in self.providers:
                logger.debug("Trying provider", extra={"provider": provider.name})
                try:
                    text = await provider.generate(prompt)
                except ProviderUnavailable as exc:
                    logger.warning(
                        "Generative provider %s failed, trying next: %s",
                        provider.name,
                        exc,
                        extra={"provider": provider.name},
                    )
                    continue

                if not text or not text.strip():
                    logger.warning(
                        "Generative provider %s returned empty text, trying next",
                        provider.name,
                        extra={"provider": provider.name},
                    )
                    continue

                logger.info("Provider succeeded", extra={"provider": provider.name})
                content = f"{text.strip()}\n\n{build_references_section(references)}"
                return EnhancementResult(text=content, provider=provider.name)

            logger.warning("All generative providers failed, composing from template")
        else:
            logger.warning("No generative provider configured, composing from template")

        return EnhancementResult(
            text=self.composer.compose(article, references),
            provider=self.composer.name,
        )
