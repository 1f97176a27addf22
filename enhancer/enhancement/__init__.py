from __future__ import annotations

from typing import TYPE_CHECKING

from .base import EnhancementResult, GenerativeProvider
from .chain import EnhancementProviderChain
from .factory import ProviderFactory
from .prompt_builder import PromptBuilder
from .template import TemplateComposer, build_references_section

if TYPE_CHECKING:
    from enhancer.config import EnhancementSettings


def build_enhancement_chain(settings: "EnhancementSettings") -> EnhancementProviderChain:
    providers = ProviderFactory(settings).create_all_configured()
    return EnhancementProviderChain(
        providers,
        prompt_builder=PromptBuilder(
            original_excerpt_chars=settings.original_excerpt_chars,
            reference_excerpt_chars=settings.reference_excerpt_chars,
        ),
    )


__all__ = [
    "EnhancementProviderChain",
    "EnhancementResult",
    "GenerativeProvider",
    "PromptBuilder",
    "ProviderFactory",
    "TemplateComposer",
    "build_enhancement_chain",
    "build_references_section",
]
