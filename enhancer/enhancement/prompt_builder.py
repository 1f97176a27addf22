"""Prompt building for article enhancement."""
from __future__ import annotations

import logging
from typing import Sequence

from enhancer.models import Article, ReferenceDocument

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = (
    "You are a professional content writer. Enhance articles by improving their "
    "formatting, structure, and content quality while maintaining the original message."
)


class PromptBuilder:
    """Builds the single prompt shared by every generative provider.

    Args:
        original_excerpt_chars: How much of the original body is quoted
        reference_excerpt_chars: How much of each reference body is quoted
    """

    def __init__(self, original_excerpt_chars: int = 1500, reference_excerpt_chars: int = 800):
        self.original_excerpt_chars = original_excerpt_chars
        self.reference_excerpt_chars = reference_excerpt_chars

    def build(self, article: Article, references: Sequence[ReferenceDocument]) -> str:
        parts = [
            "You are enhancing an article to improve its quality, formatting, and readability.\n\n",
            "=== ORIGINAL ARTICLE ===\n",
            f"Title: {article.title}\n",
            f"Content:\n{article.content[: self.original_excerpt_chars]}\n\n",
            "=== REFERENCE ARTICLES (Top ranking on Google) ===\n",
        ]
        for index, reference in enumerate(references, start=1):
            parts.append(
                f"\nReference {index}:\n"
                f"Title: {reference.title}\n"
                f"URL: {reference.url}\n"
                f"Content excerpt:\n{reference.content[: self.reference_excerpt_chars]}\n"
            )
        parts.append(self._task_instructions())

        prompt = "".join(parts)
        logger.debug(
            "Enhancement prompt built",
            extra={"article_id": article.id, "references": len(references), "chars": len(prompt)},
        )
        return prompt

    @staticmethod
    def _task_instructions() -> str:
        return (
            "\n=== YOUR TASK ===\n"
            "Rewrite and enhance the ORIGINAL ARTICLE by:\n"
            "1. Improving the structure and formatting (use clear sections, headings)\n"
            "2. Making the content more engaging and professional\n"
            "3. Incorporating relevant insights from the reference articles\n"
            "4. Keeping the core message of the original article\n"
            "5. Making it similar in style and quality to the top-ranking reference articles\n\n"
            "IMPORTANT:\n"
            "- Do NOT include any preamble or meta-commentary\n"
            "- Start directly with the enhanced article content\n"
            "- Use markdown formatting for headings and structure\n"
            "- Keep it between 500-1500 words\n"
            "- Do NOT add a references section (we will add that separately)\n\n"
            "Enhanced Article:"
        )
