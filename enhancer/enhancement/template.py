"""Deterministic article composition used when no generative provider answers."""
from __future__ import annotations

from typing import Sequence

from enhancer.errors import EnhancementError
from enhancer.models import Article, ReferenceDocument


def build_references_section(references: Sequence[ReferenceDocument]) -> str:
    lines = [
        "---\n\n## References\n\n",
        "This article was enhanced using insights from the following sources:\n\n",
    ]
    for index, reference in enumerate(references, start=1):
        lines.append(f"{index}. [{reference.title}]({reference.url})\n")
    return "".join(lines)


class TemplateComposer:
    """Restructures the original body under fixed headings."""

    name = "template"

    def __init__(self, intro_chars: int = 500, body_chars: int = 1500):
        self.intro_chars = intro_chars
        self.body_chars = body_chars

    def compose(self, article: Article, references: Sequence[ReferenceDocument]) -> str:
        title = (article.title or "").strip()
        content = article.content or ""
        if not title or not content.strip():
            raise EnhancementError(
                "Article is missing title or content",
                stage="enhance",
                provider=self.name,
            )

        return (
            f"# {title}\n\n"
            "## Introduction\n\n"
            f"{content[: self.intro_chars]}\n\n"
            "## Main Content\n\n"
            f"{content[self.intro_chars : self.body_chars]}\n\n"
            "## Conclusion\n\n"
            "This article provides valuable insights on the topic.\n\n"
            f"{build_references_section(references)}"
        )
