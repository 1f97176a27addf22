"""Ranked selector rules for the structural extraction fallback."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

# Removed before any selector is probed
NON_CONTENT_SELECTORS: Sequence[str] = (
    "script",
    "style",
    "nav",
    "header",
    "footer",
    "aside",
    ".ad",
    ".advertisement",
)


@dataclass(frozen=True)
class SelectorRule:
    """A CSS selector and the text length its first match must exceed."""

    selector: str
    min_length: int = 200


def build_rules(selectors: Iterable[str], min_length: int) -> List[SelectorRule]:
    """Turn an ordered list of selectors into rules sharing one threshold."""
    return [SelectorRule(selector=s, min_length=min_length) for s in selectors if s]
