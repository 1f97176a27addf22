"""
Fake implementations for testing.

Fakes are simplified working implementations of the pipeline's collaborators,
following the "fakes over mocks" philosophy: they keep real data structures
and behave like the real component without network or database access.

Key fakes:
- InMemoryArticleStore: article store with the same lineage rules
- ScriptedSearchProvider / FailingSearchProvider: canned search outcomes
- ScriptedGenerativeProvider: canned or failing LLM answers
- FakeExtractor: per-URL text or errors, records every call
"""

from .extractor import FakeExtractor
from .providers import FailingSearchProvider, ScriptedGenerativeProvider, ScriptedSearchProvider
from .store import InMemoryArticleStore

__all__ = [
    "FailingSearchProvider",
    "FakeExtractor",
    "InMemoryArticleStore",
    "ScriptedGenerativeProvider",
    "ScriptedSearchProvider",
]
