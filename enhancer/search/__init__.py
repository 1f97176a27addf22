from .base import SearchProvider
from .browser import BrowserSearchProvider
from .chain import SearchProviderChain
from .factory import SearchProviderFactory, build_search_chain
from .mock import MockSearchProvider
from .serpapi import SerpApiSearchProvider

__all__ = [
    "BrowserSearchProvider",
    "MockSearchProvider",
    "SearchProvider",
    "SearchProviderChain",
    "SearchProviderFactory",
    "SerpApiSearchProvider",
    "build_search_chain",
]
