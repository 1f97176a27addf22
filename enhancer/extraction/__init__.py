from .extractor import ContentExtractor, normalize_text, parse_html
from .selectors import NON_CONTENT_SELECTORS, SelectorRule, build_rules

__all__ = [
    "ContentExtractor",
    "NON_CONTENT_SELECTORS",
    "SelectorRule",
    "build_rules",
    "normalize_text",
    "parse_html",
]
