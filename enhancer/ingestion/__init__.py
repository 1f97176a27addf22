from .source_scraper import ListingEntry, SourceScraper

__all__ = ["ListingEntry", "SourceScraper"]
