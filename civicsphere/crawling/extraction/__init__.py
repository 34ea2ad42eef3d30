"""
Content extraction exports.
"""

from civicsphere.crawling.extraction.base import HostnameExtractor, SiteExtractor
from civicsphere.crawling.extraction.generic import GenericExtractor
from civicsphere.crawling.extraction.links import discover_links
from civicsphere.crawling.extraction.registry import ContentExtractor, ExtractorRegistry
from civicsphere.crawling.extraction.sites import BooksToScrapeExtractor, HackerNewsExtractor

__all__ = [
    "BooksToScrapeExtractor",
    "ContentExtractor",
    "ExtractorRegistry",
    "GenericExtractor",
    "HackerNewsExtractor",
    "HostnameExtractor",
    "SiteExtractor",
    "discover_links",
]
