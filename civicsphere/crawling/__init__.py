"""
Crawl pipeline exports.
"""

from civicsphere.crawling.engine import CrawlOrchestrator
from civicsphere.crawling.errors import (
    CapabilityUnavailable,
    CrawlError,
    FetchFailure,
    PolicyViolation,
)
from civicsphere.crawling.extraction import ContentExtractor, ExtractorRegistry
from civicsphere.crawling.link_filter import LinkFilter
from civicsphere.crawling.robots import PolitenessGuard
from civicsphere.crawling.types import (
    CrawlJob,
    CrawlOptions,
    CrawlResult,
    CrawlStats,
    ExtractedItem,
    ExtractionResult,
    FrontierEntry,
    PageModel,
    RobotsCheck,
)

__all__ = [
    "CapabilityUnavailable",
    "ContentExtractor",
    "CrawlError",
    "CrawlJob",
    "CrawlOptions",
    "CrawlOrchestrator",
    "CrawlResult",
    "CrawlStats",
    "ExtractedItem",
    "ExtractionResult",
    "ExtractorRegistry",
    "FetchFailure",
    "FrontierEntry",
    "LinkFilter",
    "PageModel",
    "PolicyViolation",
    "PolitenessGuard",
    "RobotsCheck",
]
