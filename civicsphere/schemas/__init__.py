"""
Schema exports.
"""

from civicsphere.schemas.crawl import (
    CrawlRequest,
    CrawlRunResponse,
    CrawlStatsResponse,
    ProcessedNoticeResponse,
    RobotsCheckResponse,
)

__all__ = [
    "CrawlRequest",
    "CrawlRunResponse",
    "CrawlStatsResponse",
    "ProcessedNoticeResponse",
    "RobotsCheckResponse",
]
