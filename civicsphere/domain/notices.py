"""
civicsphere/domain/notices.py

Domain models handed to downstream notice storage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from civicsphere.crawling.types import CrawlStats, ExtractedItem


def importance_for(word_count: int) -> str:
    if word_count > 500:
        return "high"
    if word_count > 200:
        return "medium"
    return "low"


@dataclass(frozen=True)
class ProcessedNotice:
    """
    One extracted item annotated with category, summary and reading metadata.
    """

    item: ExtractedItem
    category: str
    summary: str
    source_url: str
    source_domain: str
    word_count: int
    reading_time: int
    importance: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.item.title,
            "content": self.item.content,
            "type": self.item.type,
            "summary": self.summary,
            "category": self.category,
            "source_url": self.source_url,
            "source_domain": self.source_domain,
            "metadata": {
                **self.item.metadata,
                "word_count": self.word_count,
                "reading_time": self.reading_time,
                "importance": self.importance,
            },
        }


@dataclass(frozen=True)
class NoticePipelineResult:
    """
    Outcome of one crawl plus per-item processing.
    """

    notices: list[ProcessedNotice]
    stats: CrawlStats
    items_scraped: int
    failed_items: int = 0
    errors: list[str] = field(default_factory=list)
