"""
civicsphere/schemas/crawl.py

Request and response schemas for crawl runs.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

from civicsphere.classification import CATEGORY_LABELS
from civicsphere.crawling.types import CrawlOptions, CrawlStats
from civicsphere.domain.notices import NoticePipelineResult, ProcessedNotice


class CrawlRequest(BaseModel):
    """
    Validated input for one crawl run.
    """

    model_config = ConfigDict(extra="forbid")

    url: str
    max_depth: int = Field(default=2, ge=0, le=10)
    max_pages: int = Field(default=20, ge=1, le=1000)
    allowed_domains: list[str] = Field(default_factory=list)
    delay_ms: int | None = Field(default=None, ge=0)

    @field_validator("url")
    @classmethod
    def _validate_url(cls, value: str) -> str:
        stripped = value.strip()
        parsed = urlparse(stripped)
        if parsed.scheme not in {"http", "https"} or not parsed.hostname:
            raise ValueError("url must be an absolute http(s) URL")
        return stripped

    @field_validator("allowed_domains")
    @classmethod
    def _normalize_domains(cls, value: list[str]) -> list[str]:
        return [domain.strip().lower() for domain in value if domain.strip()]

    def to_options(self) -> CrawlOptions:
        return CrawlOptions(
            max_depth=self.max_depth,
            max_pages=self.max_pages,
            allowed_domains=tuple(self.allowed_domains),
            delay_ms=self.delay_ms,
        )


class RobotsCheckResponse(BaseModel):
    domain: str
    allowed: bool


class CrawlStatsResponse(BaseModel):
    """
    Crawl statistics as exposed to API and storage collaborators.
    """

    started_at: str
    finished_at: str
    duration_ms: int = Field(..., ge=0)
    total_requests: int = Field(..., ge=0)
    successful_requests: int = Field(..., ge=0)
    failed_requests: int = Field(..., ge=0)
    blocked_requests: int = Field(..., ge=0)
    robots_checked: list[RobotsCheckResponse] = Field(default_factory=list)
    visited_domains: list[str] = Field(default_factory=list)
    total_pages: int = Field(..., ge=0)
    total_urls: int = Field(..., ge=0)
    items_found: int = Field(..., ge=0)

    @classmethod
    def from_stats(cls, stats: CrawlStats) -> "CrawlStatsResponse":
        return cls(**stats.to_dict())


class ProcessedNoticeResponse(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    content: str
    type: str
    summary: str = Field(..., min_length=1)
    category: str
    source_url: str
    source_domain: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("category")
    @classmethod
    def _validate_category(cls, value: str) -> str:
        if value not in CATEGORY_LABELS:
            raise ValueError(f"category must be one of {list(CATEGORY_LABELS)}")
        return value

    @classmethod
    def from_notice(cls, notice: ProcessedNotice) -> "ProcessedNoticeResponse":
        return cls(**notice.to_dict())


class CrawlRunResponse(BaseModel):
    """
    Full result of one crawl run.
    """

    message: str
    items_scraped: int = Field(..., ge=0)
    failed_items: int = Field(default=0, ge=0)
    notices: list[ProcessedNoticeResponse] = Field(default_factory=list)
    crawl_stats: CrawlStatsResponse
    errors: list[str] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: NoticePipelineResult) -> "CrawlRunResponse":
        message = (
            "Crawl completed successfully"
            if result.items_scraped
            else "No notifications found on the specified website"
        )
        return cls(
            message=message,
            items_scraped=result.items_scraped,
            failed_items=result.failed_items,
            notices=[ProcessedNoticeResponse.from_notice(notice) for notice in result.notices],
            crawl_stats=CrawlStatsResponse.from_stats(result.stats),
            errors=result.errors,
        )
