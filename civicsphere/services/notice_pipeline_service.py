"""
civicsphere/services/notice_pipeline_service.py

Service orchestration for crawling a site and preparing notice records.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from urllib.parse import urlparse

from civicsphere.classification import categorize
from civicsphere.config import (
    CrawlerSettings,
    SummarizerSettings,
    get_crawler_settings,
    get_summarizer_settings,
)
from civicsphere.crawling import CrawlOrchestrator, CrawlResult, ExtractedItem
from civicsphere.crawling.logging_utils import log_event
from civicsphere.domain.notices import NoticePipelineResult, ProcessedNotice, importance_for
from civicsphere.schemas.crawl import CrawlRequest
from summarization import (
    NoticeSummarizer,
    OpenAILLMAdapter,
    SlidingWindowRateLimiter,
    SummaryPromptBuilder,
    reading_time,
    word_count,
)

logger = logging.getLogger(__name__)


def build_summarizer(settings: SummarizerSettings) -> NoticeSummarizer:
    """
    Build a summarizer; without an enabled API key only the fallback is used.
    """

    rate_limiter = SlidingWindowRateLimiter(max_requests=settings.max_requests_per_minute)
    prompt_builder = SummaryPromptBuilder(max_content_chars=settings.max_prompt_chars)
    if not settings.enabled or not settings.api_key:
        log_event(logger, logging.WARNING, "summarizer_ai_disabled")
        return NoticeSummarizer(rate_limiter=rate_limiter, prompt_builder=prompt_builder)

    try:
        adapter = OpenAILLMAdapter(
            model=settings.model,
            max_tokens=settings.max_tokens,
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout_seconds=settings.timeout_seconds,
        )
    except Exception as exc:
        log_event(logger, logging.ERROR, "summarizer_init_failed", error=str(exc))
        adapter = None
    return NoticeSummarizer(adapter=adapter, rate_limiter=rate_limiter, prompt_builder=prompt_builder)


class NoticePipelineService:
    """
    Runs a crawl, then categorizes and summarizes every extracted item.
    """

    def __init__(
        self,
        *,
        crawler_settings: CrawlerSettings | None = None,
        orchestrator: CrawlOrchestrator | None = None,
        summarizer: NoticeSummarizer | None = None,
    ) -> None:
        self._crawler_settings = crawler_settings or get_crawler_settings()
        self._orchestrator = orchestrator or CrawlOrchestrator(settings=self._crawler_settings)
        self._summarizer = summarizer or build_summarizer(get_summarizer_settings())

    def run(self, request: CrawlRequest) -> NoticePipelineResult:
        """
        Crawl `request.url` and return processed notices with crawl statistics.

        PolicyViolation and CapabilityUnavailable propagate to the caller.
        """

        crawl_result = self._orchestrator.crawl(request.url, request.to_options())
        return self.process(crawl_result, start_url=request.url)

    def process(self, crawl_result: CrawlResult, *, start_url: str) -> NoticePipelineResult:
        notices: list[ProcessedNotice] = []
        seen: set[tuple[str, str]] = set()
        errors: list[str] = []

        for item in crawl_result.items:
            # Duplicates are skipped before any summarizer call.
            dedupe_key = (item.title, item.url or start_url)
            if dedupe_key in seen:
                continue
            seen.add(dedupe_key)

            try:
                notice = self.process_item(item, start_url=start_url)
            except Exception as exc:
                errors.append(f"title={item.title!r} error={exc}")
                log_event(
                    logger,
                    logging.ERROR,
                    "notice_processing_failed",
                    title=item.title,
                    url=item.url,
                    error=str(exc),
                )
                continue
            notices.append(notice)

        log_event(
            logger,
            logging.INFO,
            "notices_processed",
            start_url=start_url,
            items_scraped=len(crawl_result.items),
            notices=len(notices),
            failed_items=len(errors),
        )
        return NoticePipelineResult(
            notices=notices,
            stats=crawl_result.stats,
            items_scraped=len(crawl_result.items),
            failed_items=len(errors),
            errors=errors,
        )

    def process_item(self, item: ExtractedItem, *, start_url: str) -> ProcessedNotice:
        source_url = item.url or start_url
        words = word_count(item.content)
        return ProcessedNotice(
            item=item,
            category=categorize(item.title, item.content),
            summary=self._summarizer.summarize(item.content, item.title),
            source_url=source_url,
            source_domain=(urlparse(source_url).hostname or "").lower(),
            word_count=words,
            reading_time=reading_time(item.content),
            importance=importance_for(words),
        )


@lru_cache(maxsize=1)
def get_notice_pipeline_service() -> NoticePipelineService:
    """
    Build and cache the notice pipeline service.
    """

    return NoticePipelineService()
