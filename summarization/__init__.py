"""Notice summarization package."""

from summarization.adapter import BaseLLMAdapter, MockLLMAdapter, OpenAILLMAdapter
from summarization.prompt_builder import SummaryPromptBuilder
from summarization.rate_limiter import SlidingWindowRateLimiter
from summarization.summarizer import (
    NoticeSummarizer,
    SummarizationUnavailable,
    fallback_summary,
    reading_time,
    word_count,
)

__all__ = [
    "BaseLLMAdapter",
    "MockLLMAdapter",
    "NoticeSummarizer",
    "OpenAILLMAdapter",
    "SlidingWindowRateLimiter",
    "SummarizationUnavailable",
    "SummaryPromptBuilder",
    "fallback_summary",
    "reading_time",
    "word_count",
]
