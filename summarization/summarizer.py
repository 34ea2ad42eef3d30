"""Notice summarization with a deterministic extractive fallback.

The AI path is optional. Whenever the adapter is absent, the rate limiter
is saturated, or the call fails, the summary is built from the first
sentences of the content instead. Errors never reach the caller.
"""

import logging
import math
import re
from typing import Optional

from summarization.adapter import BaseLLMAdapter
from summarization.prompt_builder import SummaryPromptBuilder
from summarization.rate_limiter import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 200
MIN_SENTENCE_LENGTH = 20
MIN_SUMMARY_LENGTH = 10
TRUNCATED_SUMMARY_LENGTH = 200
EMPTY_SUMMARY = "No summary available."

_SENTENCE_SPLIT = re.compile(r"[.!?]+")


class SummarizationUnavailable(Exception):
    """Raised internally when the AI summary cannot be produced.

    Attributes:
        reason: Short machine-readable cause ("no_adapter", "rate_limited",
            "adapter_error", "empty_response").
    """

    def __init__(self, reason: str, detail: str = "") -> None:
        self.reason = reason
        self.detail = detail
        super().__init__(f"AI summarization unavailable: {reason} {detail}".strip())


def fallback_summary(content: str, title: str = "") -> str:
    """Build an extractive summary from the first two long sentences.

    Args:
        content: Notice body text.
        title: Used only when content is empty.

    Returns:
        A non-empty summary string.
    """
    sentences = [
        piece.strip()
        for piece in _SENTENCE_SPLIT.split(content)
        if len(piece.strip()) > MIN_SENTENCE_LENGTH
    ]
    first_two = ". ".join(sentences[:2]).strip()
    if len(first_two) > MIN_SUMMARY_LENGTH:
        return first_two if first_two.endswith(".") else f"{first_two}."

    stripped = content.strip()
    if len(stripped) > TRUNCATED_SUMMARY_LENGTH:
        return f"{stripped[:TRUNCATED_SUMMARY_LENGTH]}..."
    return stripped or title.strip() or EMPTY_SUMMARY


def word_count(content: str) -> int:
    """Count whitespace-delimited tokens."""
    return len(content.split())


def reading_time(content: str) -> int:
    """Estimated reading time in whole minutes, never below one."""
    return max(1, math.ceil(word_count(content) / WORDS_PER_MINUTE))


class NoticeSummarizer:
    """Summarizes notices through an LLM adapter behind a rate limiter.

    One instance may serve several crawl jobs; the rate limiter is the
    only shared state and is thread-safe.
    """

    def __init__(
        self,
        adapter: Optional[BaseLLMAdapter] = None,
        rate_limiter: Optional[SlidingWindowRateLimiter] = None,
        prompt_builder: Optional[SummaryPromptBuilder] = None,
    ) -> None:
        self._adapter = adapter
        self._rate_limiter = rate_limiter or SlidingWindowRateLimiter()
        self._prompt_builder = prompt_builder or SummaryPromptBuilder()

    @property
    def ai_enabled(self) -> bool:
        return self._adapter is not None

    def summarize(self, content: str, title: str = "") -> str:
        """Return a short summary of ``content``.

        Args:
            content: Notice body text.
            title: Notice title.

        Returns:
            The AI summary when available, otherwise the extractive fallback.
        """
        content = content or ""
        title = title or ""
        try:
            return self._generate(content, title)
        except SummarizationUnavailable as exc:
            logger.info("Using fallback summary: %s", exc.reason)
            return fallback_summary(content, title)

    def _generate(self, content: str, title: str) -> str:
        if self._adapter is None:
            raise SummarizationUnavailable("no_adapter")
        if not self._rate_limiter.try_acquire():
            raise SummarizationUnavailable("rate_limited")

        prompt = self._prompt_builder.build_prompt(title, content)
        try:
            raw = self._adapter.generate(prompt)
        except Exception as exc:
            logger.warning("AI summarization failed: %s", exc)
            raise SummarizationUnavailable("adapter_error", str(exc)) from exc

        summary = (raw or "").strip()
        if not summary:
            raise SummarizationUnavailable("empty_response")
        return summary
