"""Text-generation adapters used by the notice summarizer.

``OpenAILLMAdapter`` talks to any OpenAI-compatible chat endpoint; by
default the summarizer points it at Gemini's compatibility layer.
``MockLLMAdapter`` returns canned text for tests and offline runs.
"""

import os
from abc import ABC, abstractmethod
from typing import List, Optional


class BaseLLMAdapter(ABC):
    """Interface every summarization backend implements."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Return the model's text for ``prompt``.

        Args:
            prompt: Complete prompt produced by SummaryPromptBuilder.

        Returns:
            Model output, possibly empty.
        """


class OpenAILLMAdapter(BaseLLMAdapter):
    """Chat-completions adapter for OpenAI-compatible providers.

    Client-side retries are disabled and every request carries
    ``timeout_seconds``; retrying and falling back is the summarizer's job.
    """

    def __init__(
        self,
        model: str = "gemini-2.0-flash",
        max_tokens: int = 256,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: float = 20.0,
        temperature: float = 0.2,
    ) -> None:
        """Create the underlying ``openai.OpenAI`` client.

        Args:
            model: Model name understood by the provider.
            max_tokens: Completion token ceiling.
            api_key: Provider key; OPENAI_API_KEY is read when omitted.
            base_url: Provider endpoint; the OpenAI default when omitted.
            timeout_seconds: Request timeout.
            temperature: Sampling temperature.

        Raises:
            ImportError: The ``openai`` distribution is not installed.
        """
        try:
            from openai import OpenAI  # type: ignore[import-untyped]
        except ImportError as exc:
            raise ImportError(
                "OpenAILLMAdapter needs the openai package (pip install openai)."
            ) from exc

        options: dict = {
            "api_key": api_key or os.environ.get("OPENAI_API_KEY", ""),
            "timeout": timeout_seconds,
            "max_retries": 0,
        }
        if base_url:
            options["base_url"] = base_url

        self._client = OpenAI(**options)
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature

    def generate(self, prompt: str) -> str:
        completion = self._client.chat.completions.create(
            model=self._model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""


_CANNED_SUMMARY = (
    "This notice announces an update from a public authority. "
    "Affected residents should review the details and act before any stated deadline."
)


class MockLLMAdapter(BaseLLMAdapter):
    """Offline adapter returning ``response`` and keeping every prompt in ``prompts``."""

    def __init__(self, response: str = _CANNED_SUMMARY) -> None:
        self.response = response
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.response
