"""Prompt builder for notice summarization."""

_PROMPT_TEMPLATE = """\
Summarize this government notification/content in 2-3 sentences:

Title: {title}
Content: {content}

Summary should be:
- Easy to understand for general public
- Highlight key actions or deadlines
- Mention who is affected
- Keep it concise and actionable
"""


class SummaryPromptBuilder:
    """Builds a bounded summarization prompt.

    Content is truncated to ``max_content_chars`` so prompt size stays
    predictable regardless of page length.
    """

    def __init__(self, max_content_chars: int = 2000) -> None:
        self._max_content_chars = max_content_chars

    def build_prompt(self, title: str, content: str) -> str:
        """Build the summarization prompt.

        Args:
            title: Notice title, may be empty.
            content: Notice body text.

        Returns:
            The formatted prompt string.
        """
        return _PROMPT_TEMPLATE.format(
            title=title.strip(),
            content=content[: self._max_content_chars],
        )
