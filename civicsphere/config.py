"""
civicsphere/config.py

Environment-driven settings for crawling and summarization.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

DEFAULT_USER_AGENT = "CivicSphereBot/1.0 (Government Transparency Tool; contact: admin@civicsphere.com)"
DEFAULT_GOVERNMENT_DOMAINS = (".gov", ".gov.in", ".gov.uk", ".europa.eu", ".gc.ca")
DEFAULT_SUMMARIZER_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
DEFAULT_SUMMARIZER_MODEL = "gemini-2.0-flash"
FETCH_BACKENDS = ("requests", "playwright")


ENV_FILENAMES = (".env", ".env.local")


def _parse_env_line(raw_line: str) -> tuple[str, str] | None:
    line = raw_line.strip()
    if line.startswith("export "):
        line = line[len("export "):].lstrip()
    if not line or line.startswith("#"):
        return None
    key, separator, value = line.partition("=")
    key = key.strip()
    if not separator or not key:
        return None
    return key, value.strip().strip("\"'")


def load_env_files(root: Path | None = None) -> None:
    """
    Apply `KEY=VALUE` lines from the project's env files to `os.environ`.

    Variables already present in the process environment take precedence.
    """

    base_dir = root or Path(__file__).resolve().parents[1]
    for filename in ENV_FILENAMES:
        env_file = base_dir / filename
        if not env_file.is_file():
            continue
        for raw_line in env_file.read_text(encoding="utf-8").splitlines():
            parsed = _parse_env_line(raw_line)
            if parsed is not None:
                os.environ.setdefault(*parsed)


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(*names: str) -> str | None:
    """
    Return the first non-blank value among `names`.
    """

    _load_env_once()
    for name in names:
        value = os.getenv(name)
        if value is not None and value.strip():
            return value.strip()
    return None


def _get_list_env(name: str) -> tuple[str, ...]:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return ()
    return tuple(item.strip() for item in raw_value.split(",") if item.strip())


@dataclass(frozen=True)
class CrawlerSettings:
    """
    Runtime settings for the crawl pipeline.
    """

    user_agent: str = DEFAULT_USER_AGENT
    fetch_backend: str = "requests"
    navigation_timeout_seconds: float = 30.0
    robots_timeout_seconds: float = 10.0
    government_delay_ms: int = 3000
    regular_delay_ms: int = 1000
    government_domains: tuple[str, ...] = DEFAULT_GOVERNMENT_DOMAINS
    max_retries: int = 2
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0
    default_max_depth: int = 3
    default_max_pages: int = 50
    extra_extractors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def agent_token(self) -> str:
        """
        Product token of the user agent, lower-cased (e.g. `civicspherebot`).
        """

        return self.user_agent.split("/", 1)[0].strip().lower()


@dataclass(frozen=True)
class SummarizerSettings:
    """
    Runtime settings for AI summarization.
    """

    enabled: bool = True
    api_key: str | None = None
    base_url: str | None = DEFAULT_SUMMARIZER_BASE_URL
    model: str = DEFAULT_SUMMARIZER_MODEL
    timeout_seconds: float = 20.0
    max_requests_per_minute: int = 25
    max_prompt_chars: int = 2000
    max_tokens: int = 256


@lru_cache(maxsize=1)
def get_crawler_settings() -> CrawlerSettings:
    """
    Return cached crawler settings from environment variables.
    """

    fetch_backend = _get_str_env("CRAWLER_FETCH_BACKEND", "requests").lower()
    if fetch_backend not in FETCH_BACKENDS:
        raise ValueError(
            f"CRAWLER_FETCH_BACKEND '{fetch_backend}' is not valid. "
            f"Allowed values: {list(FETCH_BACKENDS)}."
        )

    return CrawlerSettings(
        user_agent=_get_str_env("CRAWLER_USER_AGENT", DEFAULT_USER_AGENT),
        fetch_backend=fetch_backend,
        navigation_timeout_seconds=max(
            1.0,
            _get_float_env("CRAWLER_NAVIGATION_TIMEOUT_SECONDS", 30.0),
        ),
        robots_timeout_seconds=max(
            1.0,
            _get_float_env("CRAWLER_ROBOTS_TIMEOUT_SECONDS", 10.0),
        ),
        government_delay_ms=max(0, _get_int_env("CRAWLER_GOVERNMENT_DELAY_MS", 3000)),
        regular_delay_ms=max(0, _get_int_env("CRAWLER_REGULAR_DELAY_MS", 1000)),
        government_domains=_get_list_env("CRAWLER_GOVERNMENT_DOMAINS") or DEFAULT_GOVERNMENT_DOMAINS,
        max_retries=max(0, _get_int_env("CRAWLER_MAX_RETRIES", 2)),
        backoff_initial_seconds=max(
            0.1,
            _get_float_env("CRAWLER_BACKOFF_INITIAL_SECONDS", 0.5),
        ),
        backoff_multiplier=max(1.0, _get_float_env("CRAWLER_BACKOFF_MULTIPLIER", 2.0)),
        default_max_depth=max(0, _get_int_env("CRAWLER_DEFAULT_MAX_DEPTH", 3)),
        default_max_pages=max(1, _get_int_env("CRAWLER_DEFAULT_MAX_PAGES", 50)),
        extra_extractors=_get_list_env("CRAWLER_EXTRA_EXTRACTORS"),
    )


@lru_cache(maxsize=1)
def get_summarizer_settings() -> SummarizerSettings:
    """
    Return cached summarizer settings from environment variables.

    The API key falls back to GEMINI_API_KEY and then OPENAI_API_KEY. Without
    any key, AI summarization is disabled and the extractive fallback is used.
    """

    api_key = _get_optional_str_env("SUMMARIZER_API_KEY", "GEMINI_API_KEY", "OPENAI_API_KEY")
    base_url = _get_str_env("SUMMARIZER_BASE_URL", DEFAULT_SUMMARIZER_BASE_URL)
    return SummarizerSettings(
        enabled=_get_bool_env("SUMMARIZER_ENABLED", True) and api_key is not None,
        api_key=api_key,
        base_url=None if base_url.lower() == "default" else base_url,
        model=_get_str_env("SUMMARIZER_MODEL", DEFAULT_SUMMARIZER_MODEL),
        timeout_seconds=max(1.0, _get_float_env("SUMMARIZER_TIMEOUT_SECONDS", 20.0)),
        max_requests_per_minute=max(0, _get_int_env("SUMMARIZER_MAX_REQUESTS_PER_MINUTE", 25)),
        max_prompt_chars=max(200, _get_int_env("SUMMARIZER_MAX_PROMPT_CHARS", 2000)),
        max_tokens=max(16, _get_int_env("SUMMARIZER_MAX_TOKENS", 256)),
    )
