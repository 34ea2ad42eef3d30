"""
tests/test_config.py

Environment-driven settings for the crawler and summarizer.
"""

from __future__ import annotations

import os

import pytest

from civicsphere.config import (
    DEFAULT_USER_AGENT,
    CrawlerSettings,
    get_crawler_settings,
    get_summarizer_settings,
    load_env_files,
)

SUMMARIZER_KEYS = ("SUMMARIZER_API_KEY", "GEMINI_API_KEY", "OPENAI_API_KEY", "SUMMARIZER_ENABLED")


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    for name in SUMMARIZER_KEYS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("CRAWLER_FETCH_BACKEND", raising=False)
    get_crawler_settings.cache_clear()
    get_summarizer_settings.cache_clear()
    yield
    get_crawler_settings.cache_clear()
    get_summarizer_settings.cache_clear()


def test_crawler_defaults() -> None:
    settings = get_crawler_settings()

    assert settings.user_agent == DEFAULT_USER_AGENT
    assert settings.agent_token == "civicspherebot"
    assert settings.fetch_backend == "requests"
    assert settings.government_delay_ms == 3000
    assert settings.regular_delay_ms == 1000


def test_crawler_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("CRAWLER_FETCH_BACKEND", "Playwright")
    monkeypatch.setenv("CRAWLER_REGULAR_DELAY_MS", "-5")
    monkeypatch.setenv("CRAWLER_GOVERNMENT_DOMAINS", ".gov.in, .nic.in")
    monkeypatch.setenv("CRAWLER_EXTRA_EXTRACTORS", "pkg.module:PortalExtractor")
    monkeypatch.setenv("CRAWLER_MAX_RETRIES", "not-a-number")

    settings = get_crawler_settings()

    assert settings.fetch_backend == "playwright"
    assert settings.regular_delay_ms == 0
    assert settings.government_domains == (".gov.in", ".nic.in")
    assert settings.extra_extractors == ("pkg.module:PortalExtractor",)
    assert settings.max_retries == 2


def test_invalid_fetch_backend_is_rejected(monkeypatch) -> None:
    monkeypatch.setenv("CRAWLER_FETCH_BACKEND", "selenium")

    with pytest.raises(ValueError, match="CRAWLER_FETCH_BACKEND"):
        get_crawler_settings()


def test_summarizer_is_disabled_without_key() -> None:
    settings = get_summarizer_settings()

    assert settings.enabled is False
    assert settings.api_key is None


def test_summarizer_key_fallback_order(monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "openai-key")
    monkeypatch.setenv("GEMINI_API_KEY", "gemini-key")

    settings = get_summarizer_settings()

    assert settings.enabled is True
    assert settings.api_key == "gemini-key"


def test_summarizer_default_base_url_keyword(monkeypatch) -> None:
    monkeypatch.setenv("SUMMARIZER_API_KEY", "key")
    monkeypatch.setenv("SUMMARIZER_BASE_URL", "default")
    monkeypatch.setenv("SUMMARIZER_ENABLED", "false")

    settings = get_summarizer_settings()

    assert settings.base_url is None
    assert settings.enabled is False


def test_agent_token_is_first_product_token() -> None:
    assert CrawlerSettings(user_agent="MyBot/2.0 (+https://example.org)").agent_token == "mybot"


def test_env_files_never_override_process_environment(tmp_path, monkeypatch) -> None:
    (tmp_path / ".env").write_text(
        "# crawler overrides\nexport CIVIC_TEST_A='from-file'\nCIVIC_TEST_B=from-file\nbroken line\n",
        encoding="utf-8",
    )
    monkeypatch.delenv("CIVIC_TEST_A", raising=False)
    monkeypatch.setenv("CIVIC_TEST_B", "from-process")

    load_env_files(tmp_path)

    assert os.environ["CIVIC_TEST_A"] == "from-file"
    assert os.environ["CIVIC_TEST_B"] == "from-process"
    monkeypatch.delenv("CIVIC_TEST_A")
