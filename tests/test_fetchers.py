"""
tests/test_fetchers.py

Requests-backed page fetcher: retry policy, content-type guard and handle
lifecycle. The Playwright backend is only checked for its factory wiring.
"""

from __future__ import annotations

import dataclasses

import pytest
import requests

from civicsphere.crawling.errors import FetchFailure
from civicsphere.crawling.fetchers import (
    PlaywrightPageFetcher,
    RequestsPageFetcher,
    build_page_fetcher,
)

URL = "https://example.org/news/1"
HTML = "<html><body><h1>Water supply notice</h1></body></html>"


def _fetcher(settings, session) -> tuple[RequestsPageFetcher, list[float]]:
    sleeps: list[float] = []
    return RequestsPageFetcher(settings=settings, session=session, sleep=sleeps.append), sleeps


def test_retryable_status_is_retried_with_backoff(crawler_settings, make_session, make_response) -> None:
    session = make_session({URL: [make_response(status_code=503), HTML]})
    fetcher, sleeps = _fetcher(crawler_settings, session)

    handle = fetcher.open_page(URL)

    assert handle.page.soup.h1.get_text() == "Water supply notice"
    assert session.calls == [URL, URL]
    assert sleeps == [0.1]


def test_connection_error_is_retried(crawler_settings, make_session) -> None:
    session = make_session({URL: [requests.ConnectionError("reset"), HTML]})
    fetcher, _ = _fetcher(crawler_settings, session)

    assert fetcher.open_page(URL).page.url == URL


def test_non_retryable_status_fails_immediately(crawler_settings, make_session) -> None:
    session = make_session()
    fetcher, sleeps = _fetcher(crawler_settings, session)

    with pytest.raises(FetchFailure) as excinfo:
        fetcher.open_page(URL)

    assert excinfo.value.url == URL
    assert session.calls == [URL]
    assert sleeps == []


def test_exhausted_retries_raise_fetch_failure(crawler_settings, make_session, make_response) -> None:
    session = make_session({URL: [make_response(status_code=503), make_response(status_code=502)]})
    fetcher, _ = _fetcher(crawler_settings, session)

    with pytest.raises(FetchFailure, match="retries exhausted"):
        fetcher.open_page(URL)

    assert len(session.calls) == 2


def test_rate_limited_response_is_not_retried(crawler_settings, make_session, make_response) -> None:
    gov_url = "https://x.gov/news/1"
    session = make_session({gov_url: [make_response(status_code=429, headers={"Retry-After": "30"})] * 3})
    fetcher, sleeps = _fetcher(crawler_settings, session)
    fetcher.apply_politeness_delay(3000)

    with pytest.raises(FetchFailure, match="rate limited"):
        fetcher.open_page(gov_url)

    assert session.calls == [gov_url]
    assert sleeps == []


def test_retry_wait_never_undercuts_politeness_delay(crawler_settings, make_session, make_response) -> None:
    settings = dataclasses.replace(crawler_settings, max_retries=2)
    session = make_session({URL: [make_response(status_code=503), make_response(status_code=502), HTML]})
    fetcher, sleeps = _fetcher(settings, session)
    fetcher.apply_politeness_delay(3000)

    fetcher.open_page(URL)

    assert len(session.calls) == 3
    assert sleeps == [3.0, 3.0]


def test_retry_after_header_extends_backoff(crawler_settings, make_session, make_response) -> None:
    session = make_session({URL: [make_response(status_code=503, headers={"Retry-After": "5"}), HTML]})
    fetcher, sleeps = _fetcher(crawler_settings, session)

    fetcher.open_page(URL)

    assert sleeps == [5.0]


def test_non_html_response_is_rejected_and_closed(crawler_settings, make_session, make_response) -> None:
    response = make_response(text="%PDF-1.7", headers={"Content-Type": "application/pdf"})
    fetcher, _ = _fetcher(crawler_settings, make_session({URL: response}))

    with pytest.raises(FetchFailure, match="non-HTML"):
        fetcher.open_page(URL)

    assert response.closed


def test_closing_handle_releases_response(crawler_settings, make_session, make_response) -> None:
    response = make_response(text=HTML)
    fetcher, _ = _fetcher(crawler_settings, make_session({URL: response}))

    handle = fetcher.open_page(URL)
    assert not response.closed

    handle.close()
    handle.close()

    assert handle.closed
    assert response.closed


def test_stop_closes_session_and_headers_carry_user_agent(crawler_settings, make_session) -> None:
    session = make_session()
    fetcher, _ = _fetcher(crawler_settings, session)

    with fetcher:
        assert fetcher.request_headers["User-Agent"] == crawler_settings.user_agent

    assert session.closed


def test_factory_builds_configured_backend(crawler_settings) -> None:
    assert isinstance(build_page_fetcher(crawler_settings), RequestsPageFetcher)

    browser_settings = dataclasses.replace(crawler_settings, fetch_backend="playwright")
    assert isinstance(build_page_fetcher(browser_settings), PlaywrightPageFetcher)


def test_factory_rejects_unknown_backend(crawler_settings) -> None:
    with pytest.raises(ValueError, match="Unknown fetch backend"):
        build_page_fetcher(dataclasses.replace(crawler_settings, fetch_backend="selenium"))
