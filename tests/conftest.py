"""Pytest fixtures for the feed filter project."""

from __future__ import annotations

from typing import Iterator

import pytest

from feed_filter.config import get_settings


@pytest.fixture(autouse=True)
def configure_environment(monkeypatch) -> Iterator[None]:
    env_vars = {
        "FEED_FILTER_USER_AGENT": "RSS-Feed-Filter/1.0",
        "FEED_FILTER_FETCH_TIMEOUT_SECONDS": "5",
        "FEED_FILTER_REGEX_TIMEOUT_MS": "2000",
        "FEED_FILTER_PARSE_EXCERPT_CHARS": "200",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class DummyResponse:
    def __init__(self, body: str | bytes, status_code: int = 200) -> None:
        self.content = body.encode("utf-8") if isinstance(body, str) else body
        self.status_code = status_code


@pytest.fixture
def serve_feed(monkeypatch):
    """Answer every upstream GET with the given body and record the calls."""
    calls: list[dict] = []

    def install(body: str | bytes, status_code: int = 200) -> list[dict]:
        def fake_get(url, headers=None, timeout=None):
            calls.append({"url": url, "headers": headers, "timeout": timeout})
            return DummyResponse(body, status_code)

        monkeypatch.setattr("feed_filter.fetcher.requests.get", fake_get)
        return calls

    return install


RSS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Test Feed</title>
    <description>Test Description</description>
    <link>https://example.com</link>
    <item>
      <title>AI News Today</title>
      <description>Latest AI developments</description>
      <link>https://example.com/1</link>
      <pubDate>Mon, 01 Jan 2024 00:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Sports Update</title>
      <description>Weekend sports results</description>
      <link>https://example.com/2</link>
    </item>
  </channel>
</rss>"""


@pytest.fixture
def rss_feed() -> str:
    return RSS_FEED
