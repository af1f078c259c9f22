from __future__ import annotations

import itertools

from lxml import etree

from feed_filter.config import get_settings
from feed_filter.pipeline import handle_request


def _items(body: str):
    return etree.fromstring(body.encode("utf-8")).find("channel").findall("item")


def test_keyword_filter_returns_matching_items(serve_feed, rss_feed):
    serve_feed(rss_feed)

    result = handle_request(
        {"feedUrl": "https://example.com/feed.xml", "type": "keyword", "pattern": "AI"}
    )

    assert result.status_code == 200
    assert result.headers["Content-Type"] == "application/xml; charset=utf-8"
    items = _items(result.body)
    assert [item.findtext("title") for item in items] == ["AI News Today"]
    assert "Sports Update" not in result.body


def test_regex_filter_returns_matching_items(serve_feed):
    serve_feed(
        """<rss version="2.0"><channel>
          <title>Test Feed</title><description>Test Description</description>
          <item><title>[News] Breaking Story</title><description>Important news</description>
            <link>https://example.com/1</link></item>
          <item><title>Regular Article</title><description>Regular content</description>
            <link>https://example.com/2</link></item>
        </channel></rss>"""
    )

    result = handle_request(
        {"feedUrl": "https://example.com/feed.xml", "type": "regex", "pattern": r"^\[News\]"}
    )

    assert result.status_code == 200
    assert [item.findtext("title") for item in _items(result.body)] == ["[News] Breaking Story"]


def test_no_matches_returns_empty_channel(serve_feed, rss_feed):
    serve_feed(rss_feed)

    result = handle_request(
        {"feedUrl": "https://example.com/feed.xml", "type": "keyword", "pattern": "nothing"}
    )

    assert result.status_code == 200
    assert _items(result.body) == []
    assert "<title>Test Feed</title>" in result.body


def test_atom_feed_is_rendered_as_rss(serve_feed):
    serve_feed(
        """<feed xmlns="http://www.w3.org/2005/Atom">
          <title>Atom Feed</title><subtitle>Sub</subtitle>
          <link rel="alternate" href="https://example.com"/>
          <entry><title>Atom Item</title><summary>Atom Summary</summary>
            <link rel="alternate" href="https://example.com/item1"/>
            <id>urn:uuid:1</id><updated>2024-01-01T00:00:00Z</updated></entry>
        </feed>"""
    )

    result = handle_request(
        {"feedUrl": "https://example.com/feed.atom", "type": "keyword", "pattern": "atom"}
    )

    assert result.status_code == 200
    channel = etree.fromstring(result.body.encode("utf-8")).find("channel")
    assert channel.findtext("link") == "https://example.com"
    item = channel.find("item")
    assert item.findtext("link") == "https://example.com/item1"
    assert item.findtext("guid") == "urn:uuid:1"
    assert item.findtext("pubDate") == "2024-01-01T00:00:00Z"


def test_missing_feed_url_is_client_error(serve_feed):
    calls = serve_feed("")

    result = handle_request({"type": "keyword", "pattern": "test"})

    assert result.status_code == 400
    assert result.headers["Content-Type"] == "text/plain; charset=utf-8"
    assert "feedUrl" in result.body
    assert calls == []


def test_missing_params_is_client_error():
    result = handle_request(None)
    assert result.status_code == 400
    assert "feedUrl" in result.body


def test_non_http_feed_url_is_client_error():
    result = handle_request({"feedUrl": "ftp://example.com/feed", "type": "keyword", "pattern": "x"})
    assert result.status_code == 400
    assert "feedUrl" in result.body


def test_invalid_type_is_client_error():
    result = handle_request(
        {"feedUrl": "https://example.com/feed.xml", "type": "invalid", "pattern": "test"}
    )
    assert result.status_code == 400
    assert "keyword" in result.body


def test_blank_pattern_is_client_error():
    result = handle_request(
        {"feedUrl": "https://example.com/feed.xml", "type": "keyword", "pattern": "   "}
    )
    assert result.status_code == 400
    assert "pattern" in result.body


def test_invalid_regex_is_rejected_before_fetch(serve_feed, rss_feed):
    calls = serve_feed(rss_feed)

    result = handle_request(
        {"feedUrl": "https://example.com/feed.xml", "type": "regex", "pattern": "[invalid(("}
    )

    assert result.status_code == 400
    assert "regular expression" in result.body
    assert calls == []


def test_upstream_http_error_is_server_error(serve_feed):
    serve_feed("Not Found", status_code=404)

    result = handle_request(
        {"feedUrl": "https://example.com/feed.xml", "type": "keyword", "pattern": "AI"}
    )

    assert result.status_code == 500
    assert result.headers["Content-Type"] == "text/plain; charset=utf-8"
    assert "HTTP 404" in result.body


def test_unparseable_feed_is_server_error(serve_feed):
    serve_feed("Invalid XML")

    result = handle_request(
        {"feedUrl": "https://example.com/feed.xml", "type": "keyword", "pattern": "AI"}
    )

    assert result.status_code == 500
    assert "Failed to parse feed" in result.body


def _slow_clock(monkeypatch, step: float = 0.15) -> None:
    ticks = itertools.count(0.0, step)
    monkeypatch.setattr("feed_filter.filters.time.perf_counter", lambda: next(ticks))


def test_regex_budget_from_settings_aborts_request(serve_feed, rss_feed, monkeypatch):
    monkeypatch.setenv("FEED_FILTER_REGEX_TIMEOUT_MS", "100")
    get_settings.cache_clear()
    serve_feed(rss_feed)
    _slow_clock(monkeypatch)

    result = handle_request(
        {"feedUrl": "https://example.com/feed.xml", "type": "regex", "pattern": "(a+)+$"}
    )

    assert result.status_code == 500
    assert result.headers["Content-Type"] == "text/plain; charset=utf-8"
    assert "(a+)+$" in result.body


def test_regex_within_default_budget_succeeds(serve_feed, rss_feed, monkeypatch):
    serve_feed(rss_feed)
    _slow_clock(monkeypatch)

    result = handle_request(
        {"feedUrl": "https://example.com/feed.xml", "type": "regex", "pattern": "sports"}
    )

    assert result.status_code == 200
    assert [item.findtext("title") for item in _items(result.body)] == ["Sports Update"]


def test_unexpected_error_returns_generic_message(monkeypatch):
    def explode(*_, **__):
        raise RuntimeError("boom")

    monkeypatch.setattr("feed_filter.pipeline.fetch_and_normalize", explode)

    result = handle_request(
        {"feedUrl": "https://example.com/feed.xml", "type": "keyword", "pattern": "AI"}
    )

    assert result.status_code == 500
    assert result.body == "Internal Server Error"


def test_user_agent_comes_from_settings(serve_feed, rss_feed, monkeypatch):
    monkeypatch.setenv("FEED_FILTER_USER_AGENT", "CustomAgent/2.0")
    get_settings.cache_clear()
    calls = serve_feed(rss_feed)

    handle_request({"feedUrl": "https://example.com/feed.xml", "type": "keyword", "pattern": "AI"})

    assert calls[0]["headers"]["User-Agent"] == "CustomAgent/2.0"
