"""Request handling: validate parameters, fetch, filter and render a feed."""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Mapping

from .config import Settings, get_settings
from .errors import (
    FeedFetchError,
    FeedParseError,
    FilterValidationError,
    RegexTimeoutError,
)
from .fetcher import FeedClient
from .filters import apply_filter
from .models import FilterResponse, FilterResult, build_criteria
from .normalizer import fetch_and_normalize
from .rss import render_rss


logger = logging.getLogger(__name__)

XML_CONTENT_TYPE = "application/xml; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
GENERIC_ERROR_MESSAGE = "Internal Server Error"

_FILTER_TYPES = ("keyword", "regex")

# Error kind -> HTTP status. Anything not listed is an unclassified failure.
_ERROR_STATUS: dict[type[Exception], int] = {
    FilterValidationError: 400,
    FeedFetchError: 500,
    FeedParseError: 500,
    RegexTimeoutError: 500,
}


@dataclass(frozen=True, slots=True)
class RequestParams:
    feed_url: str
    type: str
    pattern: str


def validate_params(params: Mapping[str, str | None] | None) -> RequestParams:
    if not params:
        raise FilterValidationError("", "Query parameters feedUrl, type and pattern are required")

    feed_url = params.get("feedUrl")
    if not feed_url or not feed_url.strip():
        raise FilterValidationError("", "The feedUrl parameter is required")
    if not feed_url.startswith(("http://", "https://")):
        raise FilterValidationError(feed_url, f"Invalid feedUrl, expected an http(s) URL: {feed_url}")

    filter_type = params.get("type")
    if filter_type not in _FILTER_TYPES:
        raise FilterValidationError(
            filter_type or "", 'The type parameter must be "keyword" or "regex"'
        )

    pattern = params.get("pattern")
    if not pattern or not pattern.strip():
        raise FilterValidationError("", "The pattern parameter is required")

    if filter_type == "regex":
        try:
            re.compile(pattern, re.IGNORECASE)
        except re.error as exc:
            raise FilterValidationError(
                pattern, f"Invalid regular expression pattern: {exc}"
            ) from exc

    return RequestParams(feed_url=feed_url, type=filter_type, pattern=pattern)


def run_filter(
    params: RequestParams,
    *,
    settings: Settings | None = None,
    client: FeedClient | None = None,
) -> FilterResult:
    settings = settings or get_settings()
    criteria = build_criteria(params.type, params.pattern)

    feed = fetch_and_normalize(params.feed_url, client=client, settings=settings)
    logger.info("Feed fetched: feed_url=%s items=%s", params.feed_url, len(feed.items))

    items = apply_filter(feed.items, criteria, timeout_ms=settings.regex_timeout_ms)
    return FilterResult(
        items=tuple(items),
        total_count=len(feed.items),
        criteria=criteria,
        title=feed.title,
        description=feed.description,
        link=feed.link,
    )


def handle_request(
    params: Mapping[str, str | None] | None,
    *,
    settings: Settings | None = None,
    client: FeedClient | None = None,
) -> FilterResponse:
    logger.info("Filter request received: params=%s", dict(params) if params else None)
    started = time.perf_counter()
    try:
        request = validate_params(params)
        result = run_filter(request, settings=settings, client=client)
        body = render_rss(result.title, result.description, result.link, result.items)
    except Exception as exc:  # noqa: BLE001
        return error_response(exc)

    logger.info(
        "Filter applied: type=%s pattern=%r total=%s matched=%s elapsed_ms=%.0f",
        result.criteria.type,
        result.criteria.pattern,
        result.total_count,
        result.match_count,
        (time.perf_counter() - started) * 1000,
    )
    return FilterResponse(200, {"Content-Type": XML_CONTENT_TYPE}, body)


def error_response(exc: Exception) -> FilterResponse:
    status = _status_for(exc)
    if status is None:
        logger.exception("Unhandled error while filtering feed")
        return FilterResponse(500, {"Content-Type": TEXT_CONTENT_TYPE}, GENERIC_ERROR_MESSAGE)

    if status >= 500:
        logger.error("Filter request failed (%s): %s", type(exc).__name__, exc)
    else:
        logger.info("Rejected filter request: %s", exc)
    return FilterResponse(status, {"Content-Type": TEXT_CONTENT_TYPE}, str(exc))


def _status_for(exc: Exception) -> int | None:
    for error_type, status in _ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status
    return None


__all__ = ["RequestParams", "error_response", "handle_request", "run_filter", "validate_params"]
