"""Filtering utilities for feed items."""

from __future__ import annotations

import logging
import re
import time
from typing import Iterable

from .config import get_settings
from .errors import RegexTimeoutError
from .models import FeedItem, FilterCriteria, KeywordFilter, RegexFilter


logger = logging.getLogger(__name__)


def match_keyword(text: str, pattern: str) -> bool:
    return pattern.casefold() in text.casefold()


def extract_item_text(item: FeedItem) -> str:
    return f"{item.title} {item.description}"


def apply_keyword_filter(items: Iterable[FeedItem], pattern: str) -> list[FeedItem]:
    return [
        item
        for item in items
        if match_keyword(item.title, pattern) or match_keyword(item.description, pattern)
    ]


def apply_regex_filter(
    items: Iterable[FeedItem],
    pattern: str,
    *,
    timeout_ms: int | None = None,
) -> list[FeedItem]:
    """Keep items whose title and description match ``pattern``, ignoring case.

    Every match is timed. CPython cannot interrupt a running ``re`` search, so
    the budget is checked once the search returns; the first item over budget
    aborts the whole run with :class:`RegexTimeoutError`.

    ``timeout_ms`` defaults to the configured ``FEED_FILTER_REGEX_TIMEOUT_MS``.
    """
    if timeout_ms is None:
        timeout_ms = get_settings().regex_timeout_ms
    regex = re.compile(pattern, re.IGNORECASE)
    budget = timeout_ms / 1000
    matched: list[FeedItem] = []
    for item in items:
        started = time.perf_counter()
        found = regex.search(extract_item_text(item)) is not None
        elapsed = time.perf_counter() - started
        if elapsed > budget:
            logger.warning(
                "Regex match exceeded %s ms (%.0f ms): pattern=%r", timeout_ms, elapsed * 1000, pattern
            )
            raise RegexTimeoutError(pattern)
        if found:
            matched.append(item)
    return matched


def apply_filter(
    items: Iterable[FeedItem],
    criteria: FilterCriteria,
    *,
    timeout_ms: int | None = None,
) -> list[FeedItem]:
    if isinstance(criteria, KeywordFilter):
        return apply_keyword_filter(items, criteria.pattern)
    if isinstance(criteria, RegexFilter):
        return apply_regex_filter(
            items,
            criteria.pattern,
            timeout_ms=timeout_ms,
        )
    raise TypeError(f"Unsupported filter criteria: {criteria!r}")


__all__ = [
    "apply_filter",
    "apply_keyword_filter",
    "apply_regex_filter",
    "extract_item_text",
    "match_keyword",
]
