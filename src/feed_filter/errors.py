"""Error types raised while fetching, parsing and filtering feeds."""

from __future__ import annotations


class FeedFilterError(Exception):
    """Base class for every failure the request handler knows how to report."""


class FilterValidationError(FeedFilterError):
    def __init__(self, pattern: str, message: str | None = None) -> None:
        self.pattern = pattern
        super().__init__(message or f"Invalid filter pattern: {pattern}")


class FeedFetchError(FeedFilterError):
    def __init__(self, url: str, status_code: int | None = None, message: str | None = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message or f"Failed to fetch feed: {url}")


class FeedParseError(FeedFilterError):
    def __init__(self, content: str, message: str | None = None) -> None:
        # Only a short prefix of the untrusted document is ever kept here.
        self.content = content
        super().__init__(message or "Failed to parse feed")


class RegexTimeoutError(FeedFilterError):
    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        super().__init__(f"Regular expression is too complex: {pattern}")


__all__ = [
    "FeedFetchError",
    "FeedFilterError",
    "FeedParseError",
    "FilterValidationError",
    "RegexTimeoutError",
]
