"""Value objects passed between the fetch, filter and render stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union


@dataclass(frozen=True, slots=True)
class FeedItem:
    title: str
    description: str
    link: str
    pub_date: str | None = None
    author: str | None = None
    categories: tuple[str, ...] | None = None
    guid: str | None = None


@dataclass(frozen=True, slots=True)
class NormalizedFeed:
    """A feed reduced to the fields shared by RSS and Atom."""

    title: str
    description: str
    source_url: str
    link: str | None = None
    last_build_date: str | None = None
    items: tuple[FeedItem, ...] = ()


@dataclass(frozen=True, slots=True)
class KeywordFilter:
    pattern: str
    type: Literal["keyword"] = field(default="keyword", init=False)


@dataclass(frozen=True, slots=True)
class RegexFilter:
    pattern: str
    type: Literal["regex"] = field(default="regex", init=False)


FilterCriteria = Union[KeywordFilter, RegexFilter]


@dataclass(frozen=True, slots=True)
class FilterResult:
    items: tuple[FeedItem, ...]
    total_count: int
    criteria: FilterCriteria
    title: str
    description: str
    link: str | None = None

    @property
    def match_count(self) -> int:
        return len(self.items)


@dataclass(frozen=True, slots=True)
class FilterResponse:
    status_code: int
    headers: dict[str, str]
    body: str


def build_criteria(filter_type: str, pattern: str) -> FilterCriteria:
    if filter_type == "keyword":
        return KeywordFilter(pattern)
    if filter_type == "regex":
        return RegexFilter(pattern)
    raise ValueError(f"Unknown filter type: {filter_type}")


__all__ = [
    "FeedItem",
    "FilterCriteria",
    "FilterResponse",
    "FilterResult",
    "KeywordFilter",
    "NormalizedFeed",
    "RegexFilter",
    "build_criteria",
]
