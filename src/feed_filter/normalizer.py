"""Parse RSS 2.0 and Atom documents into a single normalized feed shape."""

from __future__ import annotations

import logging
import re
from typing import Callable

from lxml import etree

from .config import Settings, get_settings
from .entities import decode
from .errors import FeedParseError
from .fetcher import FeedClient
from .models import FeedItem, NormalizedFeed


logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]*>")

# Shared by every request; lxml parsers hold no per-document state once parsing returns.
_XML_PARSER = etree.XMLParser(
    ns_clean=True,
    recover=False,
    collect_ids=False,
    resolve_entities=False,
    no_network=True,
    remove_comments=True,
    remove_pis=True,
)


def fetch_and_normalize(
    url: str,
    *,
    client: FeedClient | None = None,
    settings: Settings | None = None,
) -> NormalizedFeed:
    settings = settings or get_settings()
    client = client or FeedClient(
        user_agent=settings.user_agent,
        timeout=settings.fetch_timeout_seconds,
    )
    content = client.fetch(url)
    feed = parse_feed(content, url, excerpt_chars=settings.parse_excerpt_chars)
    logger.info("Normalized feed %s: title=%r items=%s", url, feed.title, len(feed.items))
    return feed


def parse_feed(content: bytes | str, source_url: str, *, excerpt_chars: int = 200) -> NormalizedFeed:
    """Parse a raw feed document.

    Raises :class:`FeedParseError` when the bytes are not well-formed XML or the
    root element is neither ``<rss>`` nor ``<feed>``. The error keeps at most
    ``excerpt_chars`` characters of the document.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    excerpt = _excerpt(content, excerpt_chars)

    try:
        root = etree.fromstring(content, parser=_XML_PARSER)
    except etree.XMLSyntaxError as exc:
        raise FeedParseError(excerpt, f"Failed to parse feed: {exc}") from exc

    normalize = _DIALECTS.get(_local_name(root))
    if normalize is None:
        raise FeedParseError(excerpt, "Failed to parse feed: no recognizable feed root")
    return normalize(root, source_url, excerpt)


def strip_tags(text: str) -> str:
    return _TAG_RE.sub("", text)


def clean_text(text: str) -> str:
    # Markup goes first so that references inside removed tags never surface.
    return decode(strip_tags(text))


def _normalize_rss(root: etree._Element, source_url: str, excerpt: str) -> NormalizedFeed:
    channels = _children(root, "channel")
    if not channels:
        raise FeedParseError(excerpt, "Failed to parse feed: RSS channel element not found")
    channel = channels[0]

    return NormalizedFeed(
        title=decode(_child_text(channel, "title") or ""),
        description=decode(_child_text(channel, "description") or ""),
        source_url=source_url,
        link=_child_text(channel, "link"),
        last_build_date=_child_text(channel, "lastBuildDate"),
        items=tuple(_normalize_rss_item(item) for item in _children(channel, "item")),
    )


def _normalize_rss_item(item: etree._Element) -> FeedItem:
    author = _child_text(item, "author")
    categories = [decode(_text(category)) for category in _children(item, "category")]
    return FeedItem(
        title=clean_text(_child_text(item, "title") or ""),
        description=clean_text(_child_text(item, "description") or ""),
        link=_child_text(item, "link") or "",
        pub_date=_child_text(item, "pubDate"),
        author=decode(author) if author else None,
        categories=_categories(categories),
        guid=_child_text(item, "guid"),
    )


def _normalize_atom(root: etree._Element, source_url: str, excerpt: str) -> NormalizedFeed:
    return NormalizedFeed(
        title=decode(_child_text(root, "title") or ""),
        description=decode(_child_text(root, "subtitle") or ""),
        source_url=source_url,
        link=_alternate_href(root),
        last_build_date=_child_text(root, "updated"),
        items=tuple(_normalize_atom_entry(entry) for entry in _children(root, "entry")),
    )


def _normalize_atom_entry(entry: etree._Element) -> FeedItem:
    author: str | None = None
    authors = _children(entry, "author")
    if authors:
        name = _child_text(authors[0], "name")
        author = decode(name) if name else None

    categories = [
        decode(category.get("term") or _text(category)) for category in _children(entry, "category")
    ]
    return FeedItem(
        title=clean_text(_child_text(entry, "title") or ""),
        description=clean_text(_child_text(entry, "summary") or ""),
        link=_alternate_href(entry) or "",
        pub_date=_child_text(entry, "updated"),
        author=author,
        categories=_categories(categories),
        guid=_child_text(entry, "id"),
    )


_DIALECTS: dict[str, Callable[[etree._Element, str, str], NormalizedFeed]] = {
    "rss": _normalize_rss,
    "feed": _normalize_atom,
}


def _alternate_href(parent: etree._Element) -> str | None:
    # Only an explicit rel="alternate" counts; the first one wins even if its href is empty.
    for link in _children(parent, "link"):
        if link.get("rel") == "alternate":
            href = link.get("href")
            return href.strip() if href is not None else None
    return None


def _categories(values: list[str]) -> tuple[str, ...] | None:
    kept = tuple(value for value in values if value)
    return kept or None


def _local_name(element: etree._Element) -> str:
    return etree.QName(element).localname


def _children(parent: etree._Element, name: str) -> list[etree._Element]:
    """Child elements called ``name`` in the parent's own namespace.

    Always a list, whether the source has zero, one or many such elements.
    Extension elements from other namespaces (``atom:link`` inside an RSS
    channel, ``dc:*``, ``media:*``) never match.
    """
    namespace = etree.QName(parent).namespace
    matched = []
    for child in parent:
        if not isinstance(child.tag, str):
            continue
        qname = etree.QName(child)
        if qname.localname == name and qname.namespace == namespace:
            matched.append(child)
    return matched


def _text(element: etree._Element) -> str:
    return "".join(element.itertext()).strip()


def _child_text(parent: etree._Element, name: str) -> str | None:
    children = _children(parent, name)
    if not children:
        return None
    return _text(children[0]) or None


def _excerpt(content: bytes, limit: int) -> str:
    return content[: limit * 4].decode("utf-8", errors="replace")[:limit]


__all__ = ["clean_text", "fetch_and_normalize", "parse_feed", "strip_tags"]
