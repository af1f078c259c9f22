"""RSS feed generation utilities."""

from __future__ import annotations

from typing import Iterable
from xml.sax.saxutils import escape

from .models import FeedItem

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_xml(text: str) -> str:
    return escape(text, _XML_ENTITIES)


def render_rss(
    title: str,
    description: str,
    link: str | None,
    items: Iterable[FeedItem],
) -> str:
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<rss version="2.0">',
        "  <channel>",
        _element("title", title, indent=4),
        _element("description", description, indent=4),
    ]
    if link:
        lines.append(_element("link", link, indent=4))

    for item in items:
        lines.append("    <item>")
        lines.append(_element("title", item.title))
        lines.append(_element("description", item.description))
        lines.append(_element("link", item.link))
        if item.pub_date:
            lines.append(_element("pubDate", item.pub_date))
        if item.author:
            lines.append(_element("author", item.author))
        if item.guid:
            lines.append(_element("guid", item.guid))
        lines.append("    </item>")

    lines.append("  </channel>")
    lines.append("</rss>")
    return "\n".join(lines)


def _element(tag: str, text: str, *, indent: int = 6) -> str:
    return f"{' ' * indent}<{tag}>{escape_xml(text)}</{tag}>"


__all__ = ["escape_xml", "render_rss"]
