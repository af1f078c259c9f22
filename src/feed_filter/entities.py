"""Decoding of HTML character references found in feed text."""

from __future__ import annotations

import re

_NAMED_ENTITIES: dict[str, str] = {
    "lt": "<",
    "gt": ">",
    "amp": "&",
    "quot": '"',
    "apos": "'",
    "nbsp": "\u00a0",
    "copy": "©",
    "reg": "®",
    "trade": "™",
    "hellip": "…",
    "mdash": "—",
    "ndash": "–",
    "lsquo": "‘",
    "rsquo": "’",
    "ldquo": "“",
    "rdquo": "”",
    "laquo": "«",
    "raquo": "»",
    "middot": "·",
    "bull": "•",
    "deg": "°",
    "euro": "€",
    "pound": "£",
    "yen": "¥",
    "cent": "¢",
    "times": "×",
    "divide": "÷",
    "sect": "§",
    "para": "¶",
}

# Digit runs are bounded so overlong references never reach int() and pass through unchanged.
_REFERENCE_RE = re.compile(r"&(?:#[xX]([0-9a-fA-F]{1,6})|#([0-9]{1,7})|([A-Za-z][A-Za-z0-9]*));")


def _code_point_to_text(value: int) -> str | None:
    if value == 0 or value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
        return None
    return chr(value)


def _replace(match: re.Match[str]) -> str:
    hex_digits, dec_digits, name = match.groups()
    if name is not None:
        return _NAMED_ENTITIES.get(name, match.group(0))
    value = int(hex_digits, 16) if hex_digits is not None else int(dec_digits)
    decoded = _code_point_to_text(value)
    return decoded if decoded is not None else match.group(0)


def decode(text: str) -> str:
    """Resolve character references in a single pass.

    Each reference is substituted exactly once, so ``&amp;lt;`` becomes ``&lt;``
    rather than ``<``. Unknown names and invalid code points are left as written.
    """
    if "&" not in text:
        return text
    return _REFERENCE_RE.sub(_replace, text)


__all__ = ["decode"]
