"""HTTP client used to download feed documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import requests

from .errors import FeedFetchError


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FeedClient:
    user_agent: str = "RSS-Feed-Filter/1.0"
    timeout: float = 10.0

    def fetch(self, url: str) -> bytes:
        """Download ``url`` once and return the raw body; no retries."""
        headers = {"User-Agent": self.user_agent}
        try:
            response = requests.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Feed request failed: url=%s error=%s", url, exc)
            raise FeedFetchError(url, None, f"Failed to fetch feed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            logger.warning("Feed request returned HTTP %s: url=%s", response.status_code, url)
            raise FeedFetchError(
                url,
                response.status_code,
                f"Failed to fetch feed: HTTP {response.status_code}",
            )

        logger.debug("Fetched %s bytes from %s", len(response.content), url)
        return response.content


__all__ = ["FeedClient"]
