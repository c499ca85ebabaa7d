"""Feed validation for registration requests.

A URL is accepted when it uses http(s), can be fetched, and parses as an
RSS/Atom feed. The feed name is derived from the feed title.
"""

import logging
import re
from urllib.parse import urlparse

import feedparser
import httpx

from apps.rss2twtxt.core.errors import InvalidFeedError, MissingURLError

from .registry import Feed

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
MAX_CONTENT_LENGTH = 5 * 1024 * 1024  # 5MB

ALLOWED_SCHEMES = frozenset(["http", "https"])

USER_AGENT = "rss2twtxt/0.1 (+feed validator)"

_WHITESPACE = re.compile(r"\s+")
_UNSAFE_NAME_CHARS = re.compile(r"[^a-z0-9_-]")


def normalize_feed_name(title: str) -> str:
    """Turn a feed title into a file-safe feed name.

    Lowercases, replaces whitespace runs with ``_`` and drops every character
    outside ``[a-z0-9_-]``.
    """
    name = _WHITESPACE.sub("_", title.strip().lower())
    return _UNSAFE_NAME_CHARS.sub("", name).strip("_")


class FeedValidator:
    """Fetches and parses a candidate feed URL."""

    def __init__(
        self,
        timeout: float | None = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the validator.

        Args:
            timeout: Fetch timeout in seconds; None disables it
            transport: Optional httpx transport (used to stub the network)
        """
        self.timeout = timeout
        self._transport = transport

    def _fetch(self, url: str) -> bytes:
        with httpx.Client(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self._transport,
            headers={"User-Agent": USER_AGENT},
        ) as client, client.stream("GET", url) as response:
            response.raise_for_status()
            body = bytearray()
            for chunk in response.iter_bytes():
                body.extend(chunk)
                if len(body) > MAX_CONTENT_LENGTH:
                    logger.warning(f"Feed {url} exceeds {MAX_CONTENT_LENGTH} bytes")
                    raise InvalidFeedError(url, "content too large")
            return bytes(body)

    def validate(self, url: str | None) -> Feed:
        """Validate a feed URL.

        Returns:
            Feed with the derived name and the submitted URL

        Raises:
            MissingURLError: If no URL was supplied
            InvalidFeedError: If the URL did not yield a valid RSS/Atom feed
        """
        url = (url or "").strip()
        if not url:
            raise MissingURLError()

        parsed_url = urlparse(url)
        if parsed_url.scheme not in ALLOWED_SCHEMES or not parsed_url.hostname:
            raise InvalidFeedError(url, f"unsupported URL: {url}")

        try:
            content = self._fetch(url)
        except httpx.HTTPError as e:
            logger.warning(f"Failed to fetch feed {url}: {e}")
            raise InvalidFeedError(url, str(e)) from e

        parsed = feedparser.parse(content)
        if parsed.get("bozo") and not parsed.entries and not parsed.feed.get("title"):
            logger.warning(f"Unparseable feed {url}: {parsed.get('bozo_exception')}")
            raise InvalidFeedError(url, "not a feed")
        if not parsed.get("version") and not parsed.entries:
            raise InvalidFeedError(url, "not a feed")

        name = normalize_feed_name(parsed.feed.get("title", ""))
        if not name:
            name = normalize_feed_name(parsed_url.hostname.replace(".", "_"))
        if not name:
            raise InvalidFeedError(url, "could not derive a feed name")

        return Feed(name=name, url=url)
