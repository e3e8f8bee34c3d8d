"""
Feed retrieval.

Each configured feed URL is fetched through an ordered chain of
``FeedTransport`` strategies (CORS relays, optionally a direct request).
The first transport that returns a 2xx response wins; any error, timeout or
non-2xx status moves on to the next one.  Feeds are fetched concurrently
and their items flattened into a single pool.  The pool is never empty:
feeds with no working transport contribute part of the fallback catalog,
and the full catalog replaces the pool when no feed could be reached
or nothing was fetched.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Sequence
from urllib.parse import quote

import aiohttp

from ..core.config import Settings, settings as default_settings
from ..core.notifications import LoggingNotifier, Notifier
from ..models.schemas import FeedItem, NoticeLevel
from .feed_normalizer import FeedParseError, SentimentClassifier, parse_feed
from .mock_data import fallback_subset, generate_mock_items, generate_regional_mock_items

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class FeedTransportError(Exception):
    """A single transport could not deliver the feed document."""


class FeedTransport(ABC):
    """One way of retrieving a feed document."""

    name: str = "transport"

    @abstractmethod
    async def fetch(self, session: aiohttp.ClientSession, feed_url: str, timeout: float) -> str:
        """Return the raw feed document or raise ``FeedTransportError``."""

    async def _get_text(self, session: aiohttp.ClientSession, url: str, timeout: float) -> str:
        try:
            async with session.get(
                url,
                headers={"User-Agent": BROWSER_USER_AGENT},
                timeout=aiohttp.ClientTimeout(total=timeout),
                allow_redirects=True,
            ) as resp:
                if resp.status < 200 or resp.status >= 300:
                    raise FeedTransportError(f"HTTP {resp.status}")
                return await resp.text(errors="replace")
        except asyncio.TimeoutError as e:
            raise FeedTransportError(f"timed out after {timeout}s") from e
        except aiohttp.ClientError as e:
            raise FeedTransportError(str(e) or e.__class__.__name__) from e


class DirectTransport(FeedTransport):
    name = "direct"

    async def fetch(self, session: aiohttp.ClientSession, feed_url: str, timeout: float) -> str:
        return await self._get_text(session, feed_url, timeout)


class RelayTransport(FeedTransport):
    """Fetch through a CORS relay that takes the encoded target URL as a suffix."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        self.name = prefix

    def relay_url(self, feed_url: str) -> str:
        return f"{self.prefix}{quote(feed_url, safe='')}"

    async def fetch(self, session: aiohttp.ClientSession, feed_url: str, timeout: float) -> str:
        return await self._get_text(session, self.relay_url(feed_url), timeout)


def build_transports(settings: Optional[Settings] = None) -> List[FeedTransport]:
    settings = settings or default_settings
    transports: List[FeedTransport] = []
    if settings.FEED_DIRECT_FETCH:
        transports.append(DirectTransport())
    transports.extend(RelayTransport(prefix) for prefix in settings.CORS_PROXIES)
    return transports


@dataclass
class FeedSettings:
    feeds: List[str] = field(default_factory=list)
    regional_feeds: List[str] = field(default_factory=list)
    enabled: bool = True
    regional_enabled: bool = False
    timeout_seconds: float = 10.0

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "FeedSettings":
        settings = settings or default_settings
        return cls(
            feeds=list(settings.RSS_FEEDS),
            regional_feeds=list(settings.REGIONAL_RSS_FEEDS),
            enabled=settings.RSS_FEEDS_ENABLED,
            regional_enabled=settings.REGIONAL_FEEDS_ENABLED,
            timeout_seconds=settings.FEED_TIMEOUT_SECONDS,
        )

    @property
    def urls(self) -> List[str]:
        urls = list(self.feeds)
        if self.regional_enabled:
            urls.extend(self.regional_feeds)
        return urls


class FeedFetcher:
    def __init__(
        self,
        feed_settings: Optional[FeedSettings] = None,
        transports: Optional[Sequence[FeedTransport]] = None,
        classifier: Optional[SentimentClassifier] = None,
    ):
        self.feed_settings = feed_settings or FeedSettings.from_settings()
        self.transports: List[FeedTransport] = list(transports) if transports is not None else build_transports()
        self.classifier = classifier
        self.session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession()
        return self.session

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()

    async def _fetch_document(self, session: aiohttp.ClientSession, feed_url: str) -> Optional[str]:
        """Try each transport in order; return the first document or None."""
        for transport in self.transports:
            try:
                document = await transport.fetch(session, feed_url, self.feed_settings.timeout_seconds)
                return document
            except FeedTransportError as e:
                logger.warning(f"Error with proxy {transport.name} for feed {feed_url}: {e}")
            except Exception as e:
                logger.warning(f"Unexpected error with proxy {transport.name} for feed {feed_url}: {e!r}")
        return None

    async def fetch_feed(self, session: aiohttp.ClientSession, feed_url: str) -> Optional[List[FeedItem]]:
        """
        Fetch and normalize one feed.

        Returns None when every transport failed, and an empty list when the
        document could not be parsed.
        """
        document = await self._fetch_document(session, feed_url)
        if document is None:
            logger.error(f"All proxies failed for feed: {feed_url}, using mock data instead")
            return None
        try:
            items = parse_feed(document, self.classifier)
        except FeedParseError as e:
            logger.warning(f"Failed to parse feed {feed_url}: {e}")
            return []
        logger.info(f"Successfully fetched {len(items)} items from {feed_url}")
        return items

    async def fetch_all(self, notifier: Optional[Notifier] = None) -> List[FeedItem]:
        """
        Fetch every configured feed concurrently and return the flattened pool.

        A feed whose transports all failed, or whose fetch raised,
        contributes a slice of the sample catalog.  When no feed could be
        reached at all, or nothing was fetched, the whole sample catalog is
        returned instead.  Never raises and never returns an empty list.
        """
        notifier = notifier or LoggingNotifier()
        urls = self.feed_settings.urls
        if not self.feed_settings.enabled or not urls:
            logger.error("RSS feeds are not enabled or no feeds are configured")
            notifier.notify(NoticeLevel.WARNING, "No news feeds are configured. Showing sample stories instead.")
            return generate_mock_items()

        try:
            mock_items = generate_mock_items()
            session = await self._get_session()
            gathered = await asyncio.gather(
                *[self.fetch_feed(session, url) for url in urls], return_exceptions=True
            )
            results: List[Optional[List[FeedItem]]] = []
            for url, result in zip(urls, gathered):
                if isinstance(result, BaseException):
                    logger.error(f"Unexpected error fetching feed {url}: {result!r}")
                    result = None
                results.append(result)
            exhausted = all(feed_items is None for feed_items in results)
            pool = [
                item
                for feed_items in results
                for item in (fallback_subset(mock_items) if feed_items is None else feed_items)
            ]
            if exhausted or not pool:
                logger.warning("No RSS items could be fetched, using all mock data")
                notifier.notify(NoticeLevel.WARNING, "No live news could be loaded. Showing sample stories instead.")
                return mock_items + generate_regional_mock_items()
            return pool
        except Exception as e:
            logger.error(f"Error fetching RSS feeds: {e}")
            notifier.notify(NoticeLevel.ERROR, "Failed to fetch news sources. Using sample data instead.")
            return generate_mock_items()
