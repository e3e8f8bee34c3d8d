"""
Application-level owner of the item pool and the latest search result.

Searches may overlap (two HTTP requests, or a user typing faster than the
feeds load).  Every fetch and search takes a number from a monotonically
increasing sequence; its result is published only if nothing newer has been
published already.  A stale result is still returned to its own caller,
flagged ``stale``, but never replaces shared state.  The pool and the
latest result are swapped as whole values under a lock.
"""
import asyncio
import logging
from dataclasses import dataclass, replace
from typing import List, Optional

from ..core.notifications import LoggingNotifier, Notifier
from ..models.schemas import AnalyticsData, FeedItem, SummaryResult
from .analytics_service import AnalyticsPalette, compute_analytics
from .feed_fetcher import FeedFetcher
from .relevance import filter_and_sort
from .summarizer import SummarizationAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchOutcome:
    request_id: int
    query: Optional[str]
    results: List[FeedItem]
    analytics: AnalyticsData
    summary: Optional[SummaryResult] = None
    stale: bool = False


class FeedController:
    def __init__(
        self,
        fetcher: Optional[FeedFetcher] = None,
        summarizer: Optional[SummarizationAdapter] = None,
        palette: Optional[AnalyticsPalette] = None,
    ):
        self.fetcher = fetcher or FeedFetcher()
        self.summarizer = summarizer or SummarizationAdapter()
        self.palette = palette
        self._lock = asyncio.Lock()
        self._pool: List[FeedItem] = []
        self._latest: Optional[SearchOutcome] = None
        self._next_fetch_id = 0
        self._published_fetch_id = 0
        self._next_search_id = 0
        self._published_search_id = 0

    @property
    def pool(self) -> List[FeedItem]:
        return list(self._pool)

    @property
    def latest(self) -> Optional[SearchOutcome]:
        return self._latest

    async def refresh(self, notifier: Optional[Notifier] = None) -> List[FeedItem]:
        """Fetch a fresh pool and publish it unless a newer fetch already has."""
        self._next_fetch_id += 1
        fetch_id = self._next_fetch_id
        items = await self.fetcher.fetch_all(notifier)
        async with self._lock:
            if fetch_id > self._published_fetch_id:
                self._published_fetch_id = fetch_id
                self._pool = list(items)
            else:
                logger.info(f"Discarding stale feed fetch #{fetch_id}")
        return list(items)

    async def ensure_pool(self, notifier: Optional[Notifier] = None) -> List[FeedItem]:
        if not self._pool:
            return await self.refresh(notifier)
        return self.pool

    async def search(
        self,
        query: Optional[str],
        notifier: Optional[Notifier] = None,
        summarize: bool = True,
    ) -> SearchOutcome:
        notifier = notifier or LoggingNotifier()
        self._next_search_id += 1
        request_id = self._next_search_id

        pool = await self.ensure_pool(notifier)
        results = filter_and_sort(pool, query)
        analytics = compute_analytics(results, self.palette)
        summary = await self.summarizer.summarize(results, notifier) if summarize else None
        outcome = SearchOutcome(
            request_id=request_id,
            query=query,
            results=results,
            analytics=analytics,
            summary=summary,
        )

        async with self._lock:
            if request_id > self._published_search_id:
                self._published_search_id = request_id
                self._latest = outcome
                return outcome
        logger.info(f"Search #{request_id} for '{query}' finished after a newer search; not publishing")
        return replace(outcome, stale=True)


# Global controller instance
feed_controller = FeedController()
