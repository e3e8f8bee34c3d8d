import logging
from typing import Iterable, List, Optional

from ..models.schemas import FeedItem
from ..utils.dates import sort_key_instant
from .mock_data import generate_regional_mock_items, is_regional_query

logger = logging.getLogger(__name__)


def matches_query(item: FeedItem, term: str) -> bool:
    """True if the lower-cased ``term`` appears in the title, description, content or source."""
    return (
        term in item.title.lower()
        or term in item.description.lower()
        or term in item.content.lower()
        or term in item.source.lower()
    )


def sort_by_recency(items: Iterable[FeedItem]) -> List[FeedItem]:
    # sorted() is stable with reverse=True, so equal timestamps keep input order.
    return sorted(items, key=lambda item: sort_key_instant(item.publish_date), reverse=True)


def filter_and_sort(pool: Iterable[FeedItem], query: Optional[str] = None) -> List[FeedItem]:
    """
    Filter the pool by ``query`` and order the result newest first.

    An empty query keeps every item.  When a regional query matches nothing,
    the regional sample catalog is returned instead of an empty list.
    """
    items = list(pool)
    term = (query or "").strip().lower()
    if not term:
        return sort_by_recency(items)

    filtered = [item for item in items if matches_query(item, term)]
    if not filtered and is_regional_query(term):
        logger.info(f"No items matched regional query '{query}', using regional sample stories")
        filtered = generate_regional_mock_items(query)

    return sort_by_recency(filtered)
