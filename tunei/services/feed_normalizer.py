"""
Feed document normalization.

``parse_feed`` turns one RSS/Atom document into ``FeedItem`` records using
feedparser.  Every entry of the document is kept, in document order; the
channel title and link are copied onto each entry as its source.
"""
import calendar
import io
import logging
import random
import re
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from html import unescape
from typing import Any, List, Optional, Sequence, Union

import feedparser

from ..models.schemas import FeedItem, Sentiment
from ..utils.dates import utc_now_iso

logger = logging.getLogger(__name__)

_HTML_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_SINGLE_SPACE_RE = re.compile(r"\s")
_IMG_SRC_RE = re.compile(r"<img[^>]+src=[\"']([^\"'>]+)[\"']", re.IGNORECASE)


class FeedParseError(Exception):
    """The document could not be read as a feed."""


class SentimentClassifier(ABC):
    """Assigns a sentiment label to a feed entry."""

    @abstractmethod
    def classify(self, title: str, description: str) -> Sentiment:
        ...


class RandomSentimentClassifier(SentimentClassifier):
    """
    Placeholder classifier that draws a label uniformly at random.

    It stands in until a real sentiment model is plugged in; pass a seeded
    ``random.Random`` for reproducible labels.
    """

    LABELS: Sequence[Sentiment] = (Sentiment.POSITIVE, Sentiment.NEUTRAL, Sentiment.NEGATIVE)

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def classify(self, title: str, description: str) -> Sentiment:
        return self.rng.choice(self.LABELS)


def strip_html(value: str) -> str:
    text = _HTML_TAG_RE.sub(" ", value or "")
    text = unescape(text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def extract_image_url(content: str) -> Optional[str]:
    """Return the ``src`` of the first ``<img>`` tag in ``content``."""
    match = _IMG_SRC_RE.search(content or "")
    if not match:
        return None
    return match.group(1).strip() or None


def make_item_id(source: str, index: int) -> str:
    return f"{_SINGLE_SPACE_RE.sub('-', source.lower())}-{index}"


def _struct_time_to_iso(value: Any) -> Optional[str]:
    if value is None:
        return None
    try:
        timestamp = calendar.timegm(value)
        return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()
    except (TypeError, ValueError, OverflowError):
        return None


def _encoded_content(entry: Any) -> str:
    for block in entry.get("content") or []:
        value = block.get("value") if isinstance(block, dict) else getattr(block, "value", None)
        if value:
            return value
    return ""


def _entry_description(entry: Any, encoded: str) -> str:
    # feedparser fills ``summary`` from content:encoded when an entry has no
    # description element of its own.
    summary = entry.get("summary", "") or entry.get("description", "") or ""
    if encoded and summary == encoded:
        return ""
    return summary


def parse_feed(
    document: Union[str, bytes],
    classifier: Optional[SentimentClassifier] = None,
) -> List[FeedItem]:
    """
    Parse a feed document into normalized items.

    :param document: Raw RSS/Atom XML as text or bytes
    :param classifier: Sentiment classifier; defaults to the random placeholder
    :raises FeedParseError: If the document holds neither a channel nor entries
    """
    classifier = classifier or RandomSentimentClassifier()
    data = document.encode("utf-8") if isinstance(document, str) else document
    # A stream keeps feedparser from treating the payload as a URL or path.
    parsed = feedparser.parse(io.BytesIO(data))

    channel = parsed.get("feed") or {}
    entries = parsed.get("entries") or []
    if parsed.get("bozo") and not entries and not channel:
        raise FeedParseError(f"Malformed feed document: {parsed.get('bozo_exception')}")

    source = channel.get("title", "") or ""
    source_url = channel.get("link", "") or ""
    fetched_at = utc_now_iso()

    items: List[FeedItem] = []
    for index, entry in enumerate(entries):
        title = entry.get("title", "") or ""
        encoded = _encoded_content(entry)
        raw_description = _entry_description(entry, encoded)
        description = strip_html(raw_description)
        content = encoded or raw_description
        publish_date = (
            _struct_time_to_iso(entry.get("published_parsed"))
            or _struct_time_to_iso(entry.get("updated_parsed"))
            or fetched_at
        )
        items.append(
            FeedItem(
                id=make_item_id(source, index),
                title=title,
                description=description,
                content=content,
                link=entry.get("link", "") or "",
                source=source,
                source_url=source_url,
                image_url=extract_image_url(content),
                publish_date=publish_date,
                sentiment=classifier.classify(title, description),
            )
        )
    logger.debug(f"Normalized {len(items)} entries from feed '{source}'")
    return items
