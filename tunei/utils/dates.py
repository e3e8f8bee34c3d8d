"""
Publish-date helpers.

Feed items carry their publish date as an ISO-8601 string.  Feeds and API
clients are not always that tidy, so ``parse_instant`` also accepts the
RFC 822 dates RSS uses and treats naive timestamps as UTC.
"""
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

EPOCH_MIN = datetime.min.replace(tzinfo=timezone.utc)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_instant(value: Optional[str]) -> Optional[datetime]:
    """Parse ``value`` into an aware UTC datetime, or return None."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    parsed: Optional[datetime] = None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError, IndexError):
            return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        return None


def sort_key_instant(value: Optional[str]) -> datetime:
    """Sort key for publish dates; unparseable values sort as the oldest."""
    return parse_instant(value) or EPOCH_MIN
