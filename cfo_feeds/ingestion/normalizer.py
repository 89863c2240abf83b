"""Turn raw feed items into articles: defaults, field fallbacks, truncation."""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional, Sequence

from .interfaces import RawFeedItem

PLACEHOLDER_TITLE = "No title"
SENTINEL_URL = "#"

# Ordered lookups over RawFeedItem.content; the first non-empty value wins.
DESCRIPTION_FIELDS: Sequence[str] = ("content_snippet", "content_encoded", "summary")
INLINE_HTML_FIELDS: Sequence[str] = ("content_encoded", "summary")


def first_field(item: RawFeedItem, fields: Sequence[str]) -> Optional[str]:
    for name in fields:
        value = item.content.get(name)
        if value:
            return value
    return None


def item_title(item: RawFeedItem) -> str:
    title = (item.title or "").strip()
    return title or PLACEHOLDER_TITLE


def item_url(item: RawFeedItem) -> str:
    return item.link or item.guid or SENTINEL_URL


def item_description(item: RawFeedItem, max_length: int) -> str:
    return (first_field(item, DESCRIPTION_FIELDS) or "")[:max_length]


def published_date(item: RawFeedItem, now: datetime = None) -> datetime:
    """Publish time of the item, or `now` when missing or unparsable.

    Naive datetimes are UTC.
    """
    if now is None:
        now = datetime.utcnow()

    if item.published_parsed:
        try:
            return datetime(*item.published_parsed[:6])
        except (TypeError, ValueError):
            pass

    if item.published:
        parsed = _parse_date_string(item.published)
        if parsed is not None:
            return parsed

    return now


def _parse_date_string(value: str) -> Optional[datetime]:
    value = value.strip()
    parsed = None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None

    if parsed is None:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
