"""Interface definitions for feed ingestion."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from ..classification.interfaces import Category


@dataclass(frozen=True)
class FeedSource:
    """One RSS/Atom endpoint and the label its articles are filed under."""
    url: str
    source: str


@dataclass
class RawFeedItem:
    """An unnormalized item as it comes out of the feed parser."""
    title: Optional[str] = None
    link: Optional[str] = None
    guid: Optional[str] = None
    published: Optional[str] = None  # raw pubDate / updated string
    published_parsed: Optional[Tuple[int, ...]] = None  # time.struct_time from feedparser
    content: Dict[str, str] = field(default_factory=dict)  # alternate content field name -> value
    enclosure_url: Optional[str] = None
    media_thumbnail_url: Optional[str] = None
    media_content_url: Optional[str] = None


@dataclass
class NormalizedArticle:
    """An article ready to be upserted into the store."""
    title: str
    url: str
    source: str
    category: Category
    description: str
    published_date: datetime
    relevance_score: int
    image: Optional[str] = None
    is_read: bool = False
    is_saved: bool = False

    def content_fields(self) -> dict:
        """Fields owned by ingestion. Reader flags are never part of this."""
        return {
            "title": self.title,
            "url": self.url,
            "source": self.source,
            "category": self.category.value,
            "description": self.description,
            "image": self.image,
            "published_date": self.published_date,
            "relevance_score": self.relevance_score,
        }


class FetcherInterface:
    """Interface for feed fetching."""

    async def fetch_items(self, source: FeedSource) -> List[RawFeedItem]:
        """Fetch the items of a single feed. Returns [] when the feed is unreachable."""
        raise NotImplementedError


class StorageInterface:
    """Interface for article storage."""

    def upsert_article(self, article: NormalizedArticle) -> None:
        """Insert the article or update the content of the one with the same URL."""
        raise NotImplementedError

    def get_by_url(self, url: str) -> Optional[dict]:
        """Get article by URL."""
        raise NotImplementedError

    def update_feed_stats(
        self,
        feed_name: str,
        items: int = 0,
        error: str = None,
        fetch_time_ms: int = 0,
    ) -> None:
        """Record the outcome of one feed fetch."""
        raise NotImplementedError
