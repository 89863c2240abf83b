"""Data ingestion - fetching, parsing and normalizing RSS feeds."""

from .interfaces import (
    FeedSource, RawFeedItem, NormalizedArticle, FetcherInterface, StorageInterface
)
from .fetcher import RSSFetcher, FeedFetchError

__all__ = [
    "FeedSource", "RawFeedItem", "NormalizedArticle",
    "FetcherInterface", "StorageInterface", "RSSFetcher", "FeedFetchError"
]
