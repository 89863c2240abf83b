"""RSS feed fetcher with async support and bounded retries."""

import re
import time
from typing import Callable, Iterable, List, Optional

import aiohttp
import feedparser
from bs4 import BeautifulSoup
from tenacity import AsyncRetrying, stop_after_attempt, wait_incrementing
import structlog

from .interfaces import FeedSource, RawFeedItem, FetcherInterface
from ..config.settings import settings

logger = structlog.get_logger()

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
FEED_ACCEPT = "application/rss+xml, application/atom+xml, application/xml;q=0.9, text/xml;q=0.9, */*;q=0.8"

_WHITESPACE_RE = re.compile(r"\s+")


class FeedFetchError(Exception):
    """One fetch attempt produced no usable feed document."""


class RSSFetcher(FetcherInterface):
    """Async RSS fetcher that retries each feed and never raises past fetch_items."""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        max_retries: int = None,
        backoff_seconds: float = None,
        timeout_seconds: float = None,
        on_fetch_complete: Callable = None,
    ):
        self.session = session
        self._owns_session = session is None
        self.max_retries = settings.feed_max_retries if max_retries is None else max_retries
        self.backoff_seconds = (
            settings.feed_retry_backoff_seconds if backoff_seconds is None else backoff_seconds
        )
        self.timeout_seconds = timeout_seconds or settings.feed_timeout_seconds
        self.on_fetch_complete = on_fetch_complete  # Callback for feed stats

    async def __aenter__(self):
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                headers={"User-Agent": BROWSER_USER_AGENT, "Accept": FEED_ACCEPT},
            )
        return self

    async def __aexit__(self, *args):
        if self.session and self._owns_session:
            await self.session.close()
            self.session = None

    async def fetch_items(self, source: FeedSource) -> List[RawFeedItem]:
        """Fetch and parse one feed, retrying with linear backoff."""
        if self.session is None:
            raise RuntimeError("RSSFetcher must be entered with 'async with' before fetching")

        start_time = time.time()
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_incrementing(start=self.backoff_seconds, increment=self.backoff_seconds),
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    items = await self._attempt(source, attempt.retry_state.attempt_number)
        except Exception as e:
            elapsed_ms = int((time.time() - start_time) * 1000)
            logger.error(
                "feed_fetch_exhausted",
                feed=source.source,
                url=source.url,
                attempts=self.max_retries + 1,
                error=str(e)
            )
            self._report(source, error=str(e), fetch_time_ms=elapsed_ms)
            return []

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.info("feed_fetched", feed=source.source, items=len(items), time_ms=elapsed_ms)
        self._report(source, items=len(items), fetch_time_ms=elapsed_ms)
        return items

    async def _attempt(self, source: FeedSource, attempt_number: int) -> List[RawFeedItem]:
        try:
            document = await self._download(source.url)
            return self.parse_document(document)
        except Exception as e:
            logger.warning(
                "feed_attempt_failed",
                feed=source.source,
                url=source.url,
                attempt=attempt_number,
                error=str(e)
            )
            raise

    async def _download(self, url: str) -> bytes:
        async with self.session.get(url) as response:
            if response.status >= 400:
                raise FeedFetchError(f"HTTP {response.status} from {url}")
            return await response.read()

    def parse_document(self, document) -> List[RawFeedItem]:
        """Parse an RSS/Atom document into raw items."""
        feed = feedparser.parse(document)
        if feed.bozo and not feed.entries:
            raise FeedFetchError(f"Unparsable feed: {feed.get('bozo_exception')}")
        return [self._parse_entry(entry) for entry in feed.entries]

    def _parse_entry(self, entry) -> RawFeedItem:
        """Parse a feedparser entry into a RawFeedItem."""
        content = {}

        encoded = entry.get("content")
        if encoded:
            content["content_encoded"] = encoded[0].get("value", "")

        summary = entry.get("summary")
        if summary:
            content["summary"] = summary

        snippet = _html_to_text(content.get("summary") or content.get("content_encoded") or "")
        if snippet:
            content["content_snippet"] = snippet

        return RawFeedItem(
            title=entry.get("title"),
            link=entry.get("link"),
            guid=entry.get("id"),
            published=entry.get("published") or entry.get("updated"),
            published_parsed=entry.get("published_parsed") or entry.get("updated_parsed"),
            content=content,
            enclosure_url=_first_url(entry.get("enclosures", []), "href", "url"),
            media_thumbnail_url=_first_url(entry.get("media_thumbnail", []), "url"),
            media_content_url=_first_url(entry.get("media_content", []), "url"),
        )

    def _report(self, source: FeedSource, **kwargs):
        if self.on_fetch_complete:
            self.on_fetch_complete(feed_name=source.source, **kwargs)


def _first_url(media: Iterable[dict], *keys: str) -> Optional[str]:
    """First non-empty URL among feedparser media dicts."""
    for entry in media or []:
        for key in keys:
            value = entry.get(key)
            if value:
                return value
    return None


def _html_to_text(html: str) -> str:
    if not html:
        return ""
    text = BeautifulSoup(html, "html.parser").get_text(" ", strip=True)
    return _WHITESPACE_RE.sub(" ", text).strip()
