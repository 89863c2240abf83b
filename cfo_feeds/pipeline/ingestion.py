"""Feed ingestion orchestration."""

import asyncio
from contextlib import AsyncExitStack
from datetime import datetime
from typing import Iterable, List, Optional

import structlog

from ..config.settings import settings
from ..config.feeds import load_feeds
from ..ingestion.fetcher import RSSFetcher
from ..ingestion.interfaces import (
    FeedSource, FetcherInterface, NormalizedArticle, RawFeedItem, StorageInterface
)
from ..ingestion.normalizer import item_description, item_title, item_url, published_date
from ..classification.classifier import KeywordClassifier
from ..enrichment.image_resolver import ImageResolver
from ..storage.factory import get_article_storage
from .gate import ConcurrencyGate

logger = structlog.get_logger()


class IngestionPipeline:
    """Fetch -> normalize -> classify -> resolve image -> upsert, one feed at a time."""

    def __init__(
        self,
        storage: StorageInterface = None,
        fetcher: FetcherInterface = None,
        image_resolver: ImageResolver = None,
        concurrency: int = None,
        description_max_length: int = None,
    ):
        self.storage = storage or get_article_storage()
        self.fetcher = fetcher
        self.image_resolver = image_resolver
        self.classifier = KeywordClassifier()
        self.concurrency = concurrency or settings.scrape_concurrency
        self.description_max_length = description_max_length or settings.description_max_length

    async def run(self, sources: Optional[Iterable[FeedSource]] = None) -> int:
        """Ingest every source in order. Returns the number of items stored."""
        start = datetime.now()
        sources = list(sources) if sources is not None else load_feeds()
        logger.info("ingestion_started", feeds=len(sources))

        processed = 0
        async with AsyncExitStack() as stack:
            fetcher = self.fetcher or await stack.enter_async_context(
                RSSFetcher(on_fetch_complete=self._on_fetch_complete)
            )
            resolver = self.image_resolver or await stack.enter_async_context(ImageResolver())

            for source in sources:
                try:
                    processed += await self._process_feed(source, fetcher, resolver)
                except Exception as e:
                    logger.error(
                        "feed_processing_failed",
                        feed=source.source,
                        url=source.url,
                        error=str(e)
                    )

        logger.info(
            "ingestion_complete",
            feeds=len(sources),
            processed=processed,
            elapsed_seconds=(datetime.now() - start).total_seconds()
        )
        return processed

    async def _process_feed(
        self,
        source: FeedSource,
        fetcher: FetcherInterface,
        resolver: ImageResolver,
    ) -> int:
        """Process all items of one feed through a fresh gate; wait for all of them."""
        items = await fetcher.fetch_items(source)
        if not items:
            logger.info("feed_empty", feed=source.source)
            return 0

        gate = ConcurrencyGate(self.concurrency)
        results: List[bool] = await asyncio.gather(*(
            self._process_item(item, source, resolver, gate) for item in items
        ))

        processed = sum(1 for ok in results if ok)
        logger.info(
            "feed_processed",
            feed=source.source,
            items=len(items),
            processed=processed,
            failed=len(items) - processed
        )
        return processed

    async def _process_item(
        self,
        item: RawFeedItem,
        source: FeedSource,
        resolver: ImageResolver,
        gate: ConcurrencyGate,
    ) -> bool:
        async with gate:
            try:
                article = self.build_article(item, source)
                article.image = await resolver.resolve(item)
                await asyncio.to_thread(self.storage.upsert_article, article)
                return True
            except Exception as e:
                logger.warning(
                    "item_processing_failed",
                    feed=source.source,
                    url=item_url(item),
                    error=str(e)
                )
                return False

    def build_article(
        self,
        item: RawFeedItem,
        source: FeedSource,
        now: datetime = None,
    ) -> NormalizedArticle:
        """Normalize and classify an item. No I/O; image is filled in later."""
        title = item_title(item)
        description = item_description(item, self.description_max_length)
        result = self.classifier.classify(title, description)

        return NormalizedArticle(
            title=title,
            url=item_url(item),
            source=source.source,
            category=result.category,
            description=description,
            published_date=published_date(item, now),
            relevance_score=result.relevance_score,
        )

    def _on_fetch_complete(self, feed_name: str, items: int = 0, error: str = None, fetch_time_ms: int = 0):
        try:
            self.storage.update_feed_stats(
                feed_name=feed_name,
                items=items,
                error=error,
                fetch_time_ms=fetch_time_ms
            )
        except Exception as e:
            logger.warning("feed_stats_update_failed", feed=feed_name, error=str(e))


async def run_ingestion(
    sources: Optional[Iterable[FeedSource]] = None,
    storage: StorageInterface = None,
) -> int:
    """Run one ingestion pass over `sources` (the registry when omitted).

    Returns:
        Number of items stored or refreshed
    """
    pipeline = IngestionPipeline(storage=storage)
    return await pipeline.run(sources)
