"""Standalone worker for scheduled ingestion.

Runs the ingestion scheduler without the HTTP API:
- ingestion every CF_INGEST_INTERVAL_HOURS (default 6)
- one run immediately on startup when CF_RUN_ON_STARTUP is true

Usage:
    python scripts/worker.py

Environment Variables:
    DATABASE_URL / CF_DATABASE_URL: database connection string
    CF_FEEDS_FILE: optional JSON feed registry
"""

import os
import sys
import asyncio
import signal

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import structlog

from cfo_feeds.config.logging import configure_logging
from cfo_feeds.config.settings import settings
from cfo_feeds.pipeline.ingestion import run_ingestion
from cfo_feeds.pipeline.scheduler import IngestionScheduler
from cfo_feeds.storage.factory import get_article_storage

logger = structlog.get_logger()


async def main():
    """Main entry point."""
    configure_logging(settings.log_level, settings.log_json)

    storage = get_article_storage()
    worker = IngestionScheduler(run=lambda sources: run_ingestion(sources, storage=storage))
    stopped = asyncio.Event()

    # Handle graceful shutdown
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, stopped.set)

    worker.start()
    logger.info("worker_started", jobs=len(worker.scheduler.get_jobs()))

    await stopped.wait()
    logger.info("shutdown_signal_received")
    worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
