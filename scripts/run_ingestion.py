#!/usr/bin/env python3
"""Run one ingestion pass over the feed registry and print a summary."""

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from cfo_feeds.config.feeds import load_feeds
from cfo_feeds.config.logging import configure_logging
from cfo_feeds.config.settings import settings
from cfo_feeds.pipeline.ingestion import run_ingestion
from cfo_feeds.storage.factory import get_article_storage


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--feeds-file", type=Path, help="JSON feed registry to use instead of the built-in one")
    args = parser.parse_args()

    configure_logging(settings.log_level, settings.log_json)

    print("\n" + "=" * 50)
    print("CFO FEEDS INGESTION")
    print("=" * 50 + "\n")

    sources = load_feeds(args.feeds_file)
    storage = get_article_storage()
    processed = asyncio.run(run_ingestion(sources, storage=storage))

    stats = storage.get_stats()
    print("\nRESULTS:")
    print(f"  Feeds: {len(sources)}")
    print(f"  Items processed: {processed}")
    print(f"  Articles in store: {stats['total']} ({stats['unread']} unread, {stats['saved']} saved)")

    print("\nBY CATEGORY:")
    for category, count in sorted(stats["by_category"].items(), key=lambda kv: -kv[1]):
        print(f"  {category}: {count}")

    broken = [s for s in storage.get_all_feed_stats() if s["consecutive_failures"]]
    if broken:
        print("\nFAILING FEEDS:")
        for s in broken:
            print(f"  {s['feed_name']}: {s['consecutive_failures']} failures ({s['last_error']})")
    print()


if __name__ == "__main__":
    main()
