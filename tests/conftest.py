"""Pytest configuration and shared fixtures."""

import pytest
import tempfile
import os
from datetime import datetime
from pathlib import Path

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))


SAMPLE_RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:media="http://search.yahoo.com/mrss/"
     xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>Test Finance Feed</title>
    <link>https://example.com/</link>
    <description>Finance news for testing</description>
    <item>
      <title>Sponsors return with a wave of buyouts</title>
      <link>https://example.com/articles/buyouts</link>
      <guid>https://example.com/articles/buyouts</guid>
      <pubDate>Mon, 06 Jan 2025 10:30:00 GMT</pubDate>
      <description><![CDATA[<p>Sponsors are <b>back</b> in force.</p>]]></description>
      <content:encoded><![CDATA[<p>The full story on sponsors.</p>]]></content:encoded>
      <enclosure url="https://cdn.example.com/buyouts.jpg" type="image/jpeg" length="1000"/>
    </item>
    <item>
      <title>Kenya central bank cuts policy rate</title>
      <link>https://example.com/articles/kenya</link>
      <pubDate>not a date</pubDate>
      <description>Plain text summary</description>
      <media:thumbnail url="https://cdn.example.com/kenya-thumb.jpg"/>
    </item>
    <item>
      <link>https://example.com/articles/untitled</link>
      <media:content url="https://cdn.example.com/untitled.jpg" medium="image"/>
    </item>
  </channel>
</rss>
"""


@pytest.fixture
def temp_db():
    """Provide a temporary database file."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name
    yield f"sqlite:///{db_path}"
    # Cleanup
    try:
        os.unlink(db_path)
    except FileNotFoundError:
        pass


@pytest.fixture
def storage(temp_db):
    """ArticleStorage backed by a temporary SQLite file."""
    from cfo_feeds.storage.database import ArticleStorage
    return ArticleStorage(temp_db)


@pytest.fixture
def sample_rss():
    return SAMPLE_RSS


@pytest.fixture
def sample_source():
    """Provide a sample feed source."""
    from cfo_feeds.ingestion.interfaces import FeedSource
    return FeedSource(url="https://example.com/feed.xml", source="Example Finance")


@pytest.fixture
def sample_item():
    """Provide a sample RawFeedItem."""
    from cfo_feeds.ingestion.interfaces import RawFeedItem
    return RawFeedItem(
        title="Inflation cools as central banks pause",
        link="https://example.com/articles/inflation",
        guid="inflation-2025-01",
        published="Tue, 07 Jan 2025 08:00:00 GMT",
        content={
            "content_snippet": "Inflation eased for a third month.",
            "summary": "<p>Inflation eased for a third month.</p>",
        },
    )


@pytest.fixture
def make_article():
    """Factory for NormalizedArticle with sensible defaults."""
    from cfo_feeds.classification.interfaces import Category
    from cfo_feeds.ingestion.interfaces import NormalizedArticle

    def _make(url="https://example.com/articles/1", **overrides):
        fields = dict(
            title="Inflation cools as central banks pause",
            url=url,
            source="Example Finance",
            category=Category.CAPITAL_STRATEGY,
            description="Inflation eased for a third month.",
            published_date=datetime(2025, 1, 7, 8, 0, 0),
            relevance_score=4,
            image="https://cdn.example.com/inflation.jpg",
        )
        fields.update(overrides)
        return NormalizedArticle(**fields)

    return _make
