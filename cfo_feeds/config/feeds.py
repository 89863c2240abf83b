"""Feed source registry."""

import json
from pathlib import Path
from typing import List, Optional, Tuple

from ..ingestion.interfaces import FeedSource


DEFAULT_FEEDS: Tuple[FeedSource, ...] = (
    FeedSource(url="https://www.ft.com/?format=rss", source="Financial Times"),
    FeedSource(url="https://www.economist.com/the-world-this-week/rss.xml", source="The Economist"),
    FeedSource(url="https://sloanreview.mit.edu/feed/", source="MIT Sloan Management Review"),
    FeedSource(url="https://www.mckinsey.com/featured-insights/rss", source="McKinsey"),
    FeedSource(url="https://www2.deloitte.com/global/en/insights/rss.html", source="Deloitte Insights"),
    FeedSource(url="https://www.privateequityinternational.com/feed/", source="Private Equity International"),
    FeedSource(url="https://african.business/feed/", source="African Business Magazine"),
    FeedSource(url="https://businessday.ng/feed/", source="BusinessDay Nigeria"),
    FeedSource(url="https://kpmg.com/xx/en/blogs.rss.html", source="KPMG Insights"),
    FeedSource(url="https://www.imf.org/external/pubs/ft/survey/so/rss.aspx?items=1", source="IMF"),
)


def load_feeds(config_path: Optional[Path] = None) -> List[FeedSource]:
    """Load feed sources, from a JSON file when one is given.

    The file holds ``{"feeds": [{"url": ..., "source": ...}, ...]}``.
    """
    if config_path is None:
        from .settings import settings
        config_path = settings.feeds_file

    if config_path is None:
        return list(DEFAULT_FEEDS)

    with open(config_path) as f:
        data = json.load(f)

    return [
        FeedSource(url=feed_data["url"], source=feed_data["source"])
        for feed_data in data.get("feeds", [])
    ]
