"""SQLAlchemy models for the article store."""

from datetime import datetime

from sqlalchemy import create_engine, Column, Integer, String, Text, Boolean, DateTime, Index
from sqlalchemy.orm import declarative_base

from ..classification.interfaces import Category

Base = declarative_base()


class ArticleModel(Base):
    """Database model for ingested articles."""
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Dedup key
    url = Column(String(2048), unique=True, nullable=False)

    # Content (owned by ingestion)
    title = Column(Text, nullable=False)
    source = Column(String(255), nullable=False)
    category = Column(String(64), nullable=False, default=Category.UNCATEGORIZED.value)
    description = Column(Text)
    image = Column(String(2048))
    published_date = Column(DateTime, default=datetime.utcnow)
    relevance_score = Column(Integer, nullable=False, default=3)

    # Reader state (owned by the read API)
    is_read = Column(Boolean, nullable=False, default=False)
    is_saved = Column(Boolean, nullable=False, default=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index('idx_articles_category_published', 'category', 'published_date'),
        Index('idx_articles_relevance', 'relevance_score'),
        Index('idx_articles_saved_read', 'is_saved', 'is_read'),
    )


class FeedStatsModel(Base):
    """Database model for feed statistics."""
    __tablename__ = "feed_stats"

    feed_name = Column(String(255), primary_key=True)
    last_fetch_at = Column(DateTime)
    last_item_count = Column(Integer, default=0)
    total_items = Column(Integer, default=0)
    last_error = Column(Text)
    consecutive_failures = Column(Integer, default=0)
    avg_fetch_time_ms = Column(Integer, default=0)
    fetch_count = Column(Integer, default=0)


def init_db(database_url: str):
    """Initialize database and create all tables."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Upserts run in worker threads
        connect_args = {"check_same_thread": False, "timeout": 30}
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    Base.metadata.create_all(engine)
    return engine
