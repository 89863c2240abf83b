"""Factory functions to create storage instances.

The database URL comes from DATABASE_URL (standard on cloud platforms),
then CF_DATABASE_URL, then the SQLite default in settings. ArticleStorage
speaks both SQLite and PostgreSQL.
"""

import os
from functools import lru_cache

import structlog

logger = structlog.get_logger()


def get_database_url() -> str:
    """Get database URL from environment, with fallback to SQLite."""
    url = os.environ.get('DATABASE_URL')
    if url:
        return _normalize_postgres_scheme(url)

    url = os.environ.get('CF_DATABASE_URL')
    if url:
        return _normalize_postgres_scheme(url)

    # Default to SQLite for local development
    from ..config.settings import settings
    return settings.database_url


def _normalize_postgres_scheme(url: str) -> str:
    # SQLAlchemy no longer accepts the postgres:// alias
    if url.startswith('postgres://'):
        return 'postgresql://' + url[len('postgres://'):]
    return url


@lru_cache(maxsize=1)
def get_article_storage():
    """Get the shared article storage instance."""
    from .database import ArticleStorage

    url = get_database_url()
    logger.info("using_storage", url=url[:40] + "...")
    return ArticleStorage(url)


def clear_cache():
    """Clear cached instances (useful for testing)."""
    get_article_storage.cache_clear()
