"""Database operations for article storage."""

from datetime import datetime
from typing import Optional, List
from pathlib import Path

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import sessionmaker
from sqlalchemy.exc import IntegrityError
import structlog

from .models import ArticleModel, FeedStatsModel, init_db
from ..ingestion.interfaces import NormalizedArticle, StorageInterface
from ..config.settings import settings

logger = structlog.get_logger()

_DIALECT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class ArticleStorage(StorageInterface):
    """SQL storage for articles (SQLite locally, PostgreSQL in production)."""

    def __init__(self, database_url: str = None):
        if database_url is None:
            database_url = settings.database_url

        # Ensure data directory exists
        if database_url.startswith("sqlite:///"):
            db_path = database_url.replace("sqlite:///", "")
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self.engine = init_db(database_url)
        self.Session = sessionmaker(bind=self.engine)

        dialect = self.engine.dialect.name
        if dialect not in _DIALECT_INSERTS:
            raise ValueError(f"Unsupported database dialect for upserts: {dialect}")
        self._insert = _DIALECT_INSERTS[dialect]

    def upsert_article(self, article: NormalizedArticle) -> None:
        """Insert the article, or refresh the content of the row with the same URL.

        The conflict update lists content columns only, so is_read/is_saved
        set by readers survive re-ingestion.
        """
        values = article.content_fields()
        now = datetime.utcnow()

        stmt = self._insert(ArticleModel).values(
            **values,
            is_read=False,
            is_saved=False,
            created_at=now,
            updated_at=now,
        )
        update_set = {name: stmt.excluded[name] for name in values if name != "url"}
        update_set["updated_at"] = now
        stmt = stmt.on_conflict_do_update(index_elements=["url"], set_=update_set)

        session = self.Session()
        try:
            session.execute(stmt)
            session.commit()
            logger.debug("article_upserted", url=article.url[:80])
        except IntegrityError as e:
            session.rollback()
            if "url" not in str(e.orig).lower():
                raise
            logger.debug("article_upsert_conflict", url=article.url[:80])
        finally:
            session.close()

    def get_by_url(self, url: str) -> Optional[dict]:
        """Get article by URL."""
        session = self.Session()
        try:
            model = session.query(ArticleModel)\
                .filter(ArticleModel.url == url)\
                .first()
            return self._model_to_dict(model) if model else None
        finally:
            session.close()

    def get_article(self, article_id: int) -> Optional[dict]:
        """Get article by id."""
        session = self.Session()
        try:
            model = session.get(ArticleModel, article_id)
            return self._model_to_dict(model) if model else None
        finally:
            session.close()

    def list_articles(
        self,
        page: int = 1,
        limit: int = 10,
        category: str = None,
        saved: bool = False,
    ) -> List[dict]:
        """Newest-first page of articles, optionally filtered."""
        page = max(page, 1)
        session = self.Session()
        try:
            query = session.query(ArticleModel)
            if category and category != "all":
                query = query.filter(ArticleModel.category == category)
            if saved:
                query = query.filter(ArticleModel.is_saved == True)

            models = query.order_by(ArticleModel.published_date.desc(), ArticleModel.id.desc())\
                .offset((page - 1) * limit)\
                .limit(limit)\
                .all()
            return [self._model_to_dict(m) for m in models]
        finally:
            session.close()

    def mark_read(self, article_id: int) -> Optional[dict]:
        """Set is_read. Returns the updated article, None if missing."""
        session = self.Session()
        try:
            model = session.get(ArticleModel, article_id)
            if not model:
                return None
            model.is_read = True
            session.commit()
            logger.debug("article_marked_read", id=article_id)
            return self._model_to_dict(model)
        finally:
            session.close()

    def toggle_saved(self, article_id: int) -> Optional[dict]:
        """Flip is_saved. Returns the updated article, None if missing."""
        session = self.Session()
        try:
            model = session.get(ArticleModel, article_id)
            if not model:
                return None
            model.is_saved = not model.is_saved
            session.commit()
            logger.debug("article_save_toggled", id=article_id, saved=model.is_saved)
            return self._model_to_dict(model)
        finally:
            session.close()

    def get_stats(self) -> dict:
        """Get database statistics."""
        session = self.Session()
        try:
            total = session.query(ArticleModel).count()
            by_category = session.query(ArticleModel.category, func.count(ArticleModel.id))\
                .group_by(ArticleModel.category)\
                .all()
            saved = session.query(ArticleModel)\
                .filter(ArticleModel.is_saved == True).count()
            unread = session.query(ArticleModel)\
                .filter(ArticleModel.is_read == False).count()

            return {
                "total": total,
                "by_category": {category: count for category, count in by_category},
                "saved": saved,
                "unread": unread,
            }
        finally:
            session.close()

    def _model_to_dict(self, model: ArticleModel) -> dict:
        """Convert database model to a plain dict."""
        return {
            "id": model.id,
            "title": model.title,
            "url": model.url,
            "source": model.source,
            "category": model.category,
            "description": model.description,
            "image": model.image,
            "published_date": model.published_date,
            "relevance_score": model.relevance_score,
            "is_read": model.is_read,
            "is_saved": model.is_saved,
            "created_at": model.created_at,
            "updated_at": model.updated_at,
        }

    def update_feed_stats(
        self,
        feed_name: str,
        items: int = 0,
        error: str = None,
        fetch_time_ms: int = 0
    ) -> None:
        """Update feed statistics after a fetch."""
        session = self.Session()
        try:
            stats = session.get(FeedStatsModel, feed_name)
            if not stats:
                stats = FeedStatsModel(feed_name=feed_name)
                session.add(stats)

            stats.last_fetch_at = datetime.utcnow()
            stats.last_item_count = items
            stats.total_items = (stats.total_items or 0) + items
            stats.fetch_count = (stats.fetch_count or 0) + 1

            if error:
                stats.last_error = error
                stats.consecutive_failures = (stats.consecutive_failures or 0) + 1
            else:
                stats.last_error = None
                stats.consecutive_failures = 0

            # Update average fetch time
            old_avg = stats.avg_fetch_time_ms or 0
            stats.avg_fetch_time_ms = int((old_avg * 0.9) + (fetch_time_ms * 0.1))

            session.commit()
            logger.debug("feed_stats_updated", feed=feed_name, items=items)
        finally:
            session.close()

    def get_feed_stats(self, feed_name: str) -> Optional[dict]:
        """Get statistics for a specific feed."""
        session = self.Session()
        try:
            stats = session.get(FeedStatsModel, feed_name)
            return self._stats_to_dict(stats) if stats else None
        finally:
            session.close()

    def get_all_feed_stats(self) -> List[dict]:
        """Get statistics for all feeds."""
        session = self.Session()
        try:
            all_stats = session.query(FeedStatsModel)\
                .order_by(FeedStatsModel.feed_name)\
                .all()
            return [self._stats_to_dict(s) for s in all_stats]
        finally:
            session.close()

    def _stats_to_dict(self, stats: FeedStatsModel) -> dict:
        return {
            "feed_name": stats.feed_name,
            "last_fetch_at": stats.last_fetch_at,
            "last_item_count": stats.last_item_count or 0,
            "total_items": stats.total_items or 0,
            "last_error": stats.last_error,
            "consecutive_failures": stats.consecutive_failures or 0,
            "avg_fetch_time_ms": stats.avg_fetch_time_ms or 0,
            "fetch_count": stats.fetch_count or 0,
        }
