"""Database storage and models."""

from .database import ArticleStorage
from .models import ArticleModel, FeedStatsModel, init_db

__all__ = ["ArticleStorage", "ArticleModel", "FeedStatsModel", "init_db"]
