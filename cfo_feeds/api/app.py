"""HTTP read API over the article store, plus the on-demand ingestion trigger."""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, HttpUrl
from pydantic.alias_generators import to_camel
import structlog

from ..config.settings import settings
from ..ingestion.interfaces import FeedSource
from ..pipeline.scheduler import IngestionScheduler
from ..storage.database import ArticleStorage
from ..storage.factory import get_article_storage

logger = structlog.get_logger()


class ArticleOut(BaseModel):
    """Article as the reader front-end sees it (camelCase keys)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    title: str
    url: str
    source: str
    category: str
    description: Optional[str] = None
    image: Optional[str] = None
    published_date: Optional[datetime] = None
    relevance_score: int
    is_read: bool
    is_saved: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FeedSourceIn(BaseModel):
    url: HttpUrl
    source: str


class FetchFeedsRequest(BaseModel):
    feeds: Optional[List[FeedSourceIn]] = None


def create_app(
    storage: ArticleStorage = None,
    scheduler: IngestionScheduler = None,
) -> FastAPI:
    """Build the API. The scheduler is started and stopped with the app."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.scheduler.start()
        try:
            yield
        finally:
            app.state.scheduler.shutdown()

    app = FastAPI(title="CFO Feeds", lifespan=lifespan)
    app.state.storage = storage or get_article_storage()
    app.state.scheduler = scheduler or IngestionScheduler()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def get_storage(request: Request) -> ArticleStorage:
        return request.app.state.storage

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint for load balancers."""
        try:
            stats = get_storage(request).get_stats()
            return {
                "status": "healthy",
                "timestamp": datetime.utcnow().isoformat(),
                "database": "connected",
                "articles": stats.get("total", 0),
            }
        except Exception as e:
            logger.error("health_check_failed", error=str(e))
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "error": str(e)}
            )

    @app.get("/api/articles/stats/summary")
    def stats_summary(request: Request):
        stats = get_storage(request).get_stats()
        return {
            "total": stats["total"],
            "byCategory": [
                {"_id": category, "count": count}
                for category, count in stats["by_category"].items()
            ],
            "saved": stats["saved"],
            "unread": stats["unread"],
        }

    @app.get("/api/articles", response_model=List[ArticleOut])
    def list_articles(
        request: Request,
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=100),
        category: Optional[str] = None,
        saved: Optional[bool] = None,
    ):
        return get_storage(request).list_articles(
            page=page,
            limit=limit,
            category=category,
            saved=bool(saved),
        )

    @app.get("/api/articles/{article_id}", response_model=ArticleOut)
    def get_article(request: Request, article_id: int):
        article = get_storage(request).get_article(article_id)
        if not article:
            raise HTTPException(status_code=404, detail="Article not found")
        return article

    @app.patch("/api/articles/{article_id}/read", response_model=ArticleOut)
    def mark_read(request: Request, article_id: int):
        article = get_storage(request).mark_read(article_id)
        if not article:
            raise HTTPException(status_code=404, detail="Article not found")
        return article

    @app.patch("/api/articles/{article_id}/save", response_model=ArticleOut)
    def toggle_save(request: Request, article_id: int):
        article = get_storage(request).toggle_saved(article_id)
        if not article:
            raise HTTPException(status_code=404, detail="Article not found")
        return article

    @app.get("/api/feeds/stats")
    def feed_stats(request: Request):
        return get_storage(request).get_all_feed_stats()

    @app.post("/api/fetch-feeds")
    async def fetch_feeds(request: Request, body: Optional[FetchFeedsRequest] = None):
        """Start ingestion in the background and return straight away."""
        sources = None
        if body is not None and body.feeds:
            sources = [FeedSource(url=str(f.url), source=f.source) for f in body.feeds]

        job_id = request.app.state.scheduler.submit(sources)
        return {"message": "Feeds fetching started in background", "jobId": job_id}

    return app
