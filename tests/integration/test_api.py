"""Integration tests for the HTTP API."""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from cfo_feeds.api.app import create_app
from cfo_feeds.classification.interfaces import Category


class RecordingScheduler:
    """Scheduler stand-in that records submissions instead of running them."""

    def __init__(self):
        self.started = False
        self.stopped = False
        self.submitted = []

    def start(self):
        self.started = True

    def shutdown(self):
        self.stopped = True

    def submit(self, sources=None, trigger="on_demand"):
        self.submitted.append(sources)
        return f"job-{len(self.submitted)}"


@pytest.fixture
def scheduler():
    return RecordingScheduler()


@pytest.fixture
def client(storage, scheduler):
    app = create_app(storage=storage, scheduler=scheduler)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def seeded(storage, make_article):
    """Three articles, newest last; returns their ids oldest first."""
    base = datetime(2025, 1, 1, 9, 0, 0)
    categories = [Category.CAPITAL_STRATEGY, Category.AFRICA_FINANCE, Category.AFRICA_FINANCE]
    ids = []
    for i, category in enumerate(categories):
        url = f"https://example.com/articles/{i}"
        storage.upsert_article(make_article(
            url=url,
            title=f"Story {i}",
            category=category,
            published_date=base + timedelta(days=i),
        ))
        ids.append(storage.get_by_url(url)["id"])
    return ids


class TestArticlesApi:
    """Tests for the article read API."""

    def test_lifespan_drives_scheduler(self, storage, scheduler):
        app = create_app(storage=storage, scheduler=scheduler)
        with TestClient(app):
            assert scheduler.started
        assert scheduler.stopped

    def test_list_uses_camel_case(self, client, seeded):
        response = client.get("/api/articles")

        assert response.status_code == 200
        articles = response.json()
        assert [a["title"] for a in articles] == ["Story 2", "Story 1", "Story 0"]

        article = articles[0]
        assert article["isRead"] is False
        assert article["isSaved"] is False
        assert article["relevanceScore"] == 4
        assert article["publishedDate"].startswith("2025-01-03")
        assert "is_read" not in article

    def test_list_pagination(self, client, seeded):
        response = client.get("/api/articles", params={"page": 2, "limit": 2})

        assert [a["title"] for a in response.json()] == ["Story 0"]

    def test_list_rejects_bad_paging(self, client):
        assert client.get("/api/articles", params={"page": 0}).status_code == 422
        assert client.get("/api/articles", params={"limit": 1000}).status_code == 422

    def test_list_category_filter(self, client, seeded):
        response = client.get("/api/articles", params={"category": "Africa Finance"})
        assert [a["title"] for a in response.json()] == ["Story 2", "Story 1"]

        response = client.get("/api/articles", params={"category": "all"})
        assert len(response.json()) == 3

    def test_list_saved_filter(self, client, seeded):
        client.patch(f"/api/articles/{seeded[0]}/save")

        response = client.get("/api/articles", params={"saved": "true"})

        assert [a["id"] for a in response.json()] == [seeded[0]]

    def test_get_article(self, client, seeded):
        response = client.get(f"/api/articles/{seeded[1]}")

        assert response.status_code == 200
        assert response.json()["category"] == "Africa Finance"

    def test_missing_article_is_404(self, client):
        response = client.get("/api/articles/999")

        assert response.status_code == 404
        assert response.json()["detail"] == "Article not found"
        assert client.patch("/api/articles/999/read").status_code == 404
        assert client.patch("/api/articles/999/save").status_code == 404

    def test_mark_read(self, client, seeded):
        response = client.patch(f"/api/articles/{seeded[0]}/read")

        assert response.status_code == 200
        assert response.json()["isRead"] is True

    def test_toggle_save(self, client, seeded):
        first = client.patch(f"/api/articles/{seeded[0]}/save")
        second = client.patch(f"/api/articles/{seeded[0]}/save")

        assert first.json()["isSaved"] is True
        assert second.json()["isSaved"] is False

    def test_stats_summary(self, client, seeded):
        client.patch(f"/api/articles/{seeded[0]}/read")
        client.patch(f"/api/articles/{seeded[1]}/save")

        stats = client.get("/api/articles/stats/summary").json()

        assert stats["total"] == 3
        assert stats["saved"] == 1
        assert stats["unread"] == 2
        by_category = {entry["_id"]: entry["count"] for entry in stats["byCategory"]}
        assert by_category == {"Capital Strategy": 1, "Africa Finance": 2}


class TestOperationsApi:
    """Tests for health, feed stats and the ingestion trigger."""

    def test_health(self, client, seeded):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["articles"] == 3

    def test_feed_stats(self, client, storage):
        storage.update_feed_stats("Example Finance", items=5)

        response = client.get("/api/feeds/stats")

        assert response.status_code == 200
        assert response.json()[0]["feed_name"] == "Example Finance"

    def test_fetch_feeds_returns_immediately(self, client, scheduler):
        response = client.post("/api/fetch-feeds")

        assert response.status_code == 200
        assert response.json() == {
            "message": "Feeds fetching started in background",
            "jobId": "job-1",
        }
        assert scheduler.submitted == [None]

    def test_fetch_feeds_with_override(self, client, scheduler):
        response = client.post("/api/fetch-feeds", json={"feeds": [
            {"url": "https://a.example.com/rss", "source": "A"},
        ]})

        assert response.status_code == 200
        sources = scheduler.submitted[0]
        assert len(sources) == 1
        assert sources[0].url == "https://a.example.com/rss"
        assert sources[0].source == "A"

    def test_fetch_feeds_rejects_bad_url(self, client, scheduler):
        response = client.post("/api/fetch-feeds", json={"feeds": [
            {"url": "not a url", "source": "A"},
        ]})

        assert response.status_code == 422
        assert scheduler.submitted == []
