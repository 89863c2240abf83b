"""Background scheduling for ingestion runs.

Recurring runs, the startup run and on-demand runs all become APScheduler
jobs that call the same ingestion entry point. Callers get a job id back
immediately; the outcome shows up in the logs and the article store.
"""

from typing import Awaitable, Callable, List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
import structlog

from ..config.settings import settings
from ..ingestion.interfaces import FeedSource
from .ingestion import run_ingestion

logger = structlog.get_logger()

RECURRING_JOB_ID = "ingest_feeds"

RunFunc = Callable[[Optional[List[FeedSource]]], Awaitable[int]]


class IngestionScheduler:
    """Owns the APScheduler instance that runs ingestion in the background."""

    def __init__(
        self,
        run: RunFunc = None,
        interval_hours: int = None,
        scheduler: AsyncIOScheduler = None,
    ):
        self._run = run or run_ingestion
        self.interval_hours = interval_hours or settings.ingest_interval_hours
        self.scheduler = scheduler or AsyncIOScheduler()

    def start(self, run_now: bool = None) -> None:
        """Register the recurring job, start the scheduler, optionally run once now."""
        if run_now is None:
            run_now = settings.run_on_startup

        self.scheduler.add_job(
            self.run_job,
            IntervalTrigger(hours=self.interval_hours),
            kwargs={"trigger": "interval"},
            id=RECURRING_JOB_ID,
            name="Fetch RSS feeds",
            replace_existing=True,
            misfire_grace_time=3600,
            coalesce=True,
        )
        self.scheduler.start()
        logger.info("scheduler_started", interval_hours=self.interval_hours)

        if run_now:
            self.submit(trigger="startup")

    def submit(self, sources: Optional[List[FeedSource]] = None, trigger: str = "on_demand") -> str:
        """Queue a one-off ingestion run and return its job id without waiting."""
        job = self.scheduler.add_job(
            self.run_job,
            kwargs={"sources": sources, "trigger": trigger},
            name=f"Ingestion ({trigger})",
        )
        logger.info(
            "ingestion_submitted",
            job_id=job.id,
            trigger=trigger,
            feeds=len(sources) if sources is not None else "registry"
        )
        return job.id

    async def run_job(self, sources: Optional[List[FeedSource]] = None, trigger: str = "interval") -> Optional[int]:
        """Job body: one ingestion pass. Failures are logged, not raised."""
        logger.info("job_started", job=RECURRING_JOB_ID, trigger=trigger)
        try:
            processed = await self._run(sources)
        except Exception as e:
            logger.error("job_failed", job=RECURRING_JOB_ID, trigger=trigger, error=str(e))
            return None

        logger.info("job_completed", job=RECURRING_JOB_ID, trigger=trigger, processed=processed)
        return processed

    def shutdown(self) -> None:
        """Stop the scheduler without waiting for running jobs."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        logger.info("scheduler_stopped")
