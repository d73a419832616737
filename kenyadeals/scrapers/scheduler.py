"""APScheduler-based scraping scheduler.

Runs the full pipeline at a fixed interval inside one asyncio event loop.
This is the local alternative to triggering `kenyadeals run` from an
external cron.
"""

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

import structlog
from apscheduler.job import Job
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from kenyadeals.schemas.scrape import ScrapeConfig
from kenyadeals.scrapers.scraper_service import RunSummary, ScraperService

logger = structlog.get_logger(__name__)

JOB_ID = "scrape_all_shops"


class ScraperScheduler:
    """Manages the periodic scrape job.

    - A fresh ScrapeConfig is built for every run via ``config_factory``
    - Only one run is active at a time; overlapping triggers are coalesced
    - A failing run is logged and does not stop the scheduler
    """

    def __init__(
        self,
        config_factory: Callable[[], ScrapeConfig],
        interval_minutes: int = 360,
        output_dir: Optional[Path] = None,
        write_html: bool = True,
        service_factory: Callable[[ScrapeConfig], ScraperService] = ScraperService,
    ):
        """Initialize scraper scheduler.

        Args:
            config_factory: Builds the per-run configuration
            interval_minutes: Minutes between run starts
            output_dir: Artifact directory (settings.OUTPUT_DIR when None)
            write_html: Also render the HTML report
            service_factory: Creates the ScraperService for a run
        """
        self.config_factory = config_factory
        self.interval_minutes = interval_minutes
        self.output_dir = output_dir
        self.write_html = write_html
        self.service_factory = service_factory
        self.scheduler = AsyncIOScheduler(timezone="UTC")
        self.logger = logger.bind(service="scraper_scheduler")
        self.runs = 0

    def start(self, run_immediately: bool = True) -> Job:
        """Register the interval job and start the scheduler.

        Must be called from within a running event loop.
        """
        trigger = IntervalTrigger(minutes=self.interval_minutes, timezone="UTC")
        # A None next_run_time would add the job paused
        extra = {"next_run_time": datetime.now(timezone.utc)} if run_immediately else {}
        job = self.scheduler.add_job(
            func=self._run_job_wrapper,
            trigger=trigger,
            id=JOB_ID,
            name="Scrape all shops",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            **extra,
        )
        if not self.scheduler.running:
            self.scheduler.start()
        self.logger.info(
            "scheduler_started",
            interval_minutes=self.interval_minutes,
            next_run=str(getattr(job, "next_run_time", None)),
        )
        return job

    def stop(self) -> None:
        """Stop the scheduler without waiting for a running job."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            self.logger.info("scheduler_stopped", runs=self.runs)
        else:
            self.logger.warning("scheduler_not_running")

    async def run_once(self) -> RunSummary:
        """Execute one complete scrape run."""
        config = self.config_factory()
        service = self.service_factory(config)
        summary = await service.run(output_dir=self.output_dir, write_html=self.write_html)
        self.runs += 1
        self.logger.info(
            "scheduled_run_complete",
            run=self.runs,
            total_items=summary.report.total_items,
        )
        return summary

    async def _run_job_wrapper(self) -> None:
        """Entry point called by APScheduler; never lets an exception escape."""
        try:
            await self.run_once()
        except Exception as e:
            self.logger.error("scheduled_run_failed", error=str(e), exc_info=True)

    async def serve_forever(self) -> None:
        """Start the scheduler and block until cancelled."""
        self.start()
        try:
            await asyncio.Event().wait()
        finally:
            self.stop()
