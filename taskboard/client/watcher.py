"""Periodic reminder scan driven by APScheduler."""

from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from taskboard.client.store import StoreClient

logger = logging.getLogger(__name__)

JOB_ID = "reminder-scan"


class ReminderWatcher:
    """Re-reads the store's events every *interval_seconds*. Never writes."""

    def __init__(
        self,
        store: StoreClient,
        interval_seconds: int = 60,
        scheduler: AsyncIOScheduler | None = None,
    ) -> None:
        self.store = store
        self.interval_seconds = interval_seconds
        self.scheduler = scheduler or AsyncIOScheduler()

    def start(self) -> None:
        """Schedule the scan; must be called with an event loop running."""
        self.scheduler.add_job(
            self.scan,
            "interval",
            seconds=self.interval_seconds,
            id=JOB_ID,
            replace_existing=True,
        )
        self.scheduler.start()
        logger.info("Reminder watcher started (every %ss)", self.interval_seconds)

    def stop(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Reminder watcher stopped")

    async def scan(self) -> None:
        self.store.check_reminders()
