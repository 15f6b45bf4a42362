"""
APScheduler setup for the periodic dispatch job.
"""

import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from app.config.settings import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# Global scheduler instance
scheduler: Optional[AsyncIOScheduler] = None


def get_scheduler() -> AsyncIOScheduler:
    """Get or create the scheduler instance."""
    global scheduler

    if scheduler is None:
        # Jobs live in memory only; the dispatch job is re-armed by start()
        scheduler = AsyncIOScheduler(timezone=settings.timezone)

    return scheduler


async def start_scheduler() -> None:
    """Start the scheduler."""
    sched = get_scheduler()
    if not sched.running:
        sched.start()
        logger.info("Scheduler started")


async def stop_scheduler() -> None:
    """Stop the scheduler, letting running jobs finish."""
    global scheduler
    if scheduler and scheduler.running:
        scheduler.shutdown(wait=True)
        logger.info("Scheduler stopped")
    scheduler = None
