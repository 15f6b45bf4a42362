"""
Message processor controller.

Owns the stopped/running lifecycle and the periodic dispatch job. Start and
stop are idempotent: calling either in the wrong state only logs a warning.
"""

import logging
import threading
from datetime import datetime
from typing import List, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.domain.message import Message, MessageStatus
from app.domain.ports import MessageStore
from app.usecases.dispatch_service import DispatchService

logger = logging.getLogger(__name__)

DISPATCH_JOB_ID = "message_dispatch"
DEFAULT_INTERVAL_SECONDS = 120


class MessageProcessor:
    """Start/stop control over the scheduled dispatch pass."""

    def __init__(
        self,
        dispatcher: DispatchService,
        store: MessageStore,
        scheduler: BaseScheduler,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    ):
        self.dispatcher = dispatcher
        self.store = store
        self.scheduler = scheduler
        self.interval_seconds = interval_seconds

        # Guards _running and the scheduled job
        self._lock = threading.Lock()
        self._running = False

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._running

    @property
    def next_run_time(self) -> Optional[datetime]:
        """When the next dispatch pass is due, or None when stopped."""
        with self._lock:
            if not self._running:
                return None
            job = self.scheduler.get_job(DISPATCH_JOB_ID)
        return getattr(job, "next_run_time", None) if job else None

    def start(self) -> None:
        """Arm the periodic dispatch job. No-op if already running."""
        with self._lock:
            if self._running:
                logger.warning("Message processor already running")
                return

            logger.info(f"Starting message processor (interval={self.interval_seconds}s)")
            # max_instances=1: a tick that lands while a pass is still running is skipped
            self.scheduler.add_job(
                self._run_dispatch_pass,
                trigger=IntervalTrigger(seconds=self.interval_seconds),
                id=DISPATCH_JOB_ID,
                name="Dispatch unsent messages",
                max_instances=1,
                coalesce=True,
                replace_existing=True,
            )
            self._running = True

    def stop(self) -> None:
        """Disarm the dispatch job. No-op if not running; never waits for an in-flight pass."""
        with self._lock:
            if not self._running:
                logger.warning("Message processor not running")
                return

            logger.warning("Stopping message processor...")
            try:
                self.scheduler.remove_job(DISPATCH_JOB_ID)
            except JobLookupError:
                logger.debug(f"Job {DISPATCH_JOB_ID} already removed")
            self._running = False

    async def get_sent_messages(self, limit: int) -> List[Message]:
        """
        Get messages that have been sent.

        Args:
            limit: Maximum number of messages to return

        Returns:
            List of sent messages, possibly empty

        Raises:
            StoreError: Propagated unchanged from the store
        """
        return await self.store.fetch_by_status(MessageStatus.SENT, limit)

    async def _run_dispatch_pass(self) -> None:
        """Called by the scheduler on every tick."""
        await self.dispatcher.run_pass()
