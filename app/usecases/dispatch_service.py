"""
Dispatch pipeline: one bounded pass over unsent messages.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta

from app.domain.message import CacheRecord, Message, MessageStatus
from app.domain.ports import Cache, DeliveryClient, MessageStore
from app.utils.time import to_rfc3339, utc_now

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 2
DEFAULT_CACHE_TTL = timedelta(hours=24)


@dataclass
class DispatchSummary:
    """Outcome counts for one dispatch pass."""
    fetched: int = 0
    sent: int = 0
    failed: int = 0


class DispatchService:
    """Delivers a batch of unsent messages, isolating per-message failures."""

    def __init__(
        self,
        store: MessageStore,
        client: DeliveryClient,
        cache: Cache,
        batch_size: int = DEFAULT_BATCH_SIZE,
        cache_ttl: timedelta = DEFAULT_CACHE_TTL,
    ):
        self.store = store
        self.client = client
        self.cache = cache
        self.batch_size = batch_size
        self.cache_ttl = cache_ttl

    async def run_pass(self) -> DispatchSummary:
        """
        Fetch up to batch_size unsent messages and dispatch each one.

        A fetch failure ends the pass; the next scheduled pass starts over.
        Failures on a single message are logged and the batch continues.
        This method never raises on store, delivery or cache errors.

        Returns:
            DispatchSummary with counts for this pass
        """
        summary = DispatchSummary()

        try:
            messages = await self.store.fetch_by_status(MessageStatus.UNSENT, self.batch_size)
        except Exception as e:
            logger.error(f"Failed to fetch unsent messages: {e}")
            return summary

        if not messages:
            logger.info("No unsent messages found")
            return summary

        summary.fetched = len(messages)

        for message in messages:
            if await self._dispatch_one(message):
                summary.sent += 1
            else:
                summary.failed += 1

        logger.info(
            f"Dispatch pass complete: fetched={summary.fetched} "
            f"sent={summary.sent} failed={summary.failed}"
        )
        return summary

    async def _dispatch_one(self, message: Message) -> bool:
        """Deliver, mark and cache one message. Returns True if it was delivered and marked."""
        request = message.to_delivery_request()

        try:
            delivery_id = await self.client.send(request)
        except Exception as e:
            logger.error(f"Failed to send message {message.id}: {e}")
            return False

        logger.info(f"Message {message.id} sent, delivery id: {delivery_id}")

        try:
            await self.store.mark_sent(message.id, delivery_id)
        except Exception as e:
            # Delivered but still unsent in the store; a later pass will resend it
            logger.error(f"Failed to mark message {message.id} as sent: {e}")
            return False

        record = CacheRecord(delivery_id=delivery_id, sent_at=to_rfc3339(utc_now()))
        try:
            await self.cache.set_with_ttl(message.id, record.to_json(), self.cache_ttl)
        except Exception as e:
            logger.error(f"Failed to cache message {message.id}: {e}")

        return True
