"""
Message store backed by SQLAlchemy.
"""

import logging
from typing import List

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.domain.errors import MessageNotFoundError, StoreError
from app.domain.message import Message, MessageStatus
from app.utils.time import utc_now_naive

logger = logging.getLogger(__name__)


class MessageRepository:
    """Reads and updates messages, one session per call."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def fetch_by_status(self, status: MessageStatus, limit: int) -> List[Message]:
        """
        Fetch messages with the given status, oldest first.

        Args:
            status: Status to filter on
            limit: Maximum number of messages to return

        Returns:
            List of messages, possibly empty

        Raises:
            StoreError: If the query fails
        """
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(Message)
                    .where(Message.status == status)
                    .order_by(Message.created_at, Message.id)
                    .limit(limit)
                )
                return list(result.scalars().all())
        except (SQLAlchemyError, OverflowError) as e:
            raise StoreError(f"failed to fetch {status.value} messages: {e}") from e

    async def mark_sent(self, message_id: str, delivery_id: str) -> None:
        """
        Transition a message from unsent to sent.

        Repeating the call for a message that is already sent changes
        nothing; the first delivery id and sent_at are kept.

        Raises:
            MessageNotFoundError: If no message has this id
            StoreError: If the update fails
        """
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    update(Message)
                    .where(Message.id == message_id, Message.status == MessageStatus.UNSENT)
                    .values(
                        status=MessageStatus.SENT,
                        delivery_id=delivery_id,
                        sent_at=utc_now_naive(),
                    )
                )
                await session.commit()

                if result.rowcount:
                    return

                existing = await session.get(Message, message_id)
        except (SQLAlchemyError, OverflowError) as e:
            raise StoreError(f"failed to mark message {message_id} as sent: {e}") from e

        if existing is None:
            raise MessageNotFoundError(message_id)

        if existing.delivery_id != delivery_id:
            logger.warning(
                f"Message {message_id} already sent with delivery id "
                f"{existing.delivery_id}, ignoring {delivery_id}"
            )
