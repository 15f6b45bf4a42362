"""
Collaborator interfaces the dispatch core depends on.
"""

from datetime import timedelta
from typing import List, Protocol

from app.domain.delivery import DeliveryRequest
from app.domain.message import Message, MessageStatus


class MessageStore(Protocol):
    async def fetch_by_status(self, status: MessageStatus, limit: int) -> List[Message]:
        ...

    async def mark_sent(self, message_id: str, delivery_id: str) -> None:
        ...


class DeliveryClient(Protocol):
    async def send(self, request: DeliveryRequest) -> str:
        """Submit one message and return its delivery identifier."""
        ...


class Cache(Protocol):
    async def set_with_ttl(self, key: str, value: str, ttl: timedelta) -> None:
        ...
