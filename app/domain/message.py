"""
Message domain model and schemas.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, String, DateTime, Enum as SQLEnum
from sqlalchemy.orm import declarative_base
from pydantic import BaseModel, Field

from app.domain.delivery import DeliveryRequest
from app.utils.time import utc_now_naive

Base = declarative_base()


class MessageStatus(str, Enum):
    """Message status enumeration."""
    UNSENT = "unsent"
    SENT = "sent"


class Message(Base):
    """SQLAlchemy model for outbound messages."""

    __tablename__ = "messages"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    phone_number = Column(String(32), nullable=False)
    content = Column(String(1000), nullable=False)
    # Store the enum values ("unsent", "sent"), not the member names
    status = Column(
        SQLEnum(MessageStatus, values_callable=lambda e: [m.value for m in e]),
        default=MessageStatus.UNSENT,
        nullable=False,
        index=True,
    )
    delivery_id = Column(String(255), nullable=True)
    sent_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utc_now_naive)

    def to_delivery_request(self) -> DeliveryRequest:
        """Build the outbound payload for this message."""
        return DeliveryRequest(to=self.phone_number, content=self.content)

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, to={self.phone_number}, status={self.status})>"


# Pydantic Schemas

class MessageResponse(BaseModel):
    """Schema for a message returned by the read endpoint."""
    id: str
    phone_number: str = Field(alias="phoneNumber")
    content: str
    status: MessageStatus
    delivery_id: Optional[str] = Field(None, alias="deliveryId")
    sent_at: Optional[datetime] = Field(None, alias="sentAt")

    class Config:
        from_attributes = True
        populate_by_name = True


class CacheRecord(BaseModel):
    """Delivery metadata written to the cache after a message is marked sent."""
    delivery_id: str = Field(serialization_alias="deliveryId")
    sent_at: str = Field(serialization_alias="sentAt")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
