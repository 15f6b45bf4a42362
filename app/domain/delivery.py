"""
Payload schemas exchanged with the delivery endpoint.
"""

import re

from pydantic import BaseModel, Field

from app.domain.errors import MessageValidationError

MAX_CONTENT_LENGTH = 100

# Turkish mobile numbers, e.g. +905551234567
PHONE_NUMBER_PATTERN = re.compile(r"^\+905\d{9}$")


class DeliveryRequest(BaseModel):
    """Outbound payload for a single message."""
    to: str
    content: str


class DeliveryResponse(BaseModel):
    """Acknowledgment returned by the delivery endpoint."""
    message: str = ""
    message_id: str = Field("", alias="messageId")

    class Config:
        # Some endpoints return a numeric messageId
        coerce_numbers_to_str = True


def validate_delivery_request(request: DeliveryRequest) -> None:
    """
    Check recipient format and content length before transmission.

    Raises:
        MessageValidationError: If the request would be rejected
    """
    if not request.to:
        raise MessageValidationError("phone number is required")

    if not PHONE_NUMBER_PATTERN.match(request.to):
        raise MessageValidationError("invalid phone number format, expected +905xxxxxxxxx")

    if not request.content:
        raise MessageValidationError("content cannot be empty")

    if len(request.content) > MAX_CONTENT_LENGTH:
        raise MessageValidationError(
            f"content exceeds maximum length of {MAX_CONTENT_LENGTH} characters"
        )
