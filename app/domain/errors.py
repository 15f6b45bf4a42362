"""
Error types raised by the dispatcher's collaborators.
"""


class DispatcherError(Exception):
    """Base class for dispatcher errors."""


class MessageValidationError(DispatcherError):
    """Recipient or content rejected before submission."""


class DeliveryError(DispatcherError):
    """Delivery endpoint unreachable or rejected the message."""


class StoreError(DispatcherError):
    """Message store read or write failed."""


class MessageNotFoundError(StoreError):
    """No message exists with the given identifier."""

    def __init__(self, message_id: str):
        super().__init__(f"Message not found: {message_id}")
        self.message_id = message_id


class CacheError(DispatcherError):
    """Cache write failed."""
