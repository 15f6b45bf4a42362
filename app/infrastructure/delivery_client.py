"""
HTTP client that submits messages to the external delivery endpoint.
"""

import logging
from typing import Optional

import httpx

from app.config.settings import Settings
from app.domain.delivery import DeliveryRequest, DeliveryResponse, validate_delivery_request
from app.domain.errors import DeliveryError

logger = logging.getLogger(__name__)

AUTH_HEADER = "x-ins-auth-key"


class WebhookDeliveryClient:
    """Posts one message per request and returns the endpoint's message id."""

    def __init__(
        self,
        base_url: str,
        path: str,
        auth_key: str,
        timeout: float,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.path = path
        self.http = httpx.AsyncClient(
            base_url=base_url,
            headers={AUTH_HEADER: auth_key},
            timeout=timeout,
            transport=transport,
        )
        logger.info(f"Delivery client initialized for {base_url}{path}")

    @classmethod
    def from_settings(cls, settings: Settings) -> "WebhookDeliveryClient":
        return cls(
            base_url=settings.delivery_url,
            path=settings.delivery_path,
            auth_key=settings.delivery_auth_key,
            timeout=settings.delivery_timeout_seconds,
        )

    async def send(self, request: DeliveryRequest) -> str:
        """
        Submit a message to the delivery endpoint.

        Args:
            request: Recipient and content to deliver

        Returns:
            Delivery identifier assigned by the endpoint

        Raises:
            MessageValidationError: If recipient or content is malformed
            DeliveryError: If the endpoint is unreachable or rejects the message
        """
        validate_delivery_request(request)

        try:
            response = await self.http.post(self.path, json=request.model_dump())
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DeliveryError(
                f"delivery endpoint returned {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise DeliveryError(f"delivery request failed: {e!r}") from e

        try:
            body = DeliveryResponse.model_validate(response.json())
        except ValueError as e:
            raise DeliveryError("delivery endpoint returned an invalid body") from e

        if not body.message_id:
            raise DeliveryError("delivery endpoint did not return a messageId")

        logger.info(f"Message delivered. Status: {response.status_code}, id: {body.message_id}")
        return body.message_id

    async def aclose(self) -> None:
        await self.http.aclose()
