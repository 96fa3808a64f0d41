"""Webhook notification sender.

Posts every notification as JSON to a configured URL, for forwarding to
email or chat workflows.
"""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

import httpx

from docman.config import NotificationConfig
from docman.logging import get_logger
from docman.notifications.sender import NotificationContext, NotificationSender

logger = get_logger(__name__)


class WebhookNotificationSender(NotificationSender):
    """Sends notifications to an HTTP webhook."""

    def __init__(self, webhook_url: str, auth_header: str | None = None, timeout_seconds: int = 10) -> None:
        self.webhook_url = webhook_url
        self.auth_header = auth_header
        self.timeout_seconds = timeout_seconds
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(cls, config: NotificationConfig) -> WebhookNotificationSender:
        if not config.webhook_url:
            raise ValueError("webhook_url is not configured")
        return cls(
            webhook_url=config.webhook_url,
            auth_header=config.webhook_auth_header,
            timeout_seconds=config.timeout_seconds,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_seconds)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def send(self, recipient_id: UUID, context: NotificationContext) -> bool:
        """Post the notification to the webhook.

        Returns True if the webhook accepted it, False otherwise.
        """
        payload = {
            "recipient_id": str(recipient_id),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **context.to_dict(),
        }
        headers = {"Content-Type": "application/json"}
        if self.auth_header:
            headers["Authorization"] = self.auth_header

        try:
            client = await self._get_client()
            response = await client.post(self.webhook_url, json=payload, headers=headers)
        except httpx.RequestError as e:
            logger.error(
                "notification_webhook_error",
                type=context.type.value,
                error=str(e),
            )
            return False

        if response.is_success:
            logger.info(
                "notification_webhook_sent",
                type=context.type.value,
                status_code=response.status_code,
            )
            return True

        logger.warning(
            "notification_webhook_failed",
            type=context.type.value,
            status_code=response.status_code,
            response_text=response.text[:200],
        )
        return False
