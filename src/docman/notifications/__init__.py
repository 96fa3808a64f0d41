"""Notification delivery for DocMan.

Senders are selected from NotificationConfig: in-app storage, an HTTP
webhook, or both combined.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docman.config import NotificationConfig
from docman.notifications.sender import (
    CompositeNotificationSender,
    InAppNotificationSender,
    NotificationContext,
    NotificationSender,
)
from docman.notifications.webhook import WebhookNotificationSender


def build_notification_sender(
    config: NotificationConfig,
    session_factory: async_sessionmaker[AsyncSession],
) -> NotificationSender | None:
    """Build the sender described by the configuration.

    Returns:
        A single sender, a composite of several, or None when every
        channel is disabled.
    """
    senders: list[NotificationSender] = []
    if config.in_app_enabled:
        senders.append(InAppNotificationSender(session_factory))
    if config.webhook_url:
        senders.append(WebhookNotificationSender.from_config(config))

    if not senders:
        return None
    if len(senders) == 1:
        return senders[0]
    return CompositeNotificationSender(senders)


__all__ = [
    "CompositeNotificationSender",
    "InAppNotificationSender",
    "NotificationContext",
    "NotificationSender",
    "WebhookNotificationSender",
    "build_notification_sender",
]
