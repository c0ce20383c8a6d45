from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.enums import NotificationType
from .model import Notification, SlackDelivery
from .repository import NotificationRepository
from .sink import NotificationSink
from .slack import SlackWebhookClient


class NotificationDispatcher(NotificationSink):
    """Concrete sink: in-app notifications in the store, Slack over HTTP."""

    def __init__(self, notifications: NotificationRepository, slack: SlackWebhookClient):
        self._notifications = notifications
        self._slack = slack

    def notify(
        self,
        *,
        recipient_ids: Sequence[int],
        title: str,
        message: str,
        source_id: Optional[int],
        notification_type: NotificationType,
        user_id: Optional[int] = None,
    ) -> int:
        return self._notifications.create(
            Notification(
                notification_type=notification_type,
                title=title,
                message=message,
                recipient_ids=tuple(int(r) for r in recipient_ids),
                user_id=user_id,
                source_id=source_id,
            )
        )

    def post_slack_message(self, webhook_url: str, message: Mapping[str, Any]) -> SlackDelivery:
        return self._slack.post(webhook_url, message)
