from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import NotificationType
from .model import SlackDelivery


class NotificationSink(Protocol):
    """Delivery contract used by the action engine.

    Implementations may raise; the engine turns any exception into a failed
    audit action.
    """

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
        """Store an in-app notification and return its id."""

        raise NotImplementedError

    def post_slack_message(self, webhook_url: str, message: Mapping[str, Any]) -> SlackDelivery:
        raise NotImplementedError
