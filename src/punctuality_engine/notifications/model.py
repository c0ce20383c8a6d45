from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationType


@dataclass(frozen=True)
class Notification:
    """In-app notification fanned out to one or more recipients."""

    notification_type: NotificationType
    title: str
    message: str
    recipient_ids: tuple[int, ...]
    user_id: Optional[int] = None
    source_id: Optional[int] = None
    notification_id: Optional[int] = None
    is_read: bool = False
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class SlackDelivery:
    ok: bool
    status_code: Optional[int] = None
    error: Optional[str] = None
