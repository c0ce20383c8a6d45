from __future__ import annotations

from typing import Protocol, Sequence

from .model import Notification


class NotificationRepository(Protocol):
    def create(self, notification: Notification) -> int:
        raise NotImplementedError

    def list_for_recipient(self, user_id: int, *, limit: int = 50) -> Sequence[Notification]:
        raise NotImplementedError
