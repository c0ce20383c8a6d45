from __future__ import annotations

from typing import Sequence

from ..core.enums import NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, from_json, to_json
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, notification: Notification) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(notification_type, title, message, user_id, source_id, recipient_ids)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    notification.notification_type.value,
                    notification.title,
                    notification.message,
                    notification.user_id,
                    notification.source_id,
                    to_json(list(notification.recipient_ids)),
                ),
            )
            return int(cur.lastrowid)

    def list_for_recipient(self, user_id: int, *, limit: int = 50) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT notification_id, notification_type, title, message, user_id, source_id,
                       recipient_ids, is_read, created_at
                FROM notifications
                WHERE JSON_CONTAINS(recipient_ids, CAST(%s AS JSON))
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (str(int(user_id)), int(limit)),
            )
            return [
                Notification(
                    notification_id=int(r["notification_id"]),
                    notification_type=NotificationType(r["notification_type"]),
                    title=r["title"],
                    message=r["message"],
                    user_id=r.get("user_id"),
                    source_id=r.get("source_id"),
                    recipient_ids=tuple(from_json(r["recipient_ids"]) or ()),
                    is_read=bool(r["is_read"]),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]
