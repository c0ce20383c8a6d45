from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import CheckInStatus, CheckInType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_json, to_json
from .model import CheckInEvent, GeoPoint
from .repository import CheckInRepository

_COLUMNS = """
    checkin_id, user_id, kiosk_id, kiosk_name, product_line, checkin_type, checked_at,
    latitude, longitude, status, minutes_late, minutes_early, notes, requires_comment, actions_taken
"""


def _to_event(r: dict) -> CheckInEvent:
    location = None
    if r.get("latitude") is not None and r.get("longitude") is not None:
        location = GeoPoint(latitude=float(r["latitude"]), longitude=float(r["longitude"]))
    return CheckInEvent(
        checkin_id=int(r["checkin_id"]),
        user_id=int(r["user_id"]),
        kiosk_id=r["kiosk_id"],
        kiosk_name=r.get("kiosk_name"),
        product_line=r["product_line"],
        checkin_type=CheckInType(r["checkin_type"]),
        timestamp=r["checked_at"],
        location=location,
        status=CheckInStatus(r["status"]),
        minutes_late=int(r.get("minutes_late") or 0),
        minutes_early=int(r.get("minutes_early") or 0),
        notes=r.get("notes"),
        requires_comment=bool(r.get("requires_comment")),
        actions_taken=tuple(from_json(r.get("actions_taken")) or ()),
    )


class MySQLCheckInRepository(CheckInRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, checkin_id: int) -> Optional[CheckInEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM checkins WHERE checkin_id=%s", (int(checkin_id),))
            r = fetchone(cur)
            return _to_event(r) if r else None

    def list_for_user_and_date(self, user_id: int, work_date: date) -> Sequence[CheckInEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM checkins
                WHERE user_id=%s AND checked_at >= %s AND checked_at < %s
                ORDER BY checked_at ASC
                """,
                (int(user_id), datetime.combine(work_date, time.min), datetime.combine(work_date + timedelta(days=1), time.min)),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def list_between(
        self,
        *,
        start: date,
        end: date,
        checkin_type: Optional[CheckInType] = None,
    ) -> Sequence[CheckInEvent]:
        clauses = ["checked_at BETWEEN %s AND %s"]
        params: list[object] = [datetime.combine(start, time.min), datetime.combine(end, time.max)]
        if checkin_type is not None:
            clauses.append("checkin_type=%s")
            params.append(checkin_type.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM checkins WHERE {' AND '.join(clauses)} ORDER BY checked_at ASC",
                tuple(params),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def create(self, event: CheckInEvent) -> int:
        if event.status is None:
            raise ValueError("Check-in must be classified before it is stored")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO checkins(user_id, kiosk_id, kiosk_name, product_line, checkin_type, checked_at,
                                     latitude, longitude, status, minutes_late, minutes_early, notes,
                                     requires_comment)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    event.user_id,
                    event.kiosk_id,
                    event.kiosk_name,
                    event.product_line,
                    event.checkin_type.value,
                    event.timestamp,
                    event.location.latitude if event.location else None,
                    event.location.longitude if event.location else None,
                    event.status.value,
                    event.minutes_late,
                    event.minutes_early,
                    event.notes,
                    int(event.requires_comment),
                ),
            )
            return int(cur.lastrowid)

    def set_requires_comment(self, checkin_id: int, required: bool) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE checkins SET requires_comment=%s WHERE checkin_id=%s",
                (int(required), int(checkin_id)),
            )

    def set_notes(self, checkin_id: int, *, notes: str, requires_comment: bool) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE checkins SET notes=%s, requires_comment=%s WHERE checkin_id=%s",
                (notes, int(requires_comment), int(checkin_id)),
            )

    def append_actions(self, checkin_id: int, actions: Sequence[Mapping[str, Any]]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT actions_taken FROM checkins WHERE checkin_id=%s FOR UPDATE", (int(checkin_id),))
            r = fetchone(cur)
            current = list(from_json(r["actions_taken"]) or []) if r else []
            cur.execute(
                "UPDATE checkins SET actions_taken=%s WHERE checkin_id=%s",
                (to_json(current + [dict(a) for a in actions]), int(checkin_id)),
            )
