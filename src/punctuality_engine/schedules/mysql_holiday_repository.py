from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, from_json, to_json
from .model import Holiday
from .repository import HolidayRepository


def _to_holiday(r: dict) -> Holiday:
    lines = from_json(r.get("product_lines"))
    return Holiday(
        holiday_id=int(r["holiday_id"]),
        name=r["name"],
        holiday_date=r["holiday_date"],
        kind=r.get("kind") or "official",
        product_lines=frozenset(lines) if lines else None,
    )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_date(self, day: date) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT holiday_id, name, holiday_date, kind, product_lines FROM holidays WHERE holiday_date=%s",
                (day,),
            )
            return [_to_holiday(r) for r in fetchall(cur)]

    def list_for_year(self, year: int) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holiday_id, name, holiday_date, kind, product_lines
                FROM holidays
                WHERE holiday_date BETWEEN %s AND %s
                ORDER BY holiday_date ASC
                """,
                (date(year, 1, 1), date(year, 12, 31)),
            )
            return [_to_holiday(r) for r in fetchall(cur)]

    def add(self, *, name: str, holiday_date: date, kind: str, product_lines: Optional[Sequence[str]]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO holidays(name, holiday_date, kind, product_lines) VALUES(%s,%s,%s,%s)",
                (name, holiday_date, kind, to_json(list(product_lines)) if product_lines else None),
            )
            return int(cur.lastrowid)

    def delete(self, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            return cur.rowcount > 0
