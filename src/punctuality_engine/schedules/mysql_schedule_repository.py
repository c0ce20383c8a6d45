from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .model import ProductSchedule
from .repository import ScheduleRepository


def _parse_work_days(value: str) -> frozenset[int]:
    return frozenset(int(part) for part in str(value or "").split(",") if part.strip())


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, product_line: str) -> Optional[ProductSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT product_line, work_days, entry_time, exit_time, lunch_start_time,
                       lunch_duration_minutes, tolerance_minutes, works_on_holidays
                FROM product_schedules
                WHERE product_line=%s
                """,
                (product_line,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return ProductSchedule(
                product_line=r["product_line"],
                work_days=_parse_work_days(r["work_days"]),
                entry_time=normalize_mysql_time(r["entry_time"]),
                exit_time=normalize_mysql_time(r["exit_time"]),
                lunch_start_time=normalize_mysql_time(r["lunch_start_time"]),
                lunch_duration_minutes=int(r["lunch_duration_minutes"]),
                tolerance_minutes=int(r["tolerance_minutes"]),
                works_on_holidays=bool(r["works_on_holidays"]),
            )

    def save(self, schedule: ProductSchedule) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO product_schedules(product_line, work_days, entry_time, exit_time, lunch_start_time,
                                              lunch_duration_minutes, tolerance_minutes, works_on_holidays)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    work_days=VALUES(work_days),
                    entry_time=VALUES(entry_time),
                    exit_time=VALUES(exit_time),
                    lunch_start_time=VALUES(lunch_start_time),
                    lunch_duration_minutes=VALUES(lunch_duration_minutes),
                    tolerance_minutes=VALUES(tolerance_minutes),
                    works_on_holidays=VALUES(works_on_holidays)
                """,
                (
                    schedule.product_line,
                    ",".join(str(d) for d in sorted(schedule.work_days)),
                    schedule.entry_time,
                    schedule.exit_time,
                    schedule.lunch_start_time,
                    int(schedule.lunch_duration_minutes),
                    int(schedule.tolerance_minutes),
                    int(schedule.works_on_holidays),
                ),
            )
