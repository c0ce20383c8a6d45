from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    user_id, full_name, email, role, is_active, product_line, assigned_kiosk_id,
    assigned_kiosk_name, supervisor_id, supervisor_name, total_late_minutes
"""


def _to_employee(r: dict) -> Employee:
    return Employee(
        user_id=int(r["user_id"]),
        full_name=r["full_name"],
        email=r.get("email"),
        role=Role(r["role"]),
        is_active=bool(r["is_active"]),
        product_line=r.get("product_line"),
        assigned_kiosk_id=r.get("assigned_kiosk_id"),
        assigned_kiosk_name=r.get("assigned_kiosk_name"),
        supervisor_id=int(r["supervisor_id"]) if r.get("supervisor_id") else None,
        supervisor_name=r.get("supervisor_name"),
        total_late_minutes=int(r.get("total_late_minutes") or 0),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_active(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE is_active=1 ORDER BY user_id ASC")
            return [_to_employee(r) for r in fetchall(cur)]

    def list_active_admin_ids(self) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id FROM employees WHERE is_active=1 AND role IN (%s, %s)",
                (Role.ADMIN.value, Role.SUPER_ADMIN.value),
            )
            return [int(r["user_id"]) for r in fetchall(cur)]

    def add_late_minutes(self, user_id: int, minutes: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET total_late_minutes = total_late_minutes + %s WHERE user_id=%s",
                (int(minutes), int(user_id)),
            )
