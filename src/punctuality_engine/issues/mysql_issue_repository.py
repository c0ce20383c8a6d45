from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import IssueType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceIssue
from .repository import IssueRepository

_COLUMNS = """
    issue_id, user_id, product_line, issue_type, issue_date, expected_time, detected_at,
    minutes_overdue, resolved, resolved_by, resolved_at, resolution
"""


def _to_issue(r: dict) -> AttendanceIssue:
    return AttendanceIssue(
        issue_id=int(r["issue_id"]),
        user_id=int(r["user_id"]),
        product_line=r.get("product_line"),
        issue_type=IssueType(r["issue_type"]),
        issue_date=r["issue_date"],
        expected_time=r["expected_time"],
        detected_at=r["detected_at"],
        minutes_overdue=int(r.get("minutes_overdue") or 0),
        resolved=bool(r.get("resolved")),
        resolved_by=r.get("resolved_by"),
        resolved_at=r.get("resolved_at"),
        resolution=r.get("resolution"),
    )


class MySQLIssueRepository(IssueRepository):
    """Issue store.

    The unique key (user_id, issue_type, issue_date) makes ``create_if_absent``
    a single conditional insert, so concurrent sweeps cannot duplicate an issue.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find(self, user_id: int, issue_type: IssueType, issue_date: date) -> Optional[AttendanceIssue]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_issues
                WHERE user_id=%s AND issue_type=%s AND issue_date=%s
                LIMIT 1
                """,
                (int(user_id), issue_type.value, issue_date),
            )
            r = fetchone(cur)
            return _to_issue(r) if r else None

    def create_if_absent(self, issue: AttendanceIssue) -> Optional[AttendanceIssue]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO attendance_issues(user_id, product_line, issue_type, issue_date, expected_time,
                                                     detected_at, minutes_overdue, resolved)
                VALUES(%s,%s,%s,%s,%s,%s,%s,0)
                """,
                (
                    issue.user_id,
                    issue.product_line,
                    issue.issue_type.value,
                    issue.issue_date,
                    issue.expected_time,
                    issue.detected_at,
                    issue.minutes_overdue,
                ),
            )
            if cur.rowcount == 0:
                return None
            return replace(issue, issue_id=int(cur.lastrowid))

    def get_by_id(self, issue_id: int) -> Optional[AttendanceIssue]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_issues WHERE issue_id=%s", (int(issue_id),))
            r = fetchone(cur)
            return _to_issue(r) if r else None

    def resolve(self, issue_id: int, *, resolved_by: str, resolution: str, resolved_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_issues
                SET resolved=1, resolved_by=%s, resolved_at=%s, resolution=%s
                WHERE issue_id=%s AND resolved=0
                """,
                (resolved_by, resolved_at, resolution, int(issue_id)),
            )
            return cur.rowcount > 0

    def list(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        resolved: Optional[bool] = None,
        user_id: Optional[int] = None,
        product_line: Optional[str] = None,
        issue_type: Optional[IssueType] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceIssue]:
        clauses: list[str] = []
        params: list[object] = []
        if start is not None:
            clauses.append("issue_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("issue_date <= %s")
            params.append(end)
        if resolved is not None:
            clauses.append("resolved=%s")
            params.append(int(resolved))
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if product_line:
            clauses.append("product_line=%s")
            params.append(product_line)
        if issue_type is not None:
            clauses.append("issue_type=%s")
            params.append(issue_type.value)

        sql = f"SELECT {_COLUMNS} FROM attendance_issues"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY detected_at DESC"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_issue(r) for r in fetchall(cur)]
