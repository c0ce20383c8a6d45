from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import IssueType
from .model import AttendanceIssue


class IssueRepository(Protocol):
    def find(self, user_id: int, issue_type: IssueType, issue_date: date) -> Optional[AttendanceIssue]:
        """Issue for the key, resolved or not."""

        raise NotImplementedError

    def create_if_absent(self, issue: AttendanceIssue) -> Optional[AttendanceIssue]:
        """Insert unless an issue with the same key exists.

        Returns the stored issue (with its id), or None when suppressed.
        """

        raise NotImplementedError

    def get_by_id(self, issue_id: int) -> Optional[AttendanceIssue]:
        raise NotImplementedError

    def resolve(self, issue_id: int, *, resolved_by: str, resolution: str, resolved_at: datetime) -> bool:
        """Mark an open issue resolved. False when missing or already resolved."""

        raise NotImplementedError

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
        """Newest detection first."""

        raise NotImplementedError
