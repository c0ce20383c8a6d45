from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import IssueType


@dataclass(frozen=True)
class AttendanceIssue:
    """A missing event detected by the sweep.

    At most one issue exists per (user_id, issue_type, issue_date), so there is
    never more than one unresolved. Resolution is terminal and a resolved issue
    is not detected again.
    """

    user_id: int
    issue_type: IssueType
    issue_date: date
    expected_time: datetime
    detected_at: datetime
    minutes_overdue: int = 0
    product_line: Optional[str] = None
    issue_id: Optional[int] = None
    resolved: bool = False
    resolved_by: Optional[str] = None
    resolved_at: Optional[datetime] = None
    resolution: Optional[str] = None

    @property
    def key(self) -> tuple[int, IssueType, date]:
        return self.user_id, self.issue_type, self.issue_date
