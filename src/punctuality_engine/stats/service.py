from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..checkins.repository import CheckInRepository
from ..common.datetime_utils import count_business_days
from ..core.enums import CheckInStatus, CheckInType, IssueType
from ..core.exceptions import ValidationError
from ..employees.repository import EmployeeRepository
from ..issues.repository import IssueRepository


@dataclass(frozen=True)
class AttendanceStats:
    total_expected: int
    total_present: int
    total_absent: int
    total_late: int
    total_early: int
    attendance_rate: float
    punctuality_rate: float

    def to_dict(self) -> dict:
        return {
            "total_expected": self.total_expected,
            "total_present": self.total_present,
            "total_absent": self.total_absent,
            "total_late": self.total_late,
            "total_early": self.total_early,
            "attendance_rate": round(self.attendance_rate, 2),
            "punctuality_rate": round(self.punctuality_rate, 2),
        }


class AttendanceStatsService:
    """Attendance and punctuality rates over a date range.

    Expected attendance is active employees times business days, where only
    Sundays are excluded. Per product-line calendars are not applied here.
    """

    def __init__(self, checkins: CheckInRepository, issues: IssueRepository, employees: EmployeeRepository):
        self._checkins = checkins
        self._issues = issues
        self._employees = employees

    def summarize(self, start: date, end: date) -> AttendanceStats:
        if end < start:
            raise ValidationError("End date must not be before start date")

        employees = len(self._employees.list_active())
        expected = employees * count_business_days(start, end)

        entries = self._checkins.list_between(start=start, end=end, checkin_type=CheckInType.ENTRY)
        present = len(entries)
        late = sum(1 for e in entries if e.status == CheckInStatus.LATE)
        early = sum(1 for e in entries if e.status == CheckInStatus.EARLY)
        absent = len(self._issues.list(start=start, end=end, resolved=False, issue_type=IssueType.NO_ENTRY))

        on_time = present - late - early
        return AttendanceStats(
            total_expected=expected,
            total_present=present,
            total_absent=absent,
            total_late=late,
            total_early=early,
            attendance_rate=(present / expected) * 100 if expected else 0.0,
            punctuality_rate=(on_time / present) * 100 if present else 0.0,
        )
