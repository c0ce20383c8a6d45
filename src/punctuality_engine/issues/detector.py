"""Periodic sweep that turns missing check-ins into attendance issues.

No single check-in can reveal that an employee never arrived, never left or
never came back from lunch; the sweep looks at each active employee's day as
of a given instant and synthesizes the missing-event issues.

Policies, schedules and the day's holidays are cached for one sweep only, so
a change made between two runs applies from the next run on.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..actions.engine import ActionEngine
from ..checkins.model import CheckInEvent
from ..checkins.repository import CheckInRepository
from ..checkins.sessions import build_sessions
from ..common.datetime_utils import combine_local, minutes_between
from ..core.enums import CheckInType, IssueType
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..policy.model import Policy
from ..policy.resolver import ConfigResolver
from ..schedules.model import Holiday, ProductSchedule
from ..schedules.service import HolidayCalendar, ScheduleProvider, is_work_day_for
from .model import AttendanceIssue
from .repository import IssueRepository

logger = logging.getLogger(__name__)


def detect_issues(
    *,
    employee: Employee,
    events: Sequence[CheckInEvent],
    schedule: ProductSchedule,
    policy: Policy,
    as_of: datetime,
) -> list[AttendanceIssue]:
    """Issues visible for ``employee`` on ``as_of``'s day, without touching any store."""

    day = as_of.date()
    sessions = build_sessions(events, day)
    types = {e.checkin_type for e in events if e.work_date == day}
    has_entry = CheckInType.ENTRY in types
    has_exit = CheckInType.EXIT in types

    def issue(issue_type: IssueType, expected: datetime, deadline: datetime) -> AttendanceIssue:
        return AttendanceIssue(
            user_id=employee.user_id,
            product_line=employee.product_line,
            issue_type=issue_type,
            issue_date=day,
            expected_time=expected,
            detected_at=as_of,
            minutes_overdue=minutes_between(as_of, deadline),
        )

    found: list[AttendanceIssue] = []

    expected_entry = combine_local(day, schedule.entry_time)
    entry_deadline = combine_local(day, schedule.entry_time, plus_minutes=policy.absence_rules.no_entry_after_minutes)
    if as_of > entry_deadline and not has_entry:
        found.append(issue(IssueType.NO_ENTRY, expected_entry, entry_deadline))

    expected_exit = combine_local(day, schedule.exit_time)
    if has_entry and not has_exit:
        exit_deadline = combine_local(day, schedule.exit_time, plus_minutes=policy.absence_rules.no_exit_after_minutes)
        if as_of > exit_deadline:
            found.append(issue(IssueType.NO_EXIT, expected_exit, exit_deadline))

        rules = policy.auto_close_rules
        close_deadline = combine_local(day, schedule.exit_time, plus_minutes=rules.close_after_minutes)
        if rules.mark_as_absent and as_of > close_deadline:
            found.append(issue(IssueType.AUTO_CLOSED, expected_exit, close_deadline))

    open_lunches = sessions.open_lunches()
    if open_lunches:
        lunch_out = open_lunches[-1].opening.timestamp
        return_deadline = lunch_out + timedelta(minutes=policy.lunch_rules.max_duration_minutes)
        if as_of > return_deadline:
            found.append(issue(IssueType.LATE_LUNCH_RETURN, return_deadline, return_deadline))

    return found


class IssueDetector:
    def __init__(
        self,
        employees: EmployeeRepository,
        checkins: CheckInRepository,
        issues: IssueRepository,
        schedules: ScheduleProvider,
        calendar: HolidayCalendar,
        resolver: ConfigResolver,
        engine: Optional[ActionEngine] = None,
    ):
        self._employees = employees
        self._checkins = checkins
        self._issues = issues
        self._schedules = schedules
        self._calendar = calendar
        self._resolver = resolver
        self._engine = engine

    def sweep(self, as_of: datetime) -> list[AttendanceIssue]:
        """Run one detection pass and return the issues created by it.

        A failure for one employee is logged and the sweep moves on.
        """

        day = as_of.date()
        schedules: dict[str, ProductSchedule] = {}
        policies: dict[str, Policy] = {}
        holidays: dict[date, Sequence[Holiday]] = {}

        created: list[AttendanceIssue] = []
        checked = failed = 0
        for employee in self._employees.list_active():
            if employee.role.is_admin or not employee.is_active or not employee.product_line:
                continue
            checked += 1
            try:
                created.extend(self._sweep_employee(employee, as_of, day, schedules, policies, holidays))
            except Exception:
                failed += 1
                logger.exception("Issue sweep failed for employee %s", employee.user_id)

        logger.info(
            "Issue sweep as of %s: employees=%d created=%d failed=%d",
            as_of.isoformat(timespec="minutes"),
            checked,
            len(created),
            failed,
        )
        return created

    def _sweep_employee(
        self,
        employee: Employee,
        as_of: datetime,
        day: date,
        schedules: dict[str, ProductSchedule],
        policies: dict[str, Policy],
        holidays: dict[date, Sequence[Holiday]],
    ) -> list[AttendanceIssue]:
        product_line = employee.product_line
        if product_line not in schedules:
            schedules[product_line] = self._schedules.resolve(product_line)
        schedule = schedules[product_line]

        if day not in holidays and not schedule.works_on_holidays:
            holidays[day] = self._calendar.holidays_on(day)
        if not is_work_day_for(schedule, day, holidays.get(day, ())):
            return []

        if product_line not in policies:
            policies[product_line] = self._resolver.resolve(product_line)
        policy = policies[product_line]

        events = self._checkins.list_for_user_and_date(employee.user_id, day)
        created: list[AttendanceIssue] = []
        for candidate in detect_issues(employee=employee, events=events, schedule=schedule, policy=policy, as_of=as_of):
            if self._issues.find(*candidate.key) is not None:
                logger.debug("%s issue already recorded for user %s", candidate.issue_type.value, employee.user_id)
                continue
            stored = self._issues.create_if_absent(candidate)
            if stored is None:
                logger.debug("Duplicate %s issue suppressed for user %s", candidate.issue_type.value, employee.user_id)
                continue
            created.append(stored)
            if self._engine is not None:
                self._notify(stored, employee, policy)
        return created

    def _notify(self, issue: AttendanceIssue, employee: Employee, policy: Policy) -> None:
        actions = self._engine.notify_absence(issue, employee, policy)
        for action in actions:
            if not action.success:
                logger.warning(
                    "Absence notification %s failed for issue %s: %s",
                    action.action_type.value,
                    issue.issue_id,
                    action.error,
                )
