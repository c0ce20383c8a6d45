from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.validators import require_non_empty, require_range
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .defaults import default_schedule
from .model import Holiday, ProductSchedule
from .repository import HolidayRepository, ScheduleRepository

logger = logging.getLogger(__name__)


def is_work_day_for(schedule: ProductSchedule, day: date, holidays: Sequence[Holiday]) -> bool:
    """Decide if ``day`` is a work day given an already resolved schedule."""
    if day.weekday() not in schedule.work_days:
        return False
    if schedule.works_on_holidays:
        return True
    return not any(h.applies_to(schedule.product_line) for h in holidays)


class HolidayCalendar:
    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def holidays_on(self, day: date) -> Sequence[Holiday]:
        return list(self._holidays.list_for_date(day))

    def is_holiday(self, product_line: str, day: date) -> bool:
        return any(h.applies_to(product_line) for h in self.holidays_on(day))

    def list_year(self, year: int) -> Sequence[Holiday]:
        return list(self._holidays.list_for_year(year))

    def add(
        self,
        *,
        current_role: Role,
        name: str,
        holiday_date: date,
        kind: str = "official",
        product_lines: Optional[Sequence[str]] = None,
    ) -> int:
        if not current_role.is_admin:
            raise AuthorizationError("Only administrators can manage holidays")
        name = require_non_empty(name, "Holiday name")
        if kind not in ("official", "corporate"):
            raise ValidationError("Holiday kind must be official or corporate")
        lines = list(product_lines) if product_lines else None
        return self._holidays.add(name=name, holiday_date=holiday_date, kind=kind, product_lines=lines)

    def delete(self, *, current_role: Role, holiday_id: int) -> None:
        if not current_role.is_admin:
            raise AuthorizationError("Only administrators can manage holidays")
        if not self._holidays.delete(int(holiday_id)):
            raise ValidationError("Holiday could not be deleted")


class ScheduleProvider:
    def __init__(self, schedules: ScheduleRepository, calendar: HolidayCalendar):
        self._schedules = schedules
        self._calendar = calendar

    def resolve(self, product_line: str) -> ProductSchedule:
        stored = self._schedules.get(product_line)
        if stored is not None:
            return stored
        logger.debug("No stored schedule for %s, using built-in default", product_line)
        return default_schedule(product_line)

    def is_work_day(self, product_line: str, day: date) -> bool:
        schedule = self.resolve(product_line)
        holidays: Sequence[Holiday] = () if schedule.works_on_holidays else self._calendar.holidays_on(day)
        return is_work_day_for(schedule, day, holidays)

    def save(self, *, current_role: Role, schedule: ProductSchedule) -> None:
        if not current_role.is_admin:
            raise AuthorizationError("Only administrators can change schedules")

        require_non_empty(schedule.product_line, "Product line")
        if schedule.entry_time >= schedule.exit_time:
            raise ValidationError("Entry time must be before exit time")
        if schedule.lunch_duration_minutes <= 0:
            raise ValidationError("Lunch duration must be positive")
        require_range(schedule.tolerance_minutes, "Tolerance", 0, 60)
        if not schedule.work_days or any(d < 0 or d > 6 for d in schedule.work_days):
            raise ValidationError("Work days must be weekday numbers between 0 and 6")

        self._schedules.save(schedule)
        logger.info("Schedule saved for %s", schedule.product_line)
