from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Holiday, ProductSchedule


class ScheduleRepository(Protocol):
    def get(self, product_line: str) -> Optional[ProductSchedule]:
        raise NotImplementedError

    def save(self, schedule: ProductSchedule) -> None:
        """Create or replace the schedule of ``schedule.product_line``."""

        raise NotImplementedError


class HolidayRepository(Protocol):
    def list_for_date(self, day: date) -> Sequence[Holiday]:
        raise NotImplementedError

    def list_for_year(self, year: int) -> Sequence[Holiday]:
        raise NotImplementedError

    def add(self, *, name: str, holiday_date: date, kind: str, product_lines: Optional[Sequence[str]]) -> int:
        raise NotImplementedError

    def delete(self, holiday_id: int) -> bool:
        raise NotImplementedError
