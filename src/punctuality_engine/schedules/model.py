from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class ProductSchedule:
    """Weekly work calendar of a product line.

    ``work_days`` uses ``date.weekday()`` numbering (Monday=0 ... Sunday=6).
    """

    product_line: str
    work_days: FrozenSet[int]
    entry_time: time
    exit_time: time
    lunch_start_time: time
    lunch_duration_minutes: int
    tolerance_minutes: int
    works_on_holidays: bool = False


@dataclass(frozen=True)
class Holiday:
    holiday_id: int
    name: str
    holiday_date: date
    kind: str = "official"
    # None means the holiday applies to every product line.
    product_lines: Optional[FrozenSet[str]] = None

    def applies_to(self, product_line: str) -> bool:
        return self.product_lines is None or product_line in self.product_lines
