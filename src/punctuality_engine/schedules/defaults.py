"""Built-in schedules used when no schedule is stored for a product line."""

from __future__ import annotations

from datetime import time

from ..core.constants import DEFAULT_LUNCH_DURATION_MINUTES, DEFAULT_TOLERANCE_MINUTES
from .model import ProductSchedule

MON_FRI = frozenset(range(0, 5))
MON_SAT = frozenset(range(0, 6))
ALL_WEEK = frozenset(range(0, 7))

# product line -> (work days, entry, exit, lunch start, works on holidays)
_DEFAULTS = {
    "BA": (ALL_WEEK, time(7, 0), time(19, 0), time(14, 0), True),
    "Aviva_Contigo": (MON_SAT, time(8, 0), time(18, 0), time(14, 0), False),
    "Casa_Marchand": (MON_FRI, time(9, 0), time(18, 0), time(14, 0), False),
    "Construrama": (MON_SAT, time(8, 0), time(17, 0), time(13, 0), False),
    "Disensa": (MON_SAT, time(8, 0), time(18, 0), time(14, 0), False),
}
_FALLBACK = (MON_FRI, time(8, 0), time(18, 0), time(14, 0), False)


def default_schedule(product_line: str) -> ProductSchedule:
    work_days, entry, exit_, lunch_start, holidays = _DEFAULTS.get(product_line, _FALLBACK)
    return ProductSchedule(
        product_line=product_line,
        work_days=work_days,
        entry_time=entry,
        exit_time=exit_,
        lunch_start_time=lunch_start,
        lunch_duration_minutes=DEFAULT_LUNCH_DURATION_MINUTES,
        tolerance_minutes=DEFAULT_TOLERANCE_MINUTES,
        works_on_holidays=holidays,
    )
