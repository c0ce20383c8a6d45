from __future__ import annotations

from datetime import date, datetime, time, timedelta


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:MM (or HH:MM:SS) into a time."""
    parts = value.strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time string: {value!r}")
    seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
    return time(hour=int(parts[0]), minute=int(parts[1]), second=seconds)


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def minute_of_day(value: datetime | time) -> int:
    """Minutes since midnight; seconds are ignored."""
    return value.hour * 60 + value.minute


def combine_local(day: date, at: time, *, plus_minutes: int = 0) -> datetime:
    return datetime.combine(day, at) + timedelta(minutes=plus_minutes)


def minutes_between(later: datetime, earlier: datetime) -> int:
    """Whole minutes from ``earlier`` to ``later``, never negative."""
    return max(0, int((later - earlier).total_seconds() // 60))


def count_business_days(start: date, end: date) -> int:
    """Days in [start, end] that are not Sundays.

    Saturdays count: this is the denominator for attendance rates.
    """
    if end < start:
        return 0
    days = 0
    current = start
    while current <= end:
        if current.weekday() != 6:
            days += 1
        current += timedelta(days=1)
    return days


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
